"""Map sections stamped onto an edge, corner or the middle of a level."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto


class HorizontalPlacement(Enum):
    LEFT = auto()
    CENTER = auto()
    RIGHT = auto()


class VerticalPlacement(Enum):
    TOP = auto()
    CENTER = auto()
    BOTTOM = auto()


@dataclass(frozen=True)
class PrefabSection:
    template: str
    width: int
    height: int
    placement: tuple[HorizontalPlacement, VerticalPlacement]


UNDERGROUND_FORT = PrefabSection(
    template="""
###############

   ############
   #         ##
   #  g   g  ##
   ^         ##
   #   %     ##
   #         ##
   ####   #####
   #         ##
   #  o   ^  ##
   ^         ##
   #     !   ##
   #         ##
   ####   #####
   #         ##
   #  g   o  ##
   ^    ^    ##
   #         ##
   #  %   !  ##
   ####   #####
   #         ##
   #   ^ ^   ##
   ^    o    ##
   #   ^ ^   ##
   #         ##
   ####   #####
   #         ##
   #  g   g  ##
   ^         ##
   #   !     ##
   #         ##
   ####   #####
   #         ##
   #  o   %  ##
   ^         ##
   #         ##
   #   g     ##
   ############



###############
""",
    width=15,
    height=43,
    placement=(HorizontalPlacement.RIGHT, VerticalPlacement.TOP),
)
