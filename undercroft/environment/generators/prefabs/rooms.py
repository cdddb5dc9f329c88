"""Small vaults dropped into open floor pockets."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class PrefabRoom:
    """A vault template and the depths it may appear at (inclusive)."""

    template: str
    width: int
    height: int
    first_depth: int
    last_depth: int

    def allowed_at(self, depth: int) -> bool:
        return self.first_depth <= depth <= self.last_depth


TOTALLY_NOT_A_TRAP = PrefabRoom(
    template="""

 ^^^
 ^!^
 ^^^

""",
    width=5,
    height=5,
    first_depth=0,
    last_depth=100,
)

SILLY_SMILE = PrefabRoom(
    template="""

 ^  ^
  #

 ###

""",
    width=6,
    height=6,
    first_depth=0,
    last_depth=100,
)

CHECKERBOARD = PrefabRoom(
    template="""

 g#%#
 #!#
 ^# #

""",
    width=6,
    height=6,
    first_depth=0,
    last_depth=100,
)

GOBLIN_DEN = PrefabRoom(
    template="""

 g g
  %
 g g

""",
    width=5,
    height=5,
    first_depth=3,
    last_depth=100,
)

ALL_VAULTS: tuple[PrefabRoom, ...] = (
    TOTALLY_NOT_A_TRAP,
    SILLY_SMILE,
    CHECKERBOARD,
    GOBLIN_DEN,
)
