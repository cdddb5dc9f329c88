"""Whole-level templates."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class PrefabLevel:
    template: str
    width: int
    height: int


GUARD_POST = PrefabLevel(
    template="""
##############################
#          #       #         #
#  @       #   g   #    !    #
#          #       #         #
#          ####^####         #
#                            #
#   #####          #######   #
#   #   #    %     #     #   #
#   # o #          #  >  #   #
#   #   #    ^     #     #   #
#   ## ##          ### ###   #
#                            #
#      g          o          #
##############################
""",
    width=30,
    height=14,
)
