"""Hand-made map templates and the stage that stamps them onto a level."""

from .builder import PrefabBuilder
from .levels import GUARD_POST, PrefabLevel
from .rooms import ALL_VAULTS, PrefabRoom
from .sections import UNDERGROUND_FORT, PrefabSection

__all__ = [
    "ALL_VAULTS",
    "GUARD_POST",
    "UNDERGROUND_FORT",
    "PrefabBuilder",
    "PrefabLevel",
    "PrefabRoom",
    "PrefabSection",
]
