"""Level generation as a chain of composable stages.

Every level is produced by a BuilderChain: exactly one initial stage lays the
map down, then meta stages refine it in order. The stages:

Initial layouts
- SimpleMapBuilder, BspDungeonBuilder, BspInteriorBuilder: rooms and corridors
- CellularAutomataBuilder, DrunkardsWalkBuilder, DLABuilder: organic caves
- MazeBuilder: a recursive-backtracker maze
- VoronoiBuilder: passages along Voronoi cell borders
- PrefabBuilder.level(): a hand-drawn level

Meta stages
- RoomBasedSpawner, RoomBasedStartingPosition, RoomBasedStairs
- AreaStartingPosition, CullUnreachable, VoronoiSpawning, DistantExit
- PrefabBuilder.room_vaults() and PrefabBuilder.sectional()
- WaveformCollapseBuilder: re-synthesises the map from its own chunks

The factory module names the preset chains and picks one at random per depth.
"""

from .area_based import (
    AreaStartingPosition,
    CullUnreachable,
    DistantExit,
    VoronoiSpawning,
    XStart,
    YStart,
)
from .bsp_dungeon import BspDungeonBuilder
from .bsp_interior import BspInteriorBuilder
from .build_data import BuildData
from .cellular_automata import CellularAutomataBuilder
from .chain import (
    BuilderChain,
    BuilderChainConfigError,
    InitialMapBuilder,
    MapBuilderError,
    MetaMapBuilder,
    MissingRoomsError,
    MissingStartError,
    NoValidStartError,
)
from .common import DistanceAlgorithm, Symmetry
from .dla import DLAAlgorithm, DLABuilder
from .drunkard import DrunkardSettings, DrunkardsWalkBuilder, DrunkSpawnMode
from .factory import BuilderChains, build_level, create_chain, random_builder
from .maze import MazeBuilder
from .prefabs.builder import PrefabBuilder
from .room_based import RoomBasedSpawner, RoomBasedStairs, RoomBasedStartingPosition
from .simple_map import SimpleMapBuilder
from .spawning import EntitySpawner
from .voronoi import VoronoiBuilder
from .wfc.builder import WaveformCollapseBuilder

__all__ = [
    "AreaStartingPosition",
    "BspDungeonBuilder",
    "BspInteriorBuilder",
    "BuildData",
    "BuilderChain",
    "BuilderChainConfigError",
    "BuilderChains",
    "CellularAutomataBuilder",
    "CullUnreachable",
    "DLAAlgorithm",
    "DLABuilder",
    "DistanceAlgorithm",
    "DistantExit",
    "DrunkSpawnMode",
    "DrunkardSettings",
    "DrunkardsWalkBuilder",
    "EntitySpawner",
    "InitialMapBuilder",
    "MapBuilderError",
    "MazeBuilder",
    "MetaMapBuilder",
    "MissingRoomsError",
    "MissingStartError",
    "NoValidStartError",
    "PrefabBuilder",
    "RoomBasedSpawner",
    "RoomBasedStairs",
    "RoomBasedStartingPosition",
    "SimpleMapBuilder",
    "Symmetry",
    "VoronoiBuilder",
    "VoronoiSpawning",
    "WaveformCollapseBuilder",
    "XStart",
    "YStart",
    "build_level",
    "create_chain",
    "random_builder",
]
