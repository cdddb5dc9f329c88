"""Named builder chains and random level selection.

Each BuilderChains member pairs an initial stage with the meta stages that
finish its kind of layout:

- room-based layouts pick a start room, fill the other rooms with spawns and
  put the stairs in the last room
- area-based layouts start near the map center, cull what the start can't
  reach, spawn per noise region and put the exit as far away as possible
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from enum import Enum
from typing import TYPE_CHECKING

from undercroft import config
from undercroft.util.rng import RNGProvider

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
from .cellular_automata import CellularAutomataBuilder
from .chain import BuilderChain, InitialMapBuilder
from .common import DistanceAlgorithm
from .dla import DLAAlgorithm, DLABuilder
from .drunkard import DrunkardsWalkBuilder
from .maze import MazeBuilder
from .prefabs.builder import PrefabBuilder
from .prefabs.sections import UNDERGROUND_FORT
from .room_based import RoomBasedSpawner, RoomBasedStairs, RoomBasedStartingPosition
from .simple_map import SimpleMapBuilder
from .voronoi import VoronoiBuilder
from .wfc.builder import WaveformCollapseBuilder

if TYPE_CHECKING:
    from undercroft.types import RandomSeed
    from undercroft.util.rng import RNG

logger = logging.getLogger(__name__)


class BuilderChains(Enum):
    SIMPLE_MAP = "simple_map"
    BSP_DUNGEON = "bsp_dungeon"
    BSP_INTERIOR = "bsp_interior"
    CELLULAR_AUTOMATA = "cellular_automata"
    DRUNKARDS_WALK = "drunkards_walk"
    DIFFUSION_LIMITED_AGGREGATION = "diffusion_limited_aggregation"
    MAZE = "maze"
    VORONOI = "voronoi"
    WAVEFORM_COLLAPSE = "waveform_collapse"
    PREFAB = "prefab"

    @classmethod
    def parse(cls, name: str | BuilderChains) -> BuilderChains:
        """Look a preset up by member or by name, case-insensitively.

        Raises:
            ValueError: If no preset has that name.
        """
        if isinstance(name, cls):
            return name
        key = str(name).strip().lower().replace("-", "_")
        for member in cls:
            if member.value == key:
                return member
        valid = ", ".join(member.value for member in cls)
        raise ValueError(f"Unknown builder chain {name!r} (expected one of: {valid})")


# =============================================================================
# Chain assembly
# =============================================================================


def _room_based(chain: BuilderChain, starter: InitialMapBuilder) -> BuilderChain:
    return (
        chain.start_with(starter)
        .with_(RoomBasedSpawner())
        .with_(RoomBasedStartingPosition())
        .with_(RoomBasedStairs())
    )


def _area_based(chain: BuilderChain, starter: InitialMapBuilder) -> BuilderChain:
    return (
        chain.start_with(starter)
        .with_(AreaStartingPosition(XStart.CENTER, YStart.CENTER))
        .with_(CullUnreachable())
        .with_(VoronoiSpawning())
        .with_(DistantExit())
    )


def _prefab(chain: BuilderChain) -> BuilderChain:
    return (
        chain.start_with(VoronoiBuilder.pythagoras(config.VORONOI_SEEDS))
        .with_(WaveformCollapseBuilder())
        .with_(PrefabBuilder.room_vaults())
        .with_(AreaStartingPosition(XStart.CENTER, YStart.CENTER))
        .with_(CullUnreachable())
        .with_(VoronoiSpawning())
        .with_(PrefabBuilder.sectional(UNDERGROUND_FORT))
        .with_(DistantExit())
    )


def _waveform_collapse(chain: BuilderChain, starter: InitialMapBuilder) -> BuilderChain:
    return (
        chain.start_with(starter)
        .with_(WaveformCollapseBuilder())
        .with_(AreaStartingPosition(XStart.CENTER, YStart.CENTER))
        .with_(CullUnreachable())
        .with_(VoronoiSpawning())
        .with_(DistantExit())
    )


def _default_starter(preset: BuilderChains) -> InitialMapBuilder:
    """The fixed initial stage used when no rng picks a variant."""
    match preset:
        case BuilderChains.SIMPLE_MAP:
            return SimpleMapBuilder()
        case BuilderChains.BSP_DUNGEON:
            return BspDungeonBuilder()
        case BuilderChains.BSP_INTERIOR:
            return BspInteriorBuilder()
        case BuilderChains.CELLULAR_AUTOMATA | BuilderChains.WAVEFORM_COLLAPSE:
            return CellularAutomataBuilder()
        case BuilderChains.DRUNKARDS_WALK:
            return DrunkardsWalkBuilder.open_area()
        case BuilderChains.DIFFUSION_LIMITED_AGGREGATION:
            return DLABuilder.walk_inwards()
        case BuilderChains.MAZE:
            return MazeBuilder()
        case BuilderChains.VORONOI:
            return VoronoiBuilder.pythagoras()
        case BuilderChains.PREFAB:
            return VoronoiBuilder.pythagoras()


def _random_starter(preset: BuilderChains, rng: RNG) -> InitialMapBuilder:
    """An initial stage for ``preset`` with its variant drawn from ``rng``."""
    match preset:
        case BuilderChains.DRUNKARDS_WALK:
            return DrunkardsWalkBuilder.random(rng)
        case BuilderChains.DIFFUSION_LIMITED_AGGREGATION:
            return DLABuilder.random(rng)
        case BuilderChains.VORONOI:
            return VoronoiBuilder(distance_algorithm=rng.choice(list(DistanceAlgorithm)))
        case BuilderChains.WAVEFORM_COLLAPSE:
            # WFC needs an interesting source; any organic layout will do.
            sources: list[Callable[[], InitialMapBuilder]] = [
                CellularAutomataBuilder,
                lambda: DrunkardsWalkBuilder.random(rng),
                lambda: DLABuilder.random(rng),
                MazeBuilder,
            ]
            return rng.choice(sources)()
        case _:
            return _default_starter(preset)


def create_chain(
    name: str | BuilderChains,
    depth: int,
    width: int = config.MAP_WIDTH,
    height: int = config.MAP_HEIGHT,
    record_history: bool = config.SHOW_MAPGEN_VISUALIZER,
    starter: InitialMapBuilder | None = None,
) -> BuilderChain:
    """Assemble the named preset for ``depth``.

    Args:
        name: A BuilderChains member or its name.
        depth: Dungeon depth of the level.
        width: Map width in tiles.
        height: Map height in tiles.
        record_history: Record map snapshots for visualization.
        starter: Replacement initial stage. Ignored by PREFAB, whose initial
            stage is fixed.

    Raises:
        ValueError: If ``name`` is not a known preset.
    """
    preset = BuilderChains.parse(name)
    chain = BuilderChain(depth, width, height, record_history=record_history)
    if starter is None:
        starter = _default_starter(preset)

    match preset:
        case BuilderChains.SIMPLE_MAP | BuilderChains.BSP_DUNGEON | BuilderChains.BSP_INTERIOR:
            return _room_based(chain, starter)
        case BuilderChains.WAVEFORM_COLLAPSE:
            return _waveform_collapse(chain, starter)
        case BuilderChains.PREFAB:
            return _prefab(chain)
        case _:
            return _area_based(chain, starter)


def random_builder(
    depth: int,
    rng: RNG,
    width: int = config.MAP_WIDTH,
    height: int = config.MAP_HEIGHT,
    record_history: bool = config.SHOW_MAPGEN_VISUALIZER,
) -> BuilderChain:
    """Pick a preset uniformly, then its initial stage variant, from ``rng``."""
    preset = rng.choice(list(BuilderChains))
    starter = _random_starter(preset, rng)
    logger.debug(
        "Depth %d uses the %s chain starting with %s",
        depth,
        preset.value,
        type(starter).__name__,
    )
    return create_chain(
        preset,
        depth,
        width,
        height,
        record_history=record_history,
        starter=starter,
    )


def build_level(
    depth: int,
    seed: RandomSeed = config.RANDOM_SEED,
    width: int = config.MAP_WIDTH,
    height: int = config.MAP_HEIGHT,
    record_history: bool = config.SHOW_MAPGEN_VISUALIZER,
) -> BuilderChain:
    """Choose and run a chain for ``depth``; deterministic in (depth, seed).

    The returned chain has already been built. Read its map, start and
    spawn_list, or hand it an EntitySpawner via spawn_entities().
    """
    rng = RNGProvider(seed).level(depth)
    chain = random_builder(depth, rng, width, height, record_history=record_history)
    chain.build_map(rng)
    return chain
