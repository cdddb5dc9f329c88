"""Post-processing stages that work on any layout, rooms or not."""

from __future__ import annotations

import logging
from enum import Enum, auto
from typing import TYPE_CHECKING

import numpy as np

from undercroft.environment.tile_types import TileType

from .chain import MetaMapBuilder, MissingStartError, NoValidStartError
from .common import (
    DistanceAlgorithm,
    generate_voronoi_spawn_regions,
    remove_unreachable_areas_returning_most_distant,
)
from .spawning import spawn_region

if TYPE_CHECKING:
    from undercroft.types import TileIndex
    from undercroft.util.rng import RNG

    from .build_data import BuildData

logger = logging.getLogger(__name__)


class XStart(Enum):
    LEFT = auto()
    CENTER = auto()
    RIGHT = auto()


class YStart(Enum):
    TOP = auto()
    CENTER = auto()
    BOTTOM = auto()


def _require_start(build_data: BuildData, stage: str) -> TileIndex:
    start_idx = build_data.start_idx
    if start_idx is None:
        raise MissingStartError(f"{stage} needs a starting position")
    return start_idx


class AreaStartingPosition(MetaMapBuilder):
    """Start the player on the Floor tile closest to a named map area."""

    def __init__(self, x: XStart, y: YStart) -> None:
        self.x = x
        self.y = y

    def build_map(self, rng: RNG, build_data: BuildData) -> None:
        game_map = build_data.map
        seed_x = {
            XStart.LEFT: 1,
            XStart.CENTER: game_map.width // 2,
            XStart.RIGHT: game_map.width - 2,
        }[self.x]
        seed_y = {
            YStart.TOP: 1,
            YStart.CENTER: game_map.height // 2,
            YStart.BOTTOM: game_map.height - 2,
        }[self.y]

        floors = np.flatnonzero(game_map.tiles_flat == TileType.FLOOR)
        if floors.size == 0:
            raise NoValidStartError("No valid floors to start on")

        distances = DistanceAlgorithm.PYTHAGORAS.field(
            floors % game_map.width,
            floors // game_map.width,
            np.array([seed_x]),
            np.array([seed_y]),
        )[:, 0]
        build_data.start = game_map.idx_xy(int(floors[np.argmin(distances)]))


class CullUnreachable(MetaMapBuilder):
    """Turn every Floor tile the start can't reach into Wall."""

    def build_map(self, rng: RNG, build_data: BuildData) -> None:
        start_idx = _require_start(build_data, "Culling unreachable areas")
        remove_unreachable_areas_returning_most_distant(build_data.map, start_idx)
        build_data.prune_spawns()
        build_data.take_snapshot()


class DistantExit(MetaMapBuilder):
    """Place the single down stairs on the reachable Floor furthest from start.

    Any stairs left by earlier stages are demoted to Floor first, and the
    flood culls whatever the start can't reach, so the exit is always the
    only one and always reachable.
    """

    def build_map(self, rng: RNG, build_data: BuildData) -> None:
        start_idx = _require_start(build_data, "Placing a distant exit")
        game_map = build_data.map
        game_map.tiles[game_map.tiles == TileType.DOWN_STAIRS] = TileType.FLOOR

        exit_idx = remove_unreachable_areas_returning_most_distant(game_map, start_idx)
        game_map.tiles_flat[exit_idx] = TileType.DOWN_STAIRS
        game_map.populate_blocked()
        build_data.prune_spawns()
        build_data.take_snapshot()


class VoronoiSpawning(MetaMapBuilder):
    """Plan spawns per cellular-noise region of the Floor tiles."""

    def build_map(self, rng: RNG, build_data: BuildData) -> None:
        start_idx = build_data.start_idx
        regions = generate_voronoi_spawn_regions(build_data.map, rng)
        for area in regions.values():
            spawn_region(
                build_data.map,
                rng,
                (idx for idx in area if idx != start_idx),
                build_data.map.depth,
                build_data.spawn_list,
            )
        logger.debug(
            "Planned %d spawns across %d regions",
            len(build_data.spawn_list),
            len(regions),
        )
