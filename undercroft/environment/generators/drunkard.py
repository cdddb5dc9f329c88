"""Drunkard's walk caves."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum, auto
from typing import TYPE_CHECKING

from undercroft.environment.tile_types import TileType
from undercroft.util.rng import roll_dice

from .chain import InitialMapBuilder
from .common import Symmetry
from .digger import DrunkDigger

if TYPE_CHECKING:
    from undercroft.util.rng import RNG

    from .build_data import BuildData

logger = logging.getLogger(__name__)


class DrunkSpawnMode(Enum):
    STARTING_POINT = auto()
    RANDOM = auto()


@dataclass(frozen=True)
class DrunkardSettings:
    """Tuning for one drunkard's walk.

    Attributes:
        spawn_mode: Where each new digger appears. RANDOM still starts the
            first digger at the map center.
        lifetime: Steps each digger takes before it stops.
        floor_percent: Fraction of all tiles that must be Floor to finish.
        brush_size: Width of the carved trail.
        symmetry: Mirroring applied to every carved cell.
    """

    spawn_mode: DrunkSpawnMode
    lifetime: int
    floor_percent: float
    brush_size: int = 1
    symmetry: Symmetry = Symmetry.NONE


class DrunkardsWalkBuilder(InitialMapBuilder):
    """Release diggers until enough of the map is Floor."""

    def __init__(self, settings: DrunkardSettings) -> None:
        self.settings = settings

    # -------------------------------------------------------------------------
    # Presets
    # -------------------------------------------------------------------------

    @classmethod
    def open_area(cls) -> DrunkardsWalkBuilder:
        return cls(DrunkardSettings(DrunkSpawnMode.STARTING_POINT, 400, 0.5))

    @classmethod
    def open_halls(cls) -> DrunkardsWalkBuilder:
        return cls(DrunkardSettings(DrunkSpawnMode.RANDOM, 400, 0.5))

    @classmethod
    def winding_passages(cls) -> DrunkardsWalkBuilder:
        return cls(DrunkardSettings(DrunkSpawnMode.RANDOM, 100, 0.4))

    @classmethod
    def fat_passages(cls) -> DrunkardsWalkBuilder:
        return cls(DrunkardSettings(DrunkSpawnMode.RANDOM, 100, 0.4, brush_size=2))

    @classmethod
    def fearful_symmetry(cls) -> DrunkardsWalkBuilder:
        return cls(
            DrunkardSettings(DrunkSpawnMode.RANDOM, 100, 0.4, symmetry=Symmetry.BOTH)
        )

    @classmethod
    def random(cls, rng: RNG) -> DrunkardsWalkBuilder:
        """One of the presets, picked uniformly."""
        presets = [
            cls.open_area,
            cls.open_halls,
            cls.winding_passages,
            cls.fat_passages,
            cls.fearful_symmetry,
        ]
        return rng.choice(presets)()

    # -------------------------------------------------------------------------
    # Generation
    # -------------------------------------------------------------------------

    def build_map(self, rng: RNG, build_data: BuildData) -> None:
        game_map = build_data.map
        settings = self.settings

        start_x, start_y = game_map.center()
        game_map.tiles[start_x, start_y] = TileType.FLOOR

        desired_floor_tiles = int(settings.floor_percent * game_map.tile_count)
        floor_tile_count = game_map.count_floor_tiles()
        digger_count = 0
        active_digger_count = 0

        while floor_tile_count < desired_floor_tiles:
            if settings.spawn_mode is DrunkSpawnMode.STARTING_POINT or digger_count == 0:
                drunk_x, drunk_y = start_x, start_y
            else:
                drunk_x = roll_dice(rng, 1, game_map.width - 3) + 1
                drunk_y = roll_dice(rng, 1, game_map.height - 3) + 1

            digger = DrunkDigger(drunk_x, drunk_y, settings.lifetime)
            digger.stagger(game_map, rng, settings.symmetry, settings.brush_size)
            if digger.did_something:
                build_data.take_snapshot()
                active_digger_count += 1

            digger_count += 1
            game_map.tiles[game_map.tiles == TileType.DOWN_STAIRS] = TileType.FLOOR
            floor_tile_count = game_map.count_floor_tiles()

        logger.debug(
            "Released %d diggers, %d of them carved new floor",
            digger_count,
            active_digger_count,
        )
