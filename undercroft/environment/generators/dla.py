"""Diffusion-limited aggregation caves."""

from __future__ import annotations

import logging
from enum import Enum, auto
from typing import TYPE_CHECKING

import tcod.los

from undercroft.environment.tile_types import TileType
from undercroft.util.rng import roll_dice

from .chain import InitialMapBuilder
from .common import Symmetry, paint
from .digger import TileDigger

if TYPE_CHECKING:
    from undercroft.environment.map import Map
    from undercroft.types import WorldTilePos
    from undercroft.util.rng import RNG

    from .build_data import BuildData

logger = logging.getLogger(__name__)


class DLAAlgorithm(Enum):
    WALK_INWARDS = auto()
    WALK_OUTWARDS = auto()
    CENTRAL_ATTRACTOR = auto()


class DLABuilder(InitialMapBuilder):
    """Grow a cave from a seed at the map center, one particle at a time.

    WALK_INWARDS drops a particle at a random point and lets it wander until it
    touches Floor. WALK_OUTWARDS releases it from the center until it steps off
    Floor. CENTRAL_ATTRACTOR fires it along a straight line toward the center.
    Only one cell is painted per particle: the last Wall cell before Floor for
    the inward modes, the first Wall cell reached for the outward one.
    """

    def __init__(
        self,
        algorithm: DLAAlgorithm,
        symmetry: Symmetry = Symmetry.NONE,
        brush_size: int = 2,
        floor_percent: float = 0.25,
    ) -> None:
        self.algorithm = algorithm
        self.symmetry = symmetry
        self.brush_size = brush_size
        self.floor_percent = floor_percent

    # -------------------------------------------------------------------------
    # Presets
    # -------------------------------------------------------------------------

    @classmethod
    def walk_inwards(cls) -> DLABuilder:
        return cls(DLAAlgorithm.WALK_INWARDS, brush_size=1)

    @classmethod
    def walk_outwards(cls) -> DLABuilder:
        return cls(DLAAlgorithm.WALK_OUTWARDS)

    @classmethod
    def central_attractor(cls) -> DLABuilder:
        return cls(DLAAlgorithm.CENTRAL_ATTRACTOR)

    @classmethod
    def insectoid(cls) -> DLABuilder:
        return cls(DLAAlgorithm.CENTRAL_ATTRACTOR, symmetry=Symmetry.HORIZONTAL)

    @classmethod
    def random(cls, rng: RNG) -> DLABuilder:
        """Random algorithm, symmetry and brush size."""
        return cls(
            rng.choice(list(DLAAlgorithm)),
            symmetry=Symmetry.random(rng),
            brush_size=rng.randint(1, 2),
        )

    # -------------------------------------------------------------------------
    # Generation
    # -------------------------------------------------------------------------

    def build_map(self, rng: RNG, build_data: BuildData) -> None:
        game_map = build_data.map
        start = game_map.center()
        self._seed_start(game_map, start)
        build_data.take_snapshot()

        desired_floor_tiles = int(self.floor_percent * game_map.tile_count)
        particles = 0
        while game_map.count_floor_tiles() < desired_floor_tiles:
            match self.algorithm:
                case DLAAlgorithm.WALK_INWARDS:
                    x, y = self._walk_inwards(game_map, rng)
                case DLAAlgorithm.WALK_OUTWARDS:
                    x, y = self._walk_outwards(game_map, rng, start)
                case DLAAlgorithm.CENTRAL_ATTRACTOR:
                    x, y = self._central_attractor(game_map, rng, start)
            paint(game_map, self.symmetry, self.brush_size, x, y)
            particles += 1
            if particles % 50 == 0:
                build_data.take_snapshot()

        build_data.take_snapshot()
        logger.debug("%s aggregated %d particles", self.algorithm.name, particles)

    @staticmethod
    def _seed_start(game_map: Map, start: WorldTilePos) -> None:
        x, y = start
        for dx, dy in ((0, 0), (-1, 0), (1, 0), (0, -1), (0, 1)):
            game_map.tiles[x + dx, y + dy] = TileType.FLOOR

    @staticmethod
    def _random_point(game_map: Map, rng: RNG) -> WorldTilePos:
        return (
            roll_dice(rng, 1, game_map.width - 3) + 1,
            roll_dice(rng, 1, game_map.height - 3) + 1,
        )

    def _walk_inwards(self, game_map: Map, rng: RNG) -> WorldTilePos:
        x, y = self._random_point(game_map, rng)
        return TileDigger(x, y, TileType.WALL).stagger(game_map, rng)

    def _walk_outwards(
        self, game_map: Map, rng: RNG, start: WorldTilePos
    ) -> WorldTilePos:
        digger = TileDigger(*start, TileType.FLOOR)
        digger.stagger(game_map, rng)
        return digger.position

    def _central_attractor(
        self, game_map: Map, rng: RNG, start: WorldTilePos
    ) -> WorldTilePos:
        origin = self._random_point(game_map, rng)
        prev = origin
        for x, y in tcod.los.bresenham(origin, start).tolist():
            if game_map.tiles[x, y] != TileType.WALL:
                break
            prev = (x, y)
        return prev
