"""Passages carved along the edges of a Voronoi diagram."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import numpy as np

from undercroft import config
from undercroft.environment.tile_types import TileType
from undercroft.util.rng import roll_dice

from .chain import InitialMapBuilder
from .common import DistanceAlgorithm

if TYPE_CHECKING:
    from undercroft.environment.map import Map
    from undercroft.util.rng import RNG

    from .build_data import BuildData

logger = logging.getLogger(__name__)


class VoronoiBuilder(InitialMapBuilder):
    """Scatter seeds, assign every cell to its nearest one, carve the borders.

    An interior cell becomes Floor when fewer than two of its four axis
    neighbors belong to another seed's region.
    """

    def __init__(
        self,
        n_seeds: int = config.VORONOI_SEEDS,
        distance_algorithm: DistanceAlgorithm = DistanceAlgorithm.PYTHAGORAS,
    ) -> None:
        self.n_seeds = n_seeds
        self.distance_algorithm = distance_algorithm

    @classmethod
    def pythagoras(cls, n_seeds: int = config.VORONOI_SEEDS) -> VoronoiBuilder:
        return cls(n_seeds, DistanceAlgorithm.PYTHAGORAS)

    @classmethod
    def manhattan(cls, n_seeds: int = config.VORONOI_SEEDS) -> VoronoiBuilder:
        return cls(n_seeds, DistanceAlgorithm.MANHATTAN)

    @classmethod
    def chebyshev(cls, n_seeds: int = config.VORONOI_SEEDS) -> VoronoiBuilder:
        return cls(n_seeds, DistanceAlgorithm.CHEBYSHEV)

    def build_map(self, rng: RNG, build_data: BuildData) -> None:
        game_map = build_data.map
        membership = self.membership(game_map, rng)

        for y in range(1, game_map.height - 1):
            for x in range(1, game_map.width - 1):
                seed = membership[x, y]
                neighbors = (
                    int(membership[x - 1, y] != seed)
                    + int(membership[x + 1, y] != seed)
                    + int(membership[x, y - 1] != seed)
                    + int(membership[x, y + 1] != seed)
                )
                if neighbors < 2:
                    game_map.tiles[x, y] = TileType.FLOOR
            build_data.take_snapshot()

        logger.debug(
            "Voronoi (%s, %d seeds) carved %d floor tiles",
            self.distance_algorithm.name,
            self.n_seeds,
            game_map.count_floor_tiles(),
        )

    def membership(self, game_map: Map, rng: RNG) -> np.ndarray:
        """Index of the nearest seed for every cell, shape ``(width, height)``.

        Seeds are distinct cells. Distance ties go to the earlier seed.
        """
        seeds: list[tuple[int, int]] = []
        seen: set[tuple[int, int]] = set()
        while len(seeds) < self.n_seeds:
            candidate = (
                roll_dice(rng, 1, game_map.width - 1),
                roll_dice(rng, 1, game_map.height - 1),
            )
            if candidate not in seen:
                seen.add(candidate)
                seeds.append(candidate)

        px = np.array([s[0] for s in seeds])
        py = np.array([s[1] for s in seeds])
        xs, ys = np.meshgrid(
            np.arange(game_map.width), np.arange(game_map.height), indexing="ij"
        )
        distances = self.distance_algorithm.field(xs.ravel(), ys.ravel(), px, py)
        return np.argmin(distances, axis=1).reshape(game_map.width, game_map.height)
