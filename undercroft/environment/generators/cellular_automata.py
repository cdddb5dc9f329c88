"""Cave generation with a cellular automaton."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import numpy as np

from undercroft import config
from undercroft.environment.tile_types import TileType

from .chain import InitialMapBuilder

if TYPE_CHECKING:
    from undercroft.util.rng import RNG

    from .build_data import BuildData

logger = logging.getLogger(__name__)


class CellularAutomataBuilder(InitialMapBuilder):
    """Noise smoothed into caves by a neighbor-count rule.

    The interior starts as random Floor/Wall noise. Each pass counts the Wall
    cells in every interior cell's eight-cell neighborhood: a cell with none,
    or with more than four, becomes Wall, anything else becomes Floor. Each pass
    reads the previous grid and writes a fresh one.

    Nothing here keeps the caves connected; chain a CullUnreachable stage after
    it.
    """

    def __init__(
        self,
        iterations: int = config.CELLULAR_AUTOMATA_ITERATIONS,
        floor_chance: float = config.CELLULAR_AUTOMATA_FLOOR_CHANCE,
    ) -> None:
        self.iterations = iterations
        self.floor_chance = floor_chance

    def build_map(self, rng: RNG, build_data: BuildData) -> None:
        game_map = build_data.map
        floor_threshold = 100 - int(self.floor_chance * 100)

        for x, y in game_map.iter_interior_xy():
            if rng.randint(1, 100) > floor_threshold:
                game_map.tiles[x, y] = TileType.FLOOR
        build_data.take_snapshot()

        for _ in range(self.iterations):
            game_map.tiles[:, :] = self.step(game_map.tiles)
            build_data.take_snapshot()

        logger.debug(
            "Cellular automaton left %d floor tiles", game_map.count_floor_tiles()
        )

    @staticmethod
    def step(tiles: np.ndarray) -> np.ndarray:
        """Apply one pass of the smoothing rule and return the new grid."""
        walls = (tiles == TileType.WALL).astype(np.int8)
        neighbors = (
            walls[:-2, :-2]
            + walls[1:-1, :-2]
            + walls[2:, :-2]
            + walls[:-2, 1:-1]
            + walls[2:, 1:-1]
            + walls[:-2, 2:]
            + walls[1:-1, 2:]
            + walls[2:, 2:]
        )
        new_tiles = tiles.copy(order="F")
        new_tiles[1:-1, 1:-1] = np.where(
            (neighbors > 4) | (neighbors == 0), TileType.WALL, TileType.FLOOR
        )
        return new_tiles
