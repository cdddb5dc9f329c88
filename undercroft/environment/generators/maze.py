"""Recursive-backtracker maze."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from undercroft.environment.tile_types import TileType

from .chain import InitialMapBuilder

if TYPE_CHECKING:
    from undercroft.environment.map import Map
    from undercroft.util.rng import RNG

    from .build_data import BuildData

logger = logging.getLogger(__name__)

TOP = 0
RIGHT = 1
BOTTOM = 2
LEFT = 3

SNAPSHOT_INTERVAL = 50


@dataclass
class Cell:
    row: int
    column: int
    walls: list[bool] = field(default_factory=lambda: [True, True, True, True])
    visited: bool = False


class Grid:
    """Maze cells at half the map's resolution.

    Cells are addressed by index into ``cells``, so knocking down the wall
    between two cells just updates both entries in place.
    """

    def __init__(self, width: int, height: int) -> None:
        self.width = width
        self.height = height
        self.cells = [Cell(row, column) for row in range(height) for column in range(width)]
        self.backtrace: list[int] = []
        self.current = 0

    def calculate_index(self, row: int, column: int) -> int | None:
        if row < 0 or column < 0 or column > self.width - 1 or row > self.height - 1:
            return None
        return column + row * self.width

    def get_available_neighbors(self) -> list[int]:
        cell = self.cells[self.current]
        candidates = (
            self.calculate_index(cell.row - 1, cell.column),
            self.calculate_index(cell.row, cell.column + 1),
            self.calculate_index(cell.row + 1, cell.column),
            self.calculate_index(cell.row, cell.column - 1),
        )
        return [i for i in candidates if i is not None and not self.cells[i].visited]

    def find_next_cell(self, rng: RNG) -> int | None:
        neighbors = self.get_available_neighbors()
        if not neighbors:
            return None
        return rng.choice(neighbors)

    def remove_walls(self, current: int, next_idx: int) -> None:
        cell = self.cells[current]
        other = self.cells[next_idx]
        dx = cell.column - other.column
        dy = cell.row - other.row

        if dx == 1:
            cell.walls[LEFT] = False
            other.walls[RIGHT] = False
        elif dx == -1:
            cell.walls[RIGHT] = False
            other.walls[LEFT] = False
        elif dy == 1:
            cell.walls[TOP] = False
            other.walls[BOTTOM] = False
        elif dy == -1:
            cell.walls[BOTTOM] = False
            other.walls[TOP] = False

    def generate(self, rng: RNG, game_map: Map, build_data: BuildData) -> None:
        """Carve the maze, snapshotting the partial result periodically."""
        i = 0
        while True:
            self.cells[self.current].visited = True
            next_idx = self.find_next_cell(rng)

            if next_idx is not None:
                self.cells[next_idx].visited = True
                self.backtrace.append(self.current)
                self.remove_walls(self.current, next_idx)
                self.current = next_idx
            elif self.backtrace:
                self.current = self.backtrace.pop()
            else:
                break

            if build_data.record_history and i % SNAPSHOT_INTERVAL == 0:
                self.copy_to_map(game_map)
                build_data.take_snapshot()
            i += 1

    def copy_to_map(self, game_map: Map) -> None:
        """Render the cells onto the tile grid.

        Each cell becomes a Floor tile at doubled coordinates, plus the
        adjoining tile for every wall that was knocked down.
        """
        game_map.tiles[:, :] = TileType.WALL
        for cell in self.cells:
            x = (cell.column + 1) * 2
            y = (cell.row + 1) * 2
            game_map.tiles[x, y] = TileType.FLOOR
            if not cell.walls[TOP]:
                game_map.tiles[x, y - 1] = TileType.FLOOR
            if not cell.walls[RIGHT]:
                game_map.tiles[x + 1, y] = TileType.FLOOR
            if not cell.walls[BOTTOM]:
                game_map.tiles[x, y + 1] = TileType.FLOOR
            if not cell.walls[LEFT]:
                game_map.tiles[x - 1, y] = TileType.FLOOR


class MazeBuilder(InitialMapBuilder):
    """A perfect maze: exactly one path between any two cells."""

    def build_map(self, rng: RNG, build_data: BuildData) -> None:
        game_map = build_data.map
        grid = Grid((game_map.width // 2) - 2, (game_map.height // 2) - 2)
        grid.generate(rng, game_map, build_data)
        grid.copy_to_map(game_map)
        build_data.take_snapshot()
        logger.debug("Carved a %dx%d maze", grid.width, grid.height)
