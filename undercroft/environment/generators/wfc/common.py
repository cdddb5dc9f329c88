"""Catalog entries and geometry shared by the WFC modules."""

from __future__ import annotations

from typing import TypeAlias

from dataclasses import dataclass
from enum import IntEnum

import numpy as np

from undercroft.types import TileCoord, WorldTilePos


class Direction(IntEnum):
    """A side of a chunk. The value indexes MapChunk.exits and compatible_with."""

    NORTH = 0
    SOUTH = 1
    WEST = 2
    EAST = 3

    @property
    def opposite(self) -> Direction:
        return _OPPOSITES[self]

    @property
    def offset(self) -> tuple[int, int]:
        """Chunk-grid step (dx, dy) toward the neighbor on this side."""
        return _OFFSETS[self]


_OPPOSITES = {
    Direction.NORTH: Direction.SOUTH,
    Direction.SOUTH: Direction.NORTH,
    Direction.WEST: Direction.EAST,
    Direction.EAST: Direction.WEST,
}

_OFFSETS = {
    Direction.NORTH: (0, -1),
    Direction.SOUTH: (0, 1),
    Direction.WEST: (-1, 0),
    Direction.EAST: (1, 0),
}

Pattern: TypeAlias = tuple[int, ...]


def tile_idx_in_chunk(chunk_size: int, x: TileCoord, y: TileCoord) -> int:
    return (y * chunk_size) + x


@dataclass(frozen=True, eq=False)
class MapChunk:
    """One catalog pattern and its adjacency rules.

    Attributes:
        pattern: ``chunk_size * chunk_size`` tile ids, row-major.
        exits: Per Direction, one flag per border cell: True where that border
            cell is Floor.
        has_exits: False for an exit-free pattern, which fits next to anything.
        compatible_with: Per Direction, catalog indices of the patterns allowed
            as the neighbor on that side.
    """

    pattern: Pattern
    exits: tuple[tuple[bool, ...], ...]
    has_exits: bool
    compatible_with: tuple[tuple[int, ...], ...]

    @property
    def chunk_size(self) -> int:
        return len(self.exits[Direction.NORTH])

    def tiles(self) -> np.ndarray:
        """The pattern as a ``(size, size)`` array indexed ``[x, y]``."""
        size = self.chunk_size
        return np.array(self.pattern, dtype=np.uint8).reshape(size, size).T


@dataclass(frozen=True)
class Chunk:
    """Where a pattern lands on the map: top-left corner and edge length."""

    start: WorldTilePos
    size: int

    @classmethod
    def presized(cls, size: int, start: WorldTilePos) -> Chunk:
        return cls(start, size)

    @property
    def end(self) -> WorldTilePos:
        return (self.start[0] + self.size, self.start[1] + self.size)
