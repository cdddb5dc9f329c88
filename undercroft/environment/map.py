"""The level map produced by the generators."""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from typing import Any

import numpy as np

from undercroft.environment import tile_types
from undercroft.environment.tile_types import TileType
from undercroft.types import TileCoord, TileIndex, WorldTilePos

_GLYPH_TO_TILE = {"#": TileType.WALL, ".": TileType.FLOOR, ">": TileType.DOWN_STAIRS}


class Map:
    """A rectangular grid of tiles plus per-tile bookkeeping arrays.

    All per-tile arrays have shape ``(width, height)`` in Fortran order and are
    indexed ``[x, y]``. Flattening them in Fortran order yields the row-major
    tile index ``idx = y * width + x`` used by spawn lists, so ``tiles_flat``
    and friends are views, not copies.
    """

    def __init__(self, width: TileCoord, height: TileCoord, depth: int = 0) -> None:
        self.width: TileCoord = width
        self.height: TileCoord = height
        self.depth = depth

        self.tiles = np.full(
            (width, height), fill_value=TileType.WALL, dtype=np.uint8, order="F"
        )
        # Tiles that have ever been seen / are in FOV right now. Owned by the
        # simulation; generators only touch them in snapshot copies.
        self.revealed = np.full((width, height), False, dtype=bool, order="F")
        self.visible = np.full((width, height), False, dtype=bool, order="F")
        # Movement blockers. Derived from tiles by populate_blocked().
        self.blocked = np.full((width, height), False, dtype=bool, order="F")

        # Per-cell occupants, rebuilt each tick by the simulation's indexer.
        self.tile_content: list[list[Any]] = [[] for _ in range(width * height)]
        # Cosmetic, owned by combat.
        self.bloodstains: set[TileIndex] = set()

    @classmethod
    def from_ascii(cls, rows: Sequence[str], depth: int = 0) -> Map:
        """Build a map from rows of ``#``, ``.`` and ``>`` glyphs.

        Raises:
            ValueError: If rows are ragged or contain another glyph.
        """
        height = len(rows)
        width = len(rows[0]) if rows else 0
        game_map = cls(width, height, depth)
        for y, row in enumerate(rows):
            if len(row) != width:
                raise ValueError(f"Row {y} has width {len(row)}, expected {width}")
            for x, ch in enumerate(row):
                if ch not in _GLYPH_TO_TILE:
                    raise ValueError(f"Unknown map glyph {ch!r} at ({x}, {y})")
                game_map.tiles[x, y] = _GLYPH_TO_TILE[ch]
        return game_map

    # -------------------------------------------------------------------------
    # Indexing
    # -------------------------------------------------------------------------

    @property
    def tile_count(self) -> int:
        return self.width * self.height

    @property
    def tiles_flat(self) -> np.ndarray:
        """Row-major 1D view of ``tiles`` (writes go through)."""
        return self.tiles.reshape(-1, order="F")

    @property
    def blocked_flat(self) -> np.ndarray:
        return self.blocked.reshape(-1, order="F")

    def xy_idx(self, x: TileCoord, y: TileCoord) -> TileIndex:
        return (y * self.width) + x

    def idx_xy(self, idx: TileIndex) -> WorldTilePos:
        return (idx % self.width, idx // self.width)

    def center(self) -> WorldTilePos:
        return (self.width // 2, self.height // 2)

    def in_bounds(self, x: TileCoord, y: TileCoord) -> bool:
        """True if (x, y) is strictly inside the border ring."""
        return 1 <= x < self.width - 1 and 1 <= y < self.height - 1

    def iter_interior_xy(self) -> Iterator[WorldTilePos]:
        """Yield every (x, y) not on the border, row by row."""
        for y in range(1, self.height - 1):
            for x in range(1, self.width - 1):
                yield (x, y)

    # -------------------------------------------------------------------------
    # Tile queries and bulk edits
    # -------------------------------------------------------------------------

    def count_floor_tiles(self) -> int:
        return int(np.count_nonzero(self.tiles == TileType.FLOOR))

    def floor_indices(self) -> list[TileIndex]:
        """Row-major indices of every Floor tile, in ascending order."""
        return np.flatnonzero(self.tiles_flat == TileType.FLOOR).tolist()

    def populate_blocked(self) -> None:
        """Mark every non-walkable tile as blocking."""
        self.blocked[:, :] = ~tile_types.get_walkable_map(self.tiles)

    def clear_content_index(self) -> None:
        for content in self.tile_content:
            content.clear()

    def wall_border(self) -> None:
        """Force the outermost ring of cells to Wall."""
        self.tiles[0, :] = TileType.WALL
        self.tiles[-1, :] = TileType.WALL
        self.tiles[:, 0] = TileType.WALL
        self.tiles[:, -1] = TileType.WALL

    def reveal_all(self) -> None:
        self.revealed[:, :] = True

    # -------------------------------------------------------------------------
    # Movement graph
    # -------------------------------------------------------------------------

    def is_exit_valid(self, x: TileCoord, y: TileCoord) -> bool:
        """True if (x, y) is inside the border ring and not blocked."""
        return self.in_bounds(x, y) and not self.blocked[x, y]

    def get_available_exits(self, idx: TileIndex) -> list[tuple[TileIndex, float]]:
        """List the tiles reachable in one step from ``idx`` with their cost.

        Cardinal steps cost 1.0, diagonal steps 1.45.
        """
        x, y = self.idx_xy(idx)
        exits: list[tuple[TileIndex, float]] = []
        for dx, dy in ((-1, 0), (1, 0), (0, -1), (0, 1)):
            if self.is_exit_valid(x + dx, y + dy):
                exits.append((self.xy_idx(x + dx, y + dy), 1.0))
        for dx, dy in ((-1, -1), (1, -1), (-1, 1), (1, 1)):
            if self.is_exit_valid(x + dx, y + dy):
                exits.append((self.xy_idx(x + dx, y + dy), 1.45))
        return exits

    # -------------------------------------------------------------------------
    # Copies and dumps
    # -------------------------------------------------------------------------

    def copy(self) -> Map:
        """Deep copy of the map. Occupant lists are copied per cell."""
        clone = Map.__new__(Map)
        clone.width = self.width
        clone.height = self.height
        clone.depth = self.depth
        clone.tiles = self.tiles.copy(order="F")
        clone.revealed = self.revealed.copy(order="F")
        clone.visible = self.visible.copy(order="F")
        clone.blocked = self.blocked.copy(order="F")
        clone.tile_content = [list(content) for content in self.tile_content]
        clone.bloodstains = set(self.bloodstains)
        return clone

    def to_ascii(self, start: WorldTilePos | None = None) -> str:
        """Render the tiles as newline-separated rows of glyphs.

        If ``start`` is given it is drawn as ``@``.
        """
        glyphs = tile_types.get_glyph_map(self.tiles)
        if start is not None:
            glyphs[start] = "@"
        return "\n".join("".join(glyphs[:, y]) for y in range(self.height))
