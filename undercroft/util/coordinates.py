"""Room rectangles in tile coordinates."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass

from undercroft.types import TileCoord, WorldTilePos


@dataclass
class Rect:
    """Axis-aligned room rectangle.

    ``(x1, y1)`` is the corner the room is measured from and ``(x2, y2)`` the
    opposite corner, ``x2 = x1 + w``. A room's floor is the cells strictly
    inside ``x1`` and up to and including ``x2`` (same for y), so a
    ``Rect(x, y, w, h)`` room has exactly ``w * h`` floor cells. Every builder
    carves through floor_slices() and spawn planning reads floor_cells(), so
    the two always agree.
    """

    x1: TileCoord
    y1: TileCoord
    x2: TileCoord
    y2: TileCoord

    def __init__(self, x: TileCoord, y: TileCoord, w: TileCoord, h: TileCoord) -> None:
        self.x1, self.y1 = x, y
        self.x2, self.y2 = x + w, y + h

    @property
    def width(self) -> TileCoord:
        return self.x2 - self.x1

    @property
    def height(self) -> TileCoord:
        return self.y2 - self.y1

    def center(self) -> WorldTilePos:
        return ((self.x1 + self.x2) // 2, (self.y1 + self.y2) // 2)

    def floor_slices(self) -> tuple[slice, slice]:
        """Index an ``[x, y]`` array with this to address the room's floor."""
        return slice(self.x1 + 1, self.x2 + 1), slice(self.y1 + 1, self.y2 + 1)

    def floor_cells(self) -> Iterator[WorldTilePos]:
        """Yield every floor cell of the room, row by row."""
        for y in range(self.y1 + 1, self.y2 + 1):
            for x in range(self.x1 + 1, self.x2 + 1):
                yield (x, y)

    def intersects(self, other: Rect) -> bool:
        """Overlap test that also counts shared edges, so rooms keep a wall between them."""
        return not (
            self.x2 < other.x1
            or other.x2 < self.x1
            or self.y2 < other.y1
            or other.y2 < self.y1
        )
