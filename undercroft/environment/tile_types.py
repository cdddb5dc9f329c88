"""
Tile kinds and their shared properties.

A Map stores one small integer per cell (a `TileType`). Everything else about
a kind of tile lives once in a flyweight record, and whole-map property arrays
are produced by indexing a per-property lookup table with the tile array.
"""

from enum import IntEnum

import numpy as np


class TileType(IntEnum):
    """Atomic grid cell classification."""

    WALL = 0
    FLOOR = 1
    DOWN_STAIRS = 2


TileTypeData = np.dtype(
    [
        ("walkable", bool),
        ("transparent", bool),  # blocks line of sight when False
        ("glyph", "U1"),  # used by previews and snapshot dumps
        ("display_name", "U32"),
    ]
)

# One record per TileType, in enum order.
TILE_DATA = np.array(
    [
        (False, False, "#", "Wall"),
        (True, True, ".", "Floor"),
        (True, True, ">", "Down Stairs"),
    ],
    dtype=TileTypeData,
)

_walkable_lut = TILE_DATA["walkable"].copy()
_transparent_lut = TILE_DATA["transparent"].copy()
_glyph_lut = TILE_DATA["glyph"].copy()


def get_walkable_map(tile_ids: np.ndarray) -> np.ndarray:
    """Boolean array, True where the tile can be walked on."""
    return _walkable_lut[tile_ids]


def get_transparent_map(tile_ids: np.ndarray) -> np.ndarray:
    return _transparent_lut[tile_ids]


def get_glyph_map(tile_ids: np.ndarray) -> np.ndarray:
    """Array of one-character glyphs with the same shape as ``tile_ids``."""
    return _glyph_lut[tile_ids]


def get_tile_type_data(tile_type: int) -> np.void:
    """The flyweight record for one tile id.

    Raises:
        IndexError: If ``tile_type`` is not a TileType value.
    """
    if not 0 <= tile_type < len(TILE_DATA):
        raise IndexError(
            f"Invalid TileType: {tile_type}. Valid ids are 0 to {len(TILE_DATA) - 1}."
        )
    return TILE_DATA[tile_type]
