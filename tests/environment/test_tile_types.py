import numpy as np
import pytest

from undercroft.environment import tile_types
from undercroft.environment.tile_types import TileType


def test_get_walkable_map() -> None:
    ids = np.array([[TileType.WALL, TileType.FLOOR, TileType.DOWN_STAIRS]])
    walk = tile_types.get_walkable_map(ids)
    assert walk.tolist() == [[False, True, True]]


def test_get_transparent_map() -> None:
    ids = np.array([TileType.WALL, TileType.FLOOR])
    assert tile_types.get_transparent_map(ids).tolist() == [False, True]


def test_get_glyph_map() -> None:
    ids = np.array([TileType.WALL, TileType.FLOOR, TileType.DOWN_STAIRS])
    assert "".join(tile_types.get_glyph_map(ids)) == "#.>"


def test_get_tile_type_data() -> None:
    stairs = tile_types.get_tile_type_data(TileType.DOWN_STAIRS)
    assert stairs["walkable"]
    assert stairs["display_name"] == "Down Stairs"
    with pytest.raises(IndexError):
        tile_types.get_tile_type_data(99)


def test_all_tile_types_have_registered_data() -> None:
    """Every TileType value has a data record."""
    assert len(tile_types.TILE_DATA) == len(TileType)
    for tile_type in TileType:
        assert tile_types.get_tile_type_data(tile_type)["glyph"] != ""
