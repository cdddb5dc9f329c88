from __future__ import annotations

import random

import pytest

from undercroft.environment.map import Map
from undercroft.environment.tile_types import TileType


@pytest.fixture
def rng() -> random.Random:
    """A seeded Random so every test run draws the same numbers."""
    return random.Random(42)


@pytest.fixture
def open_map() -> Map:
    """A 20x12 map whose whole interior is Floor, inside a Wall border."""
    game_map = Map(20, 12, depth=1)
    game_map.tiles[1:-1, 1:-1] = TileType.FLOOR
    return game_map
