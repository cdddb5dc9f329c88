"""Assertions shared by generator tests."""

from __future__ import annotations

import numpy as np

from undercroft.environment.generators.build_data import BuildData
from undercroft.environment.generators.common import flood_distances
from undercroft.environment.map import Map
from undercroft.environment.tile_types import TileType


def assert_border_closed(game_map: Map) -> None:
    """Every cell of the outer ring is Wall."""
    tiles = game_map.tiles
    assert (tiles[0, :] == TileType.WALL).all()
    assert (tiles[-1, :] == TileType.WALL).all()
    assert (tiles[:, 0] == TileType.WALL).all()
    assert (tiles[:, -1] == TileType.WALL).all()


def reachable_mask(game_map: Map, start_idx: int) -> np.ndarray:
    game_map.populate_blocked()
    return np.isfinite(flood_distances(game_map, start_idx, max_depth=10**9))


def assert_valid_level(build_data: BuildData) -> None:
    """The checks every finished level must pass.

    A closed border, a start on walkable ground, exactly one down stairs, every
    walkable tile reachable from the start, and every spawn on distinct Floor.
    """
    game_map = build_data.map
    assert_border_closed(game_map)

    assert build_data.start is not None
    start_x, start_y = build_data.start
    assert game_map.tiles[start_x, start_y] in (TileType.FLOOR, TileType.DOWN_STAIRS)

    assert int(np.count_nonzero(game_map.tiles == TileType.DOWN_STAIRS)) == 1

    reachable = reachable_mask(game_map, build_data.start_idx)
    walkable = game_map.tiles != TileType.WALL
    assert not (walkable & ~reachable).any()

    indices = [idx for idx, _ in build_data.spawn_list]
    assert len(indices) == len(set(indices))
    for idx in indices:
        assert game_map.tiles_flat[idx] == TileType.FLOOR
