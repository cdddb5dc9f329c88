"""Tests for the cellular automaton cave generator."""

from __future__ import annotations

import numpy as np

from tests.helpers import assert_valid_level
from undercroft.environment.generators.area_based import (
    AreaStartingPosition,
    CullUnreachable,
    DistantExit,
    VoronoiSpawning,
    XStart,
    YStart,
)
from undercroft.environment.generators.build_data import BuildData
from undercroft.environment.generators.cellular_automata import CellularAutomataBuilder
from undercroft.environment.generators.chain import BuilderChain
from undercroft.environment.generators.common import flood_distances
from undercroft.environment.map import Map
from undercroft.environment.tile_types import TileType
from undercroft.util.rng import RNGProvider


class TestSmoothingRule:
    def test_isolated_floor_fills_in(self) -> None:
        game_map = Map.from_ascii(["#####", "#####", "##.##", "#####", "#####"])
        new_tiles = CellularAutomataBuilder.step(game_map.tiles)
        assert new_tiles[2, 2] == TileType.WALL

    def test_floor_near_a_few_walls_stays_floor(self, open_map: Map) -> None:
        new_tiles = CellularAutomataBuilder.step(open_map.tiles)
        # Three border walls above it.
        assert new_tiles[2, 1] == TileType.FLOOR

    def test_cell_with_no_wall_neighbors_becomes_wall(self, open_map: Map) -> None:
        new_tiles = CellularAutomataBuilder.step(open_map.tiles)
        assert new_tiles[5, 5] == TileType.WALL

    def test_corner_floor_with_five_walls_closes(self, open_map: Map) -> None:
        new_tiles = CellularAutomataBuilder.step(open_map.tiles)
        assert new_tiles[1, 1] == TileType.WALL

    def test_border_is_untouched(self, open_map: Map) -> None:
        open_map.tiles[0, 3] = TileType.FLOOR
        new_tiles = CellularAutomataBuilder.step(open_map.tiles)
        assert new_tiles[0, 3] == TileType.FLOOR

    def test_step_does_not_mutate_input(self) -> None:
        game_map = Map.from_ascii(["#####", "#...#", "#####"])
        before = game_map.tiles.copy()
        CellularAutomataBuilder.step(game_map.tiles)
        np.testing.assert_array_equal(game_map.tiles, before)


class TestCellularAutomataBuilder:
    def test_deterministic_for_seed(self) -> None:
        a = BuildData.create_empty(depth=1)
        b = BuildData.create_empty(depth=1)
        CellularAutomataBuilder().build_map(RNGProvider(9).level(1), a)
        CellularAutomataBuilder().build_map(RNGProvider(9).level(1), b)
        np.testing.assert_array_equal(a.map.tiles, b.map.tiles)

    def test_border_stays_wall(self) -> None:
        data = BuildData.create_empty(depth=1)
        CellularAutomataBuilder().build_map(RNGProvider(9).level(1), data)
        assert (data.map.tiles[0, :] == TileType.WALL).all()
        assert (data.map.tiles[:, -1] == TileType.WALL).all()

    def test_snapshot_per_iteration(self) -> None:
        data = BuildData.create_empty(depth=1, record_history=True)
        CellularAutomataBuilder(iterations=4).build_map(RNGProvider(9).level(1), data)
        assert len(data.history) == 5

    def test_culled_cave_exit_is_furthest_floor(self) -> None:
        chain = (
            BuilderChain(depth=1)
            .start_with(CellularAutomataBuilder())
            .with_(AreaStartingPosition(XStart.CENTER, YStart.CENTER))
            .with_(CullUnreachable())
            .with_(VoronoiSpawning())
            .with_(DistantExit())
        )
        chain.build_map(RNGProvider(2024).level(1))
        assert_valid_level(chain.build_data)

        game_map = chain.map
        assert game_map.count_floor_tiles() > 0
        dist = flood_distances(game_map, chain.build_data.start_idx)
        exit_x, exit_y = np.argwhere(game_map.tiles == TileType.DOWN_STAIRS)[0]
        walkable = game_map.tiles != TileType.WALL
        assert dist[exit_x, exit_y] == dist[walkable].max()
