"""Tests for the start, culling, spawning and exit stages."""

from __future__ import annotations

import random

import numpy as np
import pytest

from undercroft.environment.generators.area_based import (
    AreaStartingPosition,
    CullUnreachable,
    DistantExit,
    VoronoiSpawning,
    XStart,
    YStart,
)
from undercroft.environment.generators.build_data import BuildData
from undercroft.environment.generators.chain import (
    MissingStartError,
    NoValidStartError,
)
from undercroft.environment.map import Map
from undercroft.environment.tile_types import TileType


class TestAreaStartingPosition:
    @pytest.mark.parametrize(
        ("x", "y", "expected"),
        [
            (XStart.CENTER, YStart.CENTER, (10, 6)),
            (XStart.LEFT, YStart.TOP, (1, 1)),
            (XStart.RIGHT, YStart.BOTTOM, (18, 10)),
        ],
    )
    def test_seed_points(
        self, open_map: Map, x: XStart, y: YStart, expected: tuple[int, int]
    ) -> None:
        data = BuildData(map=open_map)
        AreaStartingPosition(x, y).build_map(random.Random(0), data)
        assert data.start == expected

    def test_picks_closest_floor(self) -> None:
        game_map = Map(20, 12)
        game_map.tiles[3, 3] = TileType.FLOOR
        game_map.tiles[17, 10] = TileType.FLOOR
        data = BuildData(map=game_map)
        AreaStartingPosition(XStart.LEFT, YStart.TOP).build_map(random.Random(0), data)
        assert data.start == (3, 3)

    def test_no_floor(self) -> None:
        data = BuildData(map=Map(20, 12))
        with pytest.raises(NoValidStartError):
            AreaStartingPosition(XStart.CENTER, YStart.CENTER).build_map(
                random.Random(0), data
            )


class TestStagesNeedingStart:
    @pytest.mark.parametrize("stage", [CullUnreachable(), DistantExit()])
    def test_missing_start(self, open_map: Map, stage) -> None:
        with pytest.raises(MissingStartError):
            stage.build_map(random.Random(0), BuildData(map=open_map))


class TestCullUnreachable:
    def test_walls_off_pockets_and_prunes_spawns(self) -> None:
        game_map = Map.from_ascii(
            [
                "##########",
                "#...#...##",
                "#...#...##",
                "##########",
            ]
        )
        pocket_idx = game_map.xy_idx(6, 1)
        data = BuildData(map=game_map, start=(1, 1), spawn_list=[(pocket_idx, "Orc")])
        CullUnreachable().build_map(random.Random(0), data)

        assert (game_map.tiles[5:8, 1:3] == TileType.WALL).all()
        assert game_map.tiles[2, 2] == TileType.FLOOR
        assert data.spawn_list == []


class TestDistantExit:
    def test_exit_is_furthest_floor(self) -> None:
        game_map = Map.from_ascii(
            [
                "#########",
                "#.......#",
                "#########",
            ]
        )
        data = BuildData(map=game_map, start=(1, 1))
        DistantExit().build_map(random.Random(0), data)
        assert game_map.tiles[7, 1] == TileType.DOWN_STAIRS

    def test_old_stairs_are_demoted(self, open_map: Map) -> None:
        open_map.tiles[2, 2] = TileType.DOWN_STAIRS
        open_map.tiles[5, 5] = TileType.DOWN_STAIRS
        data = BuildData(map=open_map, start=(1, 1))
        DistantExit().build_map(random.Random(0), data)
        assert int(np.count_nonzero(open_map.tiles == TileType.DOWN_STAIRS)) == 1
        assert open_map.tiles[18, 10] == TileType.DOWN_STAIRS

    def test_spawn_on_exit_is_dropped(self) -> None:
        game_map = Map.from_ascii(["#####", "#...#", "#####"])
        data = BuildData(
            map=game_map, start=(1, 1), spawn_list=[(game_map.xy_idx(3, 1), "Dagger")]
        )
        DistantExit().build_map(random.Random(0), data)
        assert data.spawn_list == []


class TestVoronoiSpawning:
    def test_never_spawns_on_start(self, open_map: Map) -> None:
        start = (10, 6)
        start_idx = open_map.xy_idx(*start)
        open_map.depth = 8
        for seed in range(25):
            data = BuildData(map=open_map.copy(), start=start)
            VoronoiSpawning().build_map(random.Random(seed), data)
            indices = [idx for idx, _ in data.spawn_list]
            assert start_idx not in indices
            assert len(indices) == len(set(indices))
            assert all(data.map.tiles_flat[i] == TileType.FLOOR for i in indices)

    def test_spawns_something_on_open_ground(self, open_map: Map) -> None:
        open_map.depth = 8
        data = BuildData(map=open_map, start=(1, 1))
        VoronoiSpawning().build_map(random.Random(5), data)
        assert data.spawn_list
