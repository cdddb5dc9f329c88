"""Tests for Voronoi-border carving."""

from __future__ import annotations

import random

import numpy as np
import pytest

from tests.helpers import assert_border_closed
from undercroft.environment.generators.build_data import BuildData
from undercroft.environment.generators.common import DistanceAlgorithm
from undercroft.environment.generators.voronoi import VoronoiBuilder
from undercroft.environment.map import Map
from undercroft.environment.tile_types import TileType


class TestMembership:
    def test_every_cell_belongs_to_its_nearest_seed(self, rng: random.Random) -> None:
        game_map = Map(30, 20)
        builder = VoronoiBuilder(n_seeds=8, distance_algorithm=DistanceAlgorithm.MANHATTAN)
        membership = builder.membership(game_map, rng)
        assert membership.shape == (30, 20)
        assert set(np.unique(membership)) <= set(range(8))

    def test_seeds_own_their_cells(self) -> None:
        game_map = Map(30, 20)
        builder = VoronoiBuilder(n_seeds=5)
        membership = builder.membership(game_map, random.Random(3))
        # Replay the seed draws to find where each seed sits.
        replay = random.Random(3)
        seeds: list[tuple[int, int]] = []
        while len(seeds) < 5:
            seed = (replay.randint(1, 29), replay.randint(1, 19))
            if seed not in seeds:
                seeds.append(seed)
        for i, (x, y) in enumerate(seeds):
            assert membership[x, y] == i

    def test_single_seed_owns_everything(self, rng: random.Random) -> None:
        membership = VoronoiBuilder(n_seeds=1).membership(Map(10, 10), rng)
        assert (membership == 0).all()


class TestVoronoiBuilder:
    @pytest.mark.parametrize(
        "factory",
        [VoronoiBuilder.pythagoras, VoronoiBuilder.manhattan, VoronoiBuilder.chebyshev],
    )
    def test_carves_floor_inside_border(self, factory, rng: random.Random) -> None:
        data = BuildData.create_empty(depth=1)
        factory().build_map(rng, data)
        assert data.map.count_floor_tiles() > 0
        assert_border_closed(data.map)

    def test_constructors_set_metric(self) -> None:
        assert VoronoiBuilder.manhattan(10).distance_algorithm is DistanceAlgorithm.MANHATTAN
        assert VoronoiBuilder.chebyshev().distance_algorithm is DistanceAlgorithm.CHEBYSHEV
        assert VoronoiBuilder.pythagoras(12).n_seeds == 12

    def test_one_seed_is_wide_open(self, rng: random.Random) -> None:
        data = BuildData.create_empty(depth=1, width=12, height=10)
        VoronoiBuilder(n_seeds=1).build_map(rng, data)
        assert (data.map.tiles[1:-1, 1:-1] == TileType.FLOOR).all()
