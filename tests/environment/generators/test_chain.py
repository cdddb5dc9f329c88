"""Tests for BuilderChain orchestration and BuildData bookkeeping."""

from __future__ import annotations

import logging
import random

import pytest

from undercroft.environment.generators.build_data import BuildData
from undercroft.environment.generators.chain import (
    BuilderChain,
    BuilderChainConfigError,
    InitialMapBuilder,
    MapBuilderError,
    MetaMapBuilder,
)
from undercroft.environment.map import Map
from undercroft.environment.tile_types import TileType
from undercroft.util.coordinates import Rect
from undercroft.util.rng import RNG

# =============================================================================
# Recording stages
# =============================================================================


class CarveCenter(InitialMapBuilder):
    """Carve a single Floor tile at the map center and record the call."""

    def __init__(self, calls: list[str]) -> None:
        self.calls = calls

    def build_map(self, rng: RNG, build_data: BuildData) -> None:
        self.calls.append("initial")
        x, y = build_data.map.center()
        build_data.map.tiles[x, y] = TileType.FLOOR
        build_data.take_snapshot()


class Record(MetaMapBuilder):
    def __init__(self, calls: list[str], name: str) -> None:
        self.calls = calls
        self.name = name

    def build_map(self, rng: RNG, build_data: BuildData) -> None:
        self.calls.append(self.name)
        build_data.take_snapshot()


# =============================================================================
# BuilderChain
# =============================================================================


class TestBuilderChain:
    def test_stages_run_once_in_registration_order(self) -> None:
        calls: list[str] = []
        chain = (
            BuilderChain(depth=1, width=10, height=8)
            .start_with(CarveCenter(calls))
            .with_(Record(calls, "b"))
            .with_(Record(calls, "a"))
            .with_(Record(calls, "c"))
        )
        chain.build_map(random.Random(0))
        assert calls == ["initial", "b", "a", "c"]
        assert chain.map.tiles[5, 4] == TileType.FLOOR

    def test_second_starter_is_rejected(self) -> None:
        calls: list[str] = []
        chain = BuilderChain(depth=1).start_with(CarveCenter(calls))
        with pytest.raises(BuilderChainConfigError, match="single starting builder"):
            chain.start_with(CarveCenter(calls))

    def test_config_errors_are_value_errors(self) -> None:
        chain = BuilderChain(depth=1)
        with pytest.raises(ValueError):
            chain.build_map(random.Random(0))
        with pytest.raises(MapBuilderError):
            chain.build_map(random.Random(0))

    def test_meta_stage_cannot_be_a_starter(self) -> None:
        with pytest.raises(BuilderChainConfigError):
            BuilderChain(depth=1).start_with(Record([], "x"))  # type: ignore[arg-type]

    def test_initial_stage_cannot_be_a_meta_stage(self) -> None:
        with pytest.raises(BuilderChainConfigError):
            BuilderChain(depth=1).with_(CarveCenter([]))  # type: ignore[arg-type]

    def test_history_is_recorded_only_when_asked(self) -> None:
        calls: list[str] = []
        quiet = BuilderChain(depth=1, width=10, height=8, record_history=False)
        quiet.start_with(CarveCenter(calls)).with_(Record(calls, "m"))
        quiet.build_map(random.Random(0))
        assert quiet.history == []

        loud = BuilderChain(depth=1, width=10, height=8, record_history=True)
        loud.start_with(CarveCenter(calls)).with_(Record(calls, "m"))
        loud.build_map(random.Random(0))
        assert len(loud.history) == 2
        assert all(snapshot.revealed.all() for snapshot in loud.history)
        # Snapshots are copies, never the live map.
        assert all(snapshot is not loud.map for snapshot in loud.history)

    def test_spawn_entities_forwards_every_entry(self) -> None:
        chain = BuilderChain(depth=1, width=10, height=8)
        chain.build_data.spawn_list.extend([(12, "Goblin"), (25, "Rations")])
        spawned: list[tuple[int, str]] = []
        chain.spawn_entities(lambda idx, name: spawned.append((idx, name)))
        assert spawned == [(12, "Goblin"), (25, "Rations")]

    def test_build_logs_summary(self, caplog: pytest.LogCaptureFixture) -> None:
        chain = BuilderChain(depth=4, width=10, height=8).start_with(CarveCenter([]))
        with caplog.at_level(logging.INFO):
            chain.build_map(random.Random(0))
        assert "Built depth 4 level" in caplog.text


# =============================================================================
# BuildData
# =============================================================================


class TestBuildData:
    def test_create_empty(self) -> None:
        data = BuildData.create_empty(depth=2, width=12, height=9)
        assert data.map.depth == 2
        assert (data.map.tiles == TileType.WALL).all()
        assert data.start is None
        assert data.rooms is None
        assert data.spawn_list == []

    def test_snapshot_copies_and_reveals(self) -> None:
        data = BuildData.create_empty(depth=1, width=6, height=6, record_history=True)
        data.map.tiles[2, 2] = TileType.FLOOR
        data.take_snapshot()
        data.map.tiles[3, 3] = TileType.FLOOR

        (snapshot,) = data.history
        assert snapshot.tiles[2, 2] == TileType.FLOOR
        assert snapshot.tiles[3, 3] == TileType.WALL
        assert snapshot.revealed.all()
        assert not data.map.revealed.any()

    def test_snapshot_of_another_map(self) -> None:
        data = BuildData.create_empty(depth=1, width=6, height=6, record_history=True)
        scratch = Map(6, 6)
        scratch.tiles[1, 1] = TileType.FLOOR
        data.take_snapshot(scratch)
        assert data.history[0].tiles[1, 1] == TileType.FLOOR

    def test_reset_map_keeps_size_and_depth(self) -> None:
        data = BuildData.create_empty(depth=5, width=7, height=4)
        data.map.tiles[:, :] = TileType.FLOOR
        data.reset_map()
        assert (data.map.width, data.map.height, data.map.depth) == (7, 4, 5)
        assert (data.map.tiles == TileType.WALL).all()

    def test_prune_spawns_keeps_floor_only(self) -> None:
        data = BuildData.create_empty(depth=1, width=6, height=6)
        data.map.tiles[1, 1] = TileType.FLOOR
        data.map.tiles[2, 1] = TileType.DOWN_STAIRS
        data.spawn_list.extend([(7, "Goblin"), (8, "Orc"), (9, "Dagger")])
        data.prune_spawns()
        assert data.spawn_list == [(7, "Goblin")]

    def test_discard_spawns_in_footprint(self) -> None:
        data = BuildData.create_empty(depth=1, width=10, height=10)
        inside = data.map.xy_idx(3, 3)
        edge = data.map.xy_idx(5, 3)
        outside = data.map.xy_idx(8, 8)
        data.spawn_list.extend([(inside, "Goblin"), (edge, "Orc"), (outside, "Shield")])
        data.discard_spawns_in(Rect(2, 2, 3, 3))
        assert data.spawn_list == [(edge, "Orc"), (outside, "Shield")]

    def test_start_idx(self) -> None:
        data = BuildData.create_empty(depth=1, width=10, height=10)
        assert data.start_idx is None
        data.start = (3, 4)
        assert data.start_idx == 43
