"""Tests for the level Map container."""

from __future__ import annotations

import numpy as np
import pytest

from undercroft.environment.map import Map
from undercroft.environment.tile_types import TileType

# =============================================================================
# Construction
# =============================================================================


class TestMapConstruction:
    def test_new_map_is_all_wall(self) -> None:
        game_map = Map(10, 6, depth=3)
        assert game_map.tiles.shape == (10, 6)
        assert (game_map.tiles == TileType.WALL).all()
        assert game_map.depth == 3
        assert len(game_map.tile_content) == 60

    def test_from_ascii_reads_rows_top_down(self) -> None:
        game_map = Map.from_ascii(["#####", "#..>#", "#####"])
        assert game_map.width == 5
        assert game_map.height == 3
        assert game_map.tiles[1, 1] == TileType.FLOOR
        assert game_map.tiles[3, 1] == TileType.DOWN_STAIRS
        assert game_map.tiles[0, 1] == TileType.WALL

    def test_from_ascii_rejects_ragged_rows(self) -> None:
        with pytest.raises(ValueError, match="Row 1"):
            Map.from_ascii(["###", "##", "###"])

    def test_from_ascii_rejects_unknown_glyph(self) -> None:
        with pytest.raises(ValueError, match="Unknown map glyph"):
            Map.from_ascii(["###", "#x#", "###"])

    def test_to_ascii_round_trips(self) -> None:
        rows = ["######", "#..#.#", "#.>..#", "######"]
        assert Map.from_ascii(rows).to_ascii() == "\n".join(rows)

    def test_to_ascii_marks_start(self) -> None:
        game_map = Map.from_ascii(["####", "#..#", "####"])
        assert game_map.to_ascii(start=(2, 1)) == "####\n#.@#\n####"
        # The underlying tile is untouched.
        assert game_map.tiles[2, 1] == TileType.FLOOR


# =============================================================================
# Indexing
# =============================================================================


class TestMapIndexing:
    def test_xy_idx_is_row_major(self) -> None:
        game_map = Map(80, 43)
        assert game_map.xy_idx(0, 0) == 0
        assert game_map.xy_idx(5, 0) == 5
        assert game_map.xy_idx(0, 1) == 80
        assert game_map.xy_idx(3, 2) == 163

    def test_idx_xy_inverts_xy_idx(self) -> None:
        game_map = Map(17, 9)
        for x, y in [(0, 0), (16, 0), (0, 8), (7, 4), (16, 8)]:
            assert game_map.idx_xy(game_map.xy_idx(x, y)) == (x, y)

    def test_tiles_flat_is_a_writable_row_major_view(self) -> None:
        game_map = Map(6, 4)
        game_map.tiles_flat[game_map.xy_idx(4, 2)] = TileType.FLOOR
        assert game_map.tiles[4, 2] == TileType.FLOOR
        assert np.shares_memory(game_map.tiles_flat, game_map.tiles)

    def test_in_bounds_excludes_border(self) -> None:
        game_map = Map(10, 8)
        assert game_map.in_bounds(1, 1)
        assert game_map.in_bounds(8, 6)
        assert not game_map.in_bounds(0, 3)
        assert not game_map.in_bounds(9, 3)
        assert not game_map.in_bounds(3, 7)

    def test_iter_interior_xy_skips_border(self) -> None:
        game_map = Map(5, 4)
        cells = list(game_map.iter_interior_xy())
        assert cells == [(1, 1), (2, 1), (3, 1), (1, 2), (2, 2), (3, 2)]

    def test_center(self) -> None:
        assert Map(80, 43).center() == (40, 21)


# =============================================================================
# Queries and edits
# =============================================================================


class TestMapQueries:
    def test_floor_indices_are_sorted(self, open_map: Map) -> None:
        indices = open_map.floor_indices()
        assert indices == sorted(indices)
        assert len(indices) == open_map.count_floor_tiles() == 18 * 10

    def test_populate_blocked_follows_walkability(self) -> None:
        game_map = Map.from_ascii(["####", "#.>#", "####"])
        game_map.populate_blocked()
        assert not game_map.blocked[1, 1]
        assert not game_map.blocked[2, 1]
        assert game_map.blocked[0, 0]

    def test_wall_border(self, open_map: Map) -> None:
        open_map.tiles[:, :] = TileType.FLOOR
        open_map.wall_border()
        assert (open_map.tiles[0, :] == TileType.WALL).all()
        assert (open_map.tiles[:, -1] == TileType.WALL).all()
        assert open_map.tiles[1, 1] == TileType.FLOOR

    def test_copy_is_deep(self, open_map: Map) -> None:
        open_map.tile_content[5].append("goblin")
        clone = open_map.copy()
        clone.tiles[3, 3] = TileType.WALL
        clone.tile_content[5].append("orc")
        assert open_map.tiles[3, 3] == TileType.FLOOR
        assert open_map.tile_content[5] == ["goblin"]
        assert clone.tiles.flags.f_contiguous

    def test_clear_content_index(self, open_map: Map) -> None:
        open_map.tile_content[0].append("thing")
        open_map.clear_content_index()
        assert all(not content for content in open_map.tile_content)


# =============================================================================
# Movement graph
# =============================================================================


class TestAvailableExits:
    def test_open_cell_has_eight_exits(self, open_map: Map) -> None:
        open_map.populate_blocked()
        exits = open_map.get_available_exits(open_map.xy_idx(5, 5))
        assert len(exits) == 8
        costs = sorted(cost for _, cost in exits)
        assert costs == [1.0] * 4 + [1.45] * 4

    def test_walls_are_not_exits(self) -> None:
        game_map = Map.from_ascii(["#####", "#...#", "#####"])
        game_map.populate_blocked()
        exits = dict(game_map.get_available_exits(game_map.xy_idx(2, 1)))
        assert exits == {game_map.xy_idx(1, 1): 1.0, game_map.xy_idx(3, 1): 1.0}

    def test_exit_outside_map_is_invalid(self, open_map: Map) -> None:
        open_map.populate_blocked()
        assert not open_map.is_exit_valid(0, 5)
        assert not open_map.is_exit_valid(5, 0)

    def test_far_border_is_never_an_exit(self, open_map: Map) -> None:
        """The right and bottom border rings are rejected even when unblocked."""
        open_map.blocked[:, :] = False
        assert not open_map.is_exit_valid(open_map.width - 1, 5)
        assert not open_map.is_exit_valid(5, open_map.height - 1)
        assert open_map.is_exit_valid(open_map.width - 2, open_map.height - 2)

    def test_cell_beside_the_border_has_five_exits(self, open_map: Map) -> None:
        open_map.blocked[:, :] = False
        exits = open_map.get_available_exits(open_map.xy_idx(open_map.width - 2, 5))
        assert len(exits) == 5
