"""Pattern extraction and adjacency rules."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import numpy as np

from undercroft.environment.tile_types import TileType

from .common import Chunk, Direction, MapChunk, Pattern, tile_idx_in_chunk

if TYPE_CHECKING:
    from undercroft.environment.map import Map

logger = logging.getLogger(__name__)


def _to_pattern(tiles: np.ndarray) -> Pattern:
    # tiles is indexed [x, y]; patterns are stored row-major.
    return tuple(int(t) for t in tiles.T.ravel())


def build_patterns(
    game_map: Map, chunk_size: int, include_flipping: bool, dedupe: bool
) -> list[Pattern]:
    """Slice ``game_map`` into non-overlapping ``chunk_size`` squares.

    With ``include_flipping`` every chunk also contributes its horizontal,
    vertical and 180 degree flips. With ``dedupe`` repeated patterns are kept
    once, in first-seen order.

    Raises:
        ValueError: If ``chunk_size`` is less than 1.
    """
    if chunk_size < 1:
        raise ValueError(f"chunk_size must be at least 1, got {chunk_size}")

    chunks_x = game_map.width // chunk_size
    chunks_y = game_map.height // chunk_size
    patterns: list[Pattern] = []

    for cy in range(chunks_y):
        for cx in range(chunks_x):
            x0 = cx * chunk_size
            y0 = cy * chunk_size
            tiles = game_map.tiles[x0 : x0 + chunk_size, y0 : y0 + chunk_size]
            patterns.append(_to_pattern(tiles))
            if include_flipping:
                patterns.append(_to_pattern(tiles[::-1, :]))
                patterns.append(_to_pattern(tiles[:, ::-1]))
                patterns.append(_to_pattern(tiles[::-1, ::-1]))

    if dedupe:
        before = len(patterns)
        patterns = list(dict.fromkeys(patterns))
        logger.debug("Deduplicated %d patterns down to %d", before, len(patterns))

    return patterns


def border_indices(direction: Direction, chunk_size: int) -> list[int]:
    """Pattern indices of the border cells on one side, in order."""
    last = chunk_size - 1
    match direction:
        case Direction.NORTH:
            return [tile_idx_in_chunk(chunk_size, i, 0) for i in range(chunk_size)]
        case Direction.SOUTH:
            return [tile_idx_in_chunk(chunk_size, i, last) for i in range(chunk_size)]
        case Direction.WEST:
            return [tile_idx_in_chunk(chunk_size, 0, i) for i in range(chunk_size)]
        case Direction.EAST:
            return [tile_idx_in_chunk(chunk_size, last, i) for i in range(chunk_size)]


def compute_exits(pattern: Pattern, chunk_size: int) -> tuple[tuple[bool, ...], ...]:
    """Per Direction, which border cells of ``pattern`` are Floor."""
    return tuple(
        tuple(pattern[i] == TileType.FLOOR for i in border_indices(d, chunk_size))
        for d in Direction
    )


def patterns_to_constraints(patterns: list[Pattern], chunk_size: int) -> list[MapChunk]:
    """Build the catalog: exits plus per-side compatibility for every pattern.

    Pattern B may sit on side ``d`` of pattern A when either of them is
    exit-free, or when A's exits on ``d`` line up with at least one of B's
    exits on the opposite side.
    """
    exits = [compute_exits(pattern, chunk_size) for pattern in patterns]
    exit_array = np.array(exits, dtype=np.int32).reshape(len(patterns), 4, chunk_size)
    has_exits = exit_array.any(axis=(1, 2))
    exit_free = ~has_exits

    compatible: list[np.ndarray] = []
    for d in Direction:
        facing = exit_array[:, d, :] @ exit_array[:, d.opposite, :].T
        compatible.append((facing > 0) | exit_free[:, None] | exit_free[None, :])

    constraints = [
        MapChunk(
            pattern,
            exits[i],
            bool(has_exits[i]),
            tuple(tuple(np.flatnonzero(compatible[d][i]).tolist()) for d in Direction),
        )
        for i, pattern in enumerate(patterns)
    ]
    logger.debug(
        "Built %d constraints, %d of them exit-free",
        len(constraints),
        int(exit_free.sum()),
    )
    return constraints


def render_pattern_to_map(game_map: Map, map_chunk: MapChunk, chunk: Chunk) -> None:
    """Copy a pattern's tiles onto the map at ``chunk``, clipped to the map."""
    x0, y0 = chunk.start
    tiles = map_chunk.tiles()
    w = min(chunk.size, game_map.width - x0)
    h = min(chunk.size, game_map.height - y0)
    if w > 0 and h > 0:
        game_map.tiles[x0 : x0 + w, y0 : y0 + h] = tiles[:w, :h]


def solid_pattern(chunk_size: int) -> Pattern:
    """An all-Wall pattern. It is exit-free, so it fits next to anything."""
    return (int(TileType.WALL),) * (chunk_size * chunk_size)
