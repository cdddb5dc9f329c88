"""Chunk-by-chunk constraint solver."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING

from .common import Chunk, Direction, MapChunk
from .constraints import render_pattern_to_map

if TYPE_CHECKING:
    from undercroft.environment.map import Map
    from undercroft.util.rng import RNG

logger = logging.getLogger(__name__)


class WFCContradiction(Exception):
    """Raised when no pattern fits every resolved neighbor of a chunk."""

    def __init__(self, chunk_idx: int) -> None:
        super().__init__(f"No pattern fits chunk {chunk_idx}")
        self.chunk_idx = chunk_idx


class Solver:
    """Resolve a grid of chunks one at a time.

    Each iteration resolves the unresolved chunk with the most resolved
    neighbors (lowest index on ties), so the solution grows outward from what
    is already placed. While nothing is resolved a chunk is picked at random.
    A chunk's candidates are the intersection of the compatibility lists its
    resolved neighbors contribute for the side facing it.

    Attributes:
        chunks: Catalog index per chunk (row-major), None while unresolved.
        possible: False once an attempt hit a contradiction.
        failed_chunk: The chunk that had no candidates, if any.
    """

    def __init__(self, constraints: list[MapChunk], chunk_size: int, game_map: Map) -> None:
        self.constraints = constraints
        self.chunk_size = chunk_size
        self.chunks_x = game_map.width // chunk_size
        self.chunks_y = game_map.height // chunk_size
        self.chunks: list[int | None] = [None] * (self.chunks_x * self.chunks_y)
        self.remaining: list[int] = list(range(self.chunks_x * self.chunks_y))
        self.possible = True
        self.failed_chunk: int | None = None

    def chunk_idx(self, x: int, y: int) -> int:
        return (y * self.chunks_x) + x

    def _resolved_neighbors(self, chunk_idx: int) -> list[tuple[Direction, int]]:
        """(side, catalog index) for each resolved neighbor of a chunk."""
        chunk_x = chunk_idx % self.chunks_x
        chunk_y = chunk_idx // self.chunks_x
        neighbors: list[tuple[Direction, int]] = []
        for direction in Direction:
            dx, dy = direction.offset
            nx, ny = chunk_x + dx, chunk_y + dy
            if 0 <= nx < self.chunks_x and 0 <= ny < self.chunks_y:
                pattern = self.chunks[self.chunk_idx(nx, ny)]
                if pattern is not None:
                    neighbors.append((direction, pattern))
        return neighbors

    def count_neighbors(self, chunk_idx: int) -> int:
        return len(self._resolved_neighbors(chunk_idx))

    def iteration(self, game_map: Map, rng: RNG) -> bool:
        """Resolve one chunk and render it. Returns True once none remain.

        Raises:
            WFCContradiction: If the chosen chunk has no candidate pattern.
        """
        if not self.remaining:
            return True

        counts = [self.count_neighbors(idx) for idx in self.remaining]
        best = max(counts)
        if best > 0:
            r_idx = counts.index(best)
        else:
            r_idx = rng.randrange(len(self.remaining))
        chunk_idx = self.remaining.pop(r_idx)

        neighbors = self._resolved_neighbors(chunk_idx)
        if not neighbors:
            new_pattern = rng.randrange(len(self.constraints))
        else:
            # A neighbor on our WEST sees us on its EAST side, and so on.
            options = [
                set(self.constraints[pattern].compatible_with[direction.opposite])
                for direction, pattern in neighbors
            ]
            candidates = sorted(set.intersection(*options))
            if not candidates:
                raise WFCContradiction(chunk_idx)
            new_pattern = candidates[rng.randrange(len(candidates))]

        self.chunks[chunk_idx] = new_pattern
        self.apply_constraints_to_map(game_map, chunk_idx, new_pattern)
        return not self.remaining

    def solve(
        self,
        game_map: Map,
        rng: RNG,
        on_step: Callable[[], None] | None = None,
    ) -> bool:
        """Run iterations until done. Returns False if the attempt is infeasible.

        ``on_step`` is called after every resolved chunk.
        """
        try:
            while not self.iteration(game_map, rng):
                if on_step is not None:
                    on_step()
        except WFCContradiction as e:
            self.possible = False
            self.failed_chunk = e.chunk_idx
            logger.debug("%s", e)
        return self.possible

    def apply_constraints_to_map(self, game_map: Map, chunk_idx: int, pattern: int) -> None:
        chunk_x = chunk_idx % self.chunks_x
        chunk_y = chunk_idx // self.chunks_x
        chunk = Chunk.presized(
            self.chunk_size, (chunk_x * self.chunk_size, chunk_y * self.chunk_size)
        )
        render_pattern_to_map(game_map, self.constraints[pattern], chunk)

    def count_conflicts(self) -> int:
        """Adjacent resolved pairs that break the compatibility rules."""
        conflicts = 0
        for chunk_idx, pattern in enumerate(self.chunks):
            if pattern is None:
                continue
            for direction, neighbor in self._resolved_neighbors(chunk_idx):
                if neighbor not in self.constraints[pattern].compatible_with[direction]:
                    conflicts += 1
        return conflicts
