"""The Wave Function Collapse stage."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from undercroft import config
from undercroft.environment.map import Map

from ..chain import InitialMapBuilder, MetaMapBuilder
from .common import Chunk, MapChunk
from .constraints import (
    build_patterns,
    patterns_to_constraints,
    render_pattern_to_map,
    solid_pattern,
)
from .solver import Solver

if TYPE_CHECKING:
    from undercroft.util.rng import RNG

    from ..build_data import BuildData

logger = logging.getLogger(__name__)


class WaveformCollapseBuilder(InitialMapBuilder, MetaMapBuilder):
    """Rebuild the level from chunks of a source map.

    As a meta stage the source is whatever the previous stages built. As an
    initial stage, give it a source with from_source(). The old map, start,
    rooms and spawns are discarded.

    A solve attempt that hits a contradiction is thrown away and restarted on
    a fresh all-Wall map until one succeeds. ``attempts`` holds how many the
    last build needed.

    Args:
        chunk_size: Edge length of the square patterns.
        include_flipping: Add flipped copies of every source chunk.
        dedupe: Keep each distinct pattern once.
        ensure_exit_free: Add a solid Wall pattern when the source yields no
            exit-free one. An exit-free pattern fits anywhere, so every attempt
            can complete.
        source: Map to learn patterns from instead of the current one.
    """

    def __init__(
        self,
        chunk_size: int = config.WFC_CHUNK_SIZE,
        include_flipping: bool = True,
        dedupe: bool = True,
        ensure_exit_free: bool = True,
        source: Map | None = None,
    ) -> None:
        if chunk_size < 1:
            raise ValueError(f"chunk_size must be at least 1, got {chunk_size}")
        self.chunk_size = chunk_size
        self.include_flipping = include_flipping
        self.dedupe = dedupe
        self.ensure_exit_free = ensure_exit_free
        self.source = source
        self.attempts = 0

    @classmethod
    def from_source(
        cls, source: Map, chunk_size: int = config.WFC_CHUNK_SIZE
    ) -> WaveformCollapseBuilder:
        return cls(chunk_size=chunk_size, source=source)

    def build_constraints(self, source: Map) -> list[MapChunk]:
        """Extract the pattern catalog from ``source``.

        Raises:
            ValueError: If the source is smaller than one chunk.
        """
        patterns = build_patterns(
            source, self.chunk_size, self.include_flipping, self.dedupe
        )
        if not patterns:
            raise ValueError(
                f"A {source.width}x{source.height} source yields no "
                f"{self.chunk_size}x{self.chunk_size} patterns"
            )
        constraints = patterns_to_constraints(patterns, self.chunk_size)
        if self.ensure_exit_free and all(c.has_exits for c in constraints):
            patterns.append(solid_pattern(self.chunk_size))
            constraints = patterns_to_constraints(patterns, self.chunk_size)
        return constraints

    def build_map(self, rng: RNG, build_data: BuildData) -> None:
        source = self.source if self.source is not None else build_data.map
        constraints = self.build_constraints(source)
        self.render_tile_gallery(constraints, build_data)

        build_data.reset_map()
        build_data.start = None
        build_data.rooms = None
        build_data.spawn_list.clear()

        self.attempts = 0
        while True:
            self.attempts += 1
            solver = Solver(constraints, self.chunk_size, build_data.map)
            if solver.solve(build_data.map, rng, on_step=build_data.take_snapshot):
                break
            logger.warning(
                "WFC attempt %d was infeasible at chunk %s; restarting",
                self.attempts,
                solver.failed_chunk,
            )
            build_data.take_snapshot()
            build_data.reset_map()
            build_data.spawn_list.clear()

        build_data.map.wall_border()
        build_data.take_snapshot()
        logger.debug(
            "WFC solved %d chunks from %d patterns in %d attempt(s)",
            len(solver.chunks),
            len(constraints),
            self.attempts,
        )

    def render_tile_gallery(
        self, constraints: list[MapChunk], build_data: BuildData
    ) -> None:
        """Snapshot every catalog pattern, laid out on scratch pages."""
        if not build_data.record_history:
            return

        width, height = build_data.map.width, build_data.map.height
        page = Map(width, height)
        x, y = 1, 1
        for map_chunk in constraints:
            render_pattern_to_map(page, map_chunk, Chunk.presized(self.chunk_size, (x, y)))
            build_data.take_snapshot(page)

            x += self.chunk_size + 1
            if x + self.chunk_size > width:
                x = 1
                y += self.chunk_size + 1
                if y + self.chunk_size > height:
                    page = Map(width, height)
                    x, y = 1, 1
