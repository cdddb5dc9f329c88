"""Wave Function Collapse over map chunks.

The pipeline is layered: patterns are sliced out of a source map
(constraints.build_patterns), each pattern's exits decide which others may sit
next to it (constraints.patterns_to_constraints), and the Solver places
patterns chunk by chunk. WaveformCollapseBuilder wraps all of it as a stage.
"""

from .builder import WaveformCollapseBuilder
from .common import Chunk, Direction, MapChunk
from .solver import Solver, WFCContradiction

__all__ = [
    "Chunk",
    "Direction",
    "MapChunk",
    "Solver",
    "WFCContradiction",
    "WaveformCollapseBuilder",
]
