"""Helpers shared by several generation stages.

Carving primitives (rooms, tunnels, corridors), the symmetric brush used by
the organic diggers, distance metrics, the reachability flood, and the
Worley-style grouping of floor tiles into spawn regions.
"""

from __future__ import annotations

import logging
from enum import Enum, auto
from typing import TYPE_CHECKING

import numpy as np
import tcod.path

from undercroft import config
from undercroft.environment.tile_types import TileType
from undercroft.types import TileCoord, TileIndex

if TYPE_CHECKING:
    from undercroft.environment.map import Map
    from undercroft.util.coordinates import Rect
    from undercroft.util.rng import RNG

logger = logging.getLogger(__name__)


# =============================================================================
# Distance metrics and symmetry modes
# =============================================================================


class DistanceAlgorithm(Enum):
    """Distance metrics for Voronoi membership and start selection.

    PYTHAGORAS is the squared Euclidean distance: it orders points the same way
    as the true distance and avoids the square root.
    """

    PYTHAGORAS = auto()
    MANHATTAN = auto()
    CHEBYSHEV = auto()

    def apply(
        self, p1: tuple[TileCoord, TileCoord], p2: tuple[TileCoord, TileCoord]
    ) -> float:
        dx = abs(p1[0] - p2[0])
        dy = abs(p1[1] - p2[1])
        match self:
            case DistanceAlgorithm.PYTHAGORAS:
                return float(dx * dx + dy * dy)
            case DistanceAlgorithm.MANHATTAN:
                return float(dx + dy)
            case DistanceAlgorithm.CHEBYSHEV:
                return float(max(dx, dy))

    def field(
        self, xs: np.ndarray, ys: np.ndarray, px: np.ndarray, py: np.ndarray
    ) -> np.ndarray:
        """Pairwise distances, shape ``(len(xs), len(px))``."""
        dx = np.abs(xs[:, None] - px[None, :])
        dy = np.abs(ys[:, None] - py[None, :])
        match self:
            case DistanceAlgorithm.PYTHAGORAS:
                return dx * dx + dy * dy
            case DistanceAlgorithm.MANHATTAN:
                return dx + dy
            case DistanceAlgorithm.CHEBYSHEV:
                return np.maximum(dx, dy)


class Symmetry(Enum):
    NONE = auto()
    HORIZONTAL = auto()
    VERTICAL = auto()
    BOTH = auto()

    @classmethod
    def random(cls, rng: RNG) -> Symmetry:
        return rng.choice(list(cls))


# =============================================================================
# Carving
# =============================================================================


def apply_room_to_map(game_map: Map, room: Rect) -> None:
    """Carve the floor of ``room``: x in (x1, x2], y in (y1, y2]."""
    game_map.tiles[room.floor_slices()] = TileType.FLOOR


def apply_horizontal_tunnel(
    game_map: Map, x1: TileCoord, x2: TileCoord, y: TileCoord
) -> None:
    """Carve a Floor run along row ``y`` between x1 and x2 inclusive."""
    for x in range(min(x1, x2), max(x1, x2) + 1):
        if 0 <= x < game_map.width and 0 <= y < game_map.height:
            game_map.tiles[x, y] = TileType.FLOOR


def apply_vertical_tunnel(
    game_map: Map, y1: TileCoord, y2: TileCoord, x: TileCoord
) -> None:
    """Carve a Floor run along column ``x`` between y1 and y2 inclusive."""
    for y in range(min(y1, y2), max(y1, y2) + 1):
        if 0 <= x < game_map.width and 0 <= y < game_map.height:
            game_map.tiles[x, y] = TileType.FLOOR


def draw_corridor(
    game_map: Map, x1: TileCoord, y1: TileCoord, x2: TileCoord, y2: TileCoord
) -> None:
    """Walk from (x1, y1) to (x2, y2), x first, carving every cell entered.

    The starting cell itself is not carved.
    """
    x, y = x1, y1
    while x != x2 or y != y2:
        if x < x2:
            x += 1
        elif x > x2:
            x -= 1
        elif y < y2:
            y += 1
        else:
            y -= 1
        game_map.tiles[x, y] = TileType.FLOOR


def paint(
    game_map: Map, mode: Symmetry, brush_size: int, x: TileCoord, y: TileCoord
) -> None:
    """Carve Floor at (x, y), mirrored about the map center per ``mode``."""
    center_x, center_y = game_map.center()
    game_map.tiles[x, y] = TileType.FLOOR

    match mode:
        case Symmetry.NONE:
            _apply_paint(game_map, brush_size, x, y)
        case Symmetry.HORIZONTAL:
            if x == center_x:
                _apply_paint(game_map, brush_size, x, y)
            else:
                d_x = abs(center_x - x)
                _apply_paint(game_map, brush_size, center_x + d_x, y)
                _apply_paint(game_map, brush_size, center_x - d_x, y)
        case Symmetry.VERTICAL:
            if y == center_y:
                _apply_paint(game_map, brush_size, x, y)
            else:
                d_y = abs(center_y - y)
                _apply_paint(game_map, brush_size, x, center_y + d_y)
                _apply_paint(game_map, brush_size, x, center_y - d_y)
        case Symmetry.BOTH:
            if (x, y) == (center_x, center_y):
                _apply_paint(game_map, brush_size, x, y)
            else:
                d_x = abs(center_x - x)
                _apply_paint(game_map, brush_size, center_x + d_x, y)
                _apply_paint(game_map, brush_size, center_x - d_x, y)
                d_y = abs(center_y - y)
                _apply_paint(game_map, brush_size, x, center_y + d_y)
                _apply_paint(game_map, brush_size, x, center_y - d_y)


def _apply_paint(game_map: Map, brush_size: int, x: TileCoord, y: TileCoord) -> None:
    if brush_size == 1:
        if game_map.in_bounds(x, y):
            game_map.tiles[x, y] = TileType.FLOOR
        return

    half_brush = brush_size // 2
    for brush_y in range(y - half_brush, y + half_brush):
        for brush_x in range(x - half_brush, x + half_brush):
            if game_map.in_bounds(brush_x, brush_y):
                game_map.tiles[brush_x, brush_y] = TileType.FLOOR


# =============================================================================
# Reachability
# =============================================================================


def flood_distances(
    game_map: Map,
    start_idx: TileIndex,
    max_depth: int = config.DIJKSTRA_MAX_DEPTH,
) -> np.ndarray:
    """Movement distance from ``start_idx`` to every tile, in cardinal steps.

    Uses the map's ``blocked`` array, so populate_blocked() must have run.
    Diagonal steps count as 1.45. Blocked tiles and tiles further than
    ``max_depth`` steps are ``inf``. The result has shape ``(width, height)``.
    """
    cost = (~game_map.blocked).astype(np.int32)
    dist = tcod.path.maxarray((game_map.width, game_map.height), dtype=np.int32)
    start_x, start_y = game_map.idx_xy(start_idx)
    dist[start_x, start_y] = 0
    dist = tcod.path.dijkstra2d(
        dist,
        cost,
        config.CARDINAL_STEP_COST,
        config.DIAGONAL_STEP_COST,
        out=dist,
    )

    unreached = dist == np.iinfo(np.int32).max
    steps = dist.astype(np.float64) / config.CARDINAL_STEP_COST
    steps[unreached] = np.inf
    steps[steps > max_depth] = np.inf
    return steps


def remove_unreachable_areas_returning_most_distant(
    game_map: Map, start_idx: TileIndex
) -> TileIndex:
    """Wall off Floor the start can't reach; return the furthest reachable Floor.

    Ties go to the lowest tile index. If nothing but the start is reachable the
    start index itself is returned.
    """
    game_map.populate_blocked()
    distances = flood_distances(game_map, start_idx)
    floors = game_map.tiles == TileType.FLOOR

    unreachable = floors & np.isinf(distances)
    culled = int(np.count_nonzero(unreachable))
    game_map.tiles[unreachable] = TileType.WALL
    if culled:
        game_map.populate_blocked()
    logger.debug("Culled %d unreachable floor tiles", culled)

    reachable = (floors & ~unreachable).reshape(-1, order="F")
    if not reachable.any():
        return start_idx
    flat = np.where(reachable, distances.reshape(-1, order="F"), -1.0)
    return int(np.argmax(flat))


# =============================================================================
# Spawn regions
# =============================================================================


def generate_voronoi_spawn_regions(
    game_map: Map,
    rng: RNG,
    frequency: float = config.SPAWN_REGION_FREQUENCY,
) -> dict[int, list[TileIndex]]:
    """Group Floor tiles into cellular (Worley) noise cells.

    One jittered feature point is scattered per ``1 / frequency`` sized grid
    cell, and each Floor tile joins the region of its nearest feature point
    under the Manhattan metric, which favors elongated regions. Keys are
    feature point ids; regions are disjoint and listed in index order.
    """
    spacing = 1.0 / frequency
    cells_x = int(np.ceil(game_map.width / spacing))
    cells_y = int(np.ceil(game_map.height / spacing))
    points = [
        ((cx + rng.random()) * spacing, (cy + rng.random()) * spacing)
        for cy in range(cells_y)
        for cx in range(cells_x)
    ]
    px = np.array([p[0] for p in points])
    py = np.array([p[1] for p in points])

    floor_idx = np.flatnonzero(game_map.tiles_flat == TileType.FLOOR)
    if floor_idx.size == 0:
        return {}
    xs = (floor_idx % game_map.width).astype(np.float64)
    ys = (floor_idx // game_map.width).astype(np.float64)
    owners = np.argmin(DistanceAlgorithm.MANHATTAN.field(xs, ys, px, py), axis=1)

    regions: dict[int, list[TileIndex]] = {}
    for idx, owner in zip(floor_idx.tolist(), owners.tolist(), strict=True):
        regions.setdefault(owner, []).append(idx)
    return dict(sorted(regions.items()))
