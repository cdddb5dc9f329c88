"""Binary space partition interior: the whole map split into rooms."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from undercroft import config
from undercroft.util.coordinates import Rect
from undercroft.util.rng import roll_dice

from .chain import InitialMapBuilder
from .common import apply_room_to_map, draw_corridor

if TYPE_CHECKING:
    from undercroft.util.rng import RNG

    from .build_data import BuildData

logger = logging.getLogger(__name__)


class BspInteriorBuilder(InitialMapBuilder):
    """Recursively bisect the interior and turn every leaf into a room.

    Each split picks its axis with a weighted coin flip and leaves a one tile
    wall between the halves. A half keeps splitting while it is larger than
    ``min_room_size``. Leaves never overlap, so no rejection is needed, and
    consecutive leaves are joined by corridors.

    Leaves are carved like every other room, through Rect.floor_slices(). The
    root rectangle starts on the border corner so the floor of the whole
    partition is exactly the map interior.
    """

    def __init__(self, min_room_size: int = config.BSP_INTERIOR_MIN_ROOM_SIZE) -> None:
        self.min_room_size = min_room_size

    def build_map(self, rng: RNG, build_data: BuildData) -> None:
        game_map = build_data.map
        rects: list[Rect] = []
        self._add_subrects(rects, Rect(0, 0, game_map.width - 2, game_map.height - 2), rng)

        rooms = list(rects)
        for room in rooms:
            apply_room_to_map(game_map, room)
            build_data.take_snapshot()

        for room, next_room in zip(rooms, rooms[1:]):
            start_x = room.x1 + roll_dice(rng, 1, room.width)
            start_y = room.y1 + roll_dice(rng, 1, room.height)
            end_x = next_room.x1 + roll_dice(rng, 1, next_room.width)
            end_y = next_room.y1 + roll_dice(rng, 1, next_room.height)
            draw_corridor(game_map, start_x, start_y, end_x, end_y)
            build_data.take_snapshot()

        game_map.wall_border()
        logger.debug("Partitioned interior into %d rooms", len(rooms))
        build_data.rooms = rooms

    def _add_subrects(self, rects: list[Rect], rect: Rect, rng: RNG) -> None:
        half_width = rect.width // 2
        half_height = rect.height // 2

        if roll_dice(rng, 1, 4) <= 2:
            halves = [
                (Rect(rect.x1, rect.y1, half_width - 1, rect.height), half_width),
                (Rect(rect.x1 + half_width, rect.y1, half_width, rect.height), half_width),
            ]
        else:
            halves = [
                (Rect(rect.x1, rect.y1, rect.width, half_height - 1), half_height),
                (
                    Rect(rect.x1, rect.y1 + half_height, rect.width, half_height),
                    half_height,
                ),
            ]

        for half, size in halves:
            if size > self.min_room_size:
                self._add_subrects(rects, half, rng)
            else:
                rects.append(half)
