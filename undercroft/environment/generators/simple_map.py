"""Classic rooms-and-corridors generator."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from undercroft import config
from undercroft.util.coordinates import Rect
from undercroft.util.rng import roll_dice

from .chain import InitialMapBuilder
from .common import apply_horizontal_tunnel, apply_room_to_map, apply_vertical_tunnel

if TYPE_CHECKING:
    from undercroft.util.rng import RNG

    from .build_data import BuildData

logger = logging.getLogger(__name__)


class SimpleMapBuilder(InitialMapBuilder):
    """Scatter non-overlapping rooms and join each to the previous one.

    Every candidate room is accepted only if it doesn't intersect a room placed
    before it. Successive rooms are joined with an L-shaped tunnel whose bend
    direction is a coin flip.
    """

    def __init__(
        self,
        max_rooms: int = config.SIMPLE_MAP_MAX_ROOMS,
        min_size: int = config.SIMPLE_MAP_MIN_ROOM_SIZE,
        max_size: int = config.SIMPLE_MAP_MAX_ROOM_SIZE,
    ) -> None:
        self.max_rooms = max_rooms
        self.min_size = min_size
        self.max_size = max_size

    def build_map(self, rng: RNG, build_data: BuildData) -> None:
        game_map = build_data.map
        rooms: list[Rect] = []

        for _ in range(self.max_rooms):
            w = rng.randrange(self.min_size, self.max_size)
            h = rng.randrange(self.min_size, self.max_size)
            x = roll_dice(rng, 1, game_map.width - w - 1) - 1
            y = roll_dice(rng, 1, game_map.height - h - 1) - 1
            new_room = Rect(x, y, w, h)

            if any(new_room.intersects(other) for other in rooms):
                continue

            apply_room_to_map(game_map, new_room)
            build_data.take_snapshot()

            if rooms:
                new_x, new_y = new_room.center()
                prev_x, prev_y = rooms[-1].center()
                if rng.randint(0, 1) == 1:
                    apply_horizontal_tunnel(game_map, prev_x, new_x, prev_y)
                    apply_vertical_tunnel(game_map, prev_y, new_y, new_x)
                else:
                    apply_vertical_tunnel(game_map, prev_y, new_y, prev_x)
                    apply_horizontal_tunnel(game_map, prev_x, new_x, new_y)

            rooms.append(new_room)
            build_data.take_snapshot()

        logger.debug("Placed %d rooms", len(rooms))
        build_data.rooms = rooms
