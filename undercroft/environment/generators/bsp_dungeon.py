"""Binary space partition dungeon: rooms picked from a subdivided pool."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from undercroft import config
from undercroft.environment.tile_types import TileType
from undercroft.util.coordinates import Rect
from undercroft.util.rng import roll_dice

from .chain import InitialMapBuilder
from .common import apply_room_to_map, draw_corridor

if TYPE_CHECKING:
    from undercroft.environment.map import Map
    from undercroft.util.rng import RNG

    from .build_data import BuildData

logger = logging.getLogger(__name__)


class BspDungeonBuilder(InitialMapBuilder):
    """Place rooms inside randomly chosen BSP partitions.

    The partition pool starts as the whole map and grows by four quarters of
    the chosen partition each time a room is accepted. A candidate room is
    accepted only when it, plus a two tile margin, sits on solid Wall.

    Rooms are joined in order of their left edge, not creation order, so the
    corridors may cross and are not the shortest possible.
    """

    def __init__(self, attempts: int = config.BSP_DUNGEON_ATTEMPTS) -> None:
        self.attempts = attempts

    def build_map(self, rng: RNG, build_data: BuildData) -> None:
        game_map = build_data.map
        rooms: list[Rect] = []
        rects: list[Rect] = [Rect(2, 2, game_map.width - 5, game_map.height - 5)]
        self._add_subrects(rects, rects[0])

        for _ in range(self.attempts):
            rect = self._get_random_rect(rects, rng)
            candidate = self._get_random_sub_rect(rect, rng)

            if self._is_possible(game_map, candidate):
                apply_room_to_map(game_map, candidate)
                rooms.append(candidate)
                self._add_subrects(rects, rect)
                build_data.take_snapshot()

        rooms.sort(key=lambda room: room.x1)
        for room, next_room in zip(rooms, rooms[1:]):
            start_x, start_y = _random_carved_cell(room, rng)
            end_x, end_y = _random_carved_cell(next_room, rng)
            draw_corridor(game_map, start_x, start_y, end_x, end_y)
            build_data.take_snapshot()

        logger.debug("Placed %d rooms from %d partitions", len(rooms), len(rects))
        build_data.rooms = rooms

    @staticmethod
    def _add_subrects(rects: list[Rect], rect: Rect) -> None:
        half_width = max(rect.width // 2, 1)
        half_height = max(rect.height // 2, 1)

        rects.append(Rect(rect.x1, rect.y1, half_width, half_height))
        rects.append(Rect(rect.x1, rect.y1 + half_height, half_width, half_height))
        rects.append(Rect(rect.x1 + half_width, rect.y1, half_width, half_height))
        rects.append(
            Rect(rect.x1 + half_width, rect.y1 + half_height, half_width, half_height)
        )

    @staticmethod
    def _get_random_rect(rects: list[Rect], rng: RNG) -> Rect:
        if len(rects) == 1:
            return rects[0]
        return rects[roll_dice(rng, 1, len(rects)) - 1]

    @staticmethod
    def _get_random_sub_rect(rect: Rect, rng: RNG) -> Rect:
        width = max(3, roll_dice(rng, 1, min(rect.width, 10)) - 1) + 1
        height = max(3, roll_dice(rng, 1, min(rect.height, 10)) - 1) + 1
        x = rect.x1 + roll_dice(rng, 1, 6) - 1
        y = rect.y1 + roll_dice(rng, 1, 6) - 1
        return Rect(x, y, width, height)

    @staticmethod
    def _is_possible(game_map: Map, rect: Rect) -> bool:
        x1, y1 = rect.x1 - 2, rect.y1 - 2
        x2, y2 = rect.x2 + 2, rect.y2 + 2
        if x1 < 1 or y1 < 1 or x2 > game_map.width - 2 or y2 > game_map.height - 2:
            return False
        return bool((game_map.tiles[x1 : x2 + 1, y1 : y2 + 1] == TileType.WALL).all())


def _random_carved_cell(room: Rect, rng: RNG) -> tuple[int, int]:
    """A random cell of the carved interior of ``room``."""
    return (
        room.x1 + roll_dice(rng, 1, room.width),
        room.y1 + roll_dice(rng, 1, room.height),
    )
