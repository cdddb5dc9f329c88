"""Post-processing stages that read the rooms an initial stage carved."""

from __future__ import annotations

from typing import TYPE_CHECKING

from undercroft.environment.tile_types import TileType

from .chain import MetaMapBuilder, MissingRoomsError
from .spawning import spawn_room

if TYPE_CHECKING:
    from undercroft.util.coordinates import Rect
    from undercroft.util.rng import RNG

    from .build_data import BuildData


def _require_rooms(build_data: BuildData, stage: str) -> list[Rect]:
    if not build_data.rooms:
        raise MissingRoomsError(f"{stage} only works after rooms have been created")
    return build_data.rooms


class RoomBasedSpawner(MetaMapBuilder):
    """Plan spawns in every room except the first, where the player starts."""

    def build_map(self, rng: RNG, build_data: BuildData) -> None:
        rooms = _require_rooms(build_data, "Room-based spawning")
        for room in rooms[1:]:
            spawn_room(
                build_data.map, rng, room, build_data.map.depth, build_data.spawn_list
            )


class RoomBasedStartingPosition(MetaMapBuilder):
    """Start the player at the center of the first room."""

    def build_map(self, rng: RNG, build_data: BuildData) -> None:
        rooms = _require_rooms(build_data, "Room-based start")
        build_data.start = rooms[0].center()


class RoomBasedStairs(MetaMapBuilder):
    """Put the down stairs at the center of the last room."""

    def build_map(self, rng: RNG, build_data: BuildData) -> None:
        rooms = _require_rooms(build_data, "Room-based stairs")
        stairs_x, stairs_y = rooms[-1].center()
        build_data.map.tiles[stairs_x, stairs_y] = TileType.DOWN_STAIRS
        build_data.prune_spawns()
        build_data.take_snapshot()
