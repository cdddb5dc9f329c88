"""Spawn planning: which entity names go on which tiles.

The generators never create entities. They append ``(tile index, name)``
pairs to ``BuildData.spawn_list`` and the game hands each pair to its own
EntitySpawner once the chain has finished.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol

from undercroft import config
from undercroft.environment.tile_types import TileType
from undercroft.types import SpawnEntry, TileIndex
from undercroft.util.rng import roll_dice

if TYPE_CHECKING:
    from undercroft.environment.map import Map
    from undercroft.util.coordinates import Rect
    from undercroft.util.rng import RNG

logger = logging.getLogger(__name__)


class EntitySpawner(Protocol):
    """Materializes a named entity at a tile index. Provided by the game."""

    def __call__(self, idx: TileIndex, name: str) -> None: ...


@dataclass
class RandomTable:
    """Weighted name table. Entries with a weight of zero or less are dropped."""

    entries: list[tuple[str, int]] = field(default_factory=list)

    @property
    def total_weight(self) -> int:
        return sum(weight for _, weight in self.entries)

    def add(self, name: str, weight: int) -> RandomTable:
        if weight > 0:
            self.entries.append((name, weight))
        return self

    def roll(self, rng: RNG) -> str | None:
        if not self.entries:
            return None
        roll = rng.randint(1, self.total_weight) - 1
        for name, weight in self.entries:
            if roll < weight:
                return name
            roll -= weight
        return self.entries[-1][0]


def spawn_table(depth: int) -> RandomTable:
    """Monsters, items and traps eligible at ``depth`` with their weights."""
    return (
        RandomTable()
        .add("Goblin", 10)
        .add("Orc", 1 + depth)
        .add("Health Potion", 7)
        .add("Fireball Scroll", 2 + depth)
        .add("Confusion Scroll", 2 + depth)
        .add("Magic Missile Scroll", 4)
        .add("Dagger", 3)
        .add("Shield", 3)
        .add("Longsword", depth - 1)
        .add("Tower Shield", depth - 1)
        .add("Rations", 10)
        .add("Magic Mapping Scroll", 2)
        .add("Bear Trap", 2)
    )


def spawn_count(rng: RNG, depth: int) -> int:
    """Roll how many spawns one room or region receives, never negative."""
    return max(0, roll_dice(rng, 1, config.SPAWN_MAX_MONSTERS + 3) + (depth - 1) - 3)


def spawn_room(
    game_map: Map, rng: RNG, room: Rect, depth: int, spawn_list: list[SpawnEntry]
) -> None:
    """Plan spawns on the carved Floor cells of ``room``."""
    possible_targets = [
        game_map.xy_idx(x, y)
        for x, y in room.floor_cells()
        if game_map.in_bounds(x, y) and game_map.tiles[x, y] == TileType.FLOOR
    ]
    spawn_region(game_map, rng, possible_targets, depth, spawn_list)


def spawn_region(
    game_map: Map,
    rng: RNG,
    area: Iterable[TileIndex],
    depth: int,
    spawn_list: list[SpawnEntry],
) -> None:
    """Plan spawns on distinct Floor tiles of ``area``.

    Tiles already present in ``spawn_list`` are never reused, and the number
    of spawns is capped by the number of free tiles.
    """
    claimed = {idx for idx, _ in spawn_list}
    tiles = game_map.tiles_flat
    areas = [idx for idx in area if idx not in claimed and tiles[idx] == TileType.FLOOR]

    num_spawns = min(len(areas), spawn_count(rng, depth))
    if num_spawns == 0:
        return

    table = spawn_table(depth)
    for _ in range(num_spawns):
        array_index = rng.randrange(len(areas))
        idx = areas.pop(array_index)
        name = table.roll(rng)
        if name is not None:
            spawn_list.append((idx, name))
