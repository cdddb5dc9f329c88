"""Mutable build state threaded through a generation chain.

BuildData is the single record every stage receives. Stages modify it in
place; nothing is copied between stages except the diagnostic snapshots.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from undercroft import config
from undercroft.environment.map import Map
from undercroft.environment.tile_types import TileType
from undercroft.types import SpawnEntry, TileIndex, WorldTilePos
from undercroft.util.coordinates import Rect


@dataclass
class BuildData:
    """Everything a level generation run produces.

    Attributes:
        map: The map being built.
        start: Player start position, once a stage has chosen one.
        rooms: Carved rooms. Only room-based initial stages set this; it stays
            None for organic generators.
        spawn_list: Pending (tile index, entity name) placements.
        history: Revealed deep copies of the map taken after meaningful
            mutations. Never read by generation logic.
        record_history: Whether take_snapshot() records anything.
    """

    map: Map
    start: WorldTilePos | None = None
    rooms: list[Rect] | None = None
    spawn_list: list[SpawnEntry] = field(default_factory=list)
    history: list[Map] = field(default_factory=list)
    record_history: bool = False

    @classmethod
    def create_empty(
        cls,
        depth: int,
        width: int = config.MAP_WIDTH,
        height: int = config.MAP_HEIGHT,
        record_history: bool = config.SHOW_MAPGEN_VISUALIZER,
    ) -> BuildData:
        """Create build data holding an all-wall map for ``depth``."""
        return cls(map=Map(width, height, depth), record_history=record_history)

    def take_snapshot(self, game_map: Map | None = None) -> None:
        """Append a fully revealed copy of the map to the history.

        Snapshots the map being built unless another map, such as a scratch
        gallery, is given.
        """
        if self.record_history:
            snapshot = (game_map if game_map is not None else self.map).copy()
            snapshot.reveal_all()
            self.history.append(snapshot)

    def reset_map(self) -> None:
        """Replace the map with a fresh all-wall one at the same depth and size."""
        self.map = Map(self.map.width, self.map.height, self.map.depth)

    @property
    def start_idx(self) -> TileIndex | None:
        if self.start is None:
            return None
        return self.map.xy_idx(*self.start)

    def claimed_indices(self) -> set[TileIndex]:
        """Tile indices already present in the spawn list."""
        return {idx for idx, _ in self.spawn_list}

    def prune_spawns(self) -> None:
        """Drop pending spawns that no longer sit on a Floor tile."""
        tiles = self.map.tiles_flat
        self.spawn_list = [
            (idx, name) for idx, name in self.spawn_list if tiles[idx] == TileType.FLOOR
        ]

    def discard_spawns_in(self, rect: Rect) -> None:
        """Drop every pending spawn whose tile lies inside ``rect``.

        ``rect`` is inclusive of x1/y1 and exclusive of x2/y2 here: it is a
        stamped footprint, not a carved room.
        """
        width = self.map.width
        self.spawn_list = [
            (idx, name)
            for idx, name in self.spawn_list
            if not (
                rect.x1 <= idx % width < rect.x2 and rect.y1 <= idx // width < rect.y2
            )
        ]
