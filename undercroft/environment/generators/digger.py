"""Random-walk cursors used by the organic generators."""

from __future__ import annotations

from typing import TYPE_CHECKING

from undercroft.environment.tile_types import TileType
from undercroft.types import TileCoord, WorldTilePos

from .common import Symmetry, paint

if TYPE_CHECKING:
    from undercroft.environment.map import Map
    from undercroft.util.rng import RNG


class Digger:
    """A cursor that staggers one cardinal step at a time.

    The digger never owns an RNG; every move takes one as an argument.
    """

    def __init__(self, x: TileCoord, y: TileCoord) -> None:
        self.x = x
        self.y = y

    @property
    def position(self) -> WorldTilePos:
        return (self.x, self.y)

    def stagger_direction(self, game_map: Map, rng: RNG) -> None:
        """Move one step in a random cardinal direction.

        A move that would leave the ``[2, size - 2]`` band is skipped, so the
        digger always stays at least one cell clear of the border ring.
        """
        match rng.randint(1, 4):
            case 1:
                if self.x > 2:
                    self.x -= 1
            case 2:
                if self.x < game_map.width - 2:
                    self.x += 1
            case 3:
                if self.y > 2:
                    self.y -= 1
            case _:
                if self.y < game_map.height - 2:
                    self.y += 1


class DrunkDigger(Digger):
    """Staggers for a fixed lifetime, carving every cell it visits.

    Visited cells are marked DOWN_STAIRS so the caller can see this digger's
    path; the caller turns them back into Floor afterwards.
    """

    def __init__(self, x: TileCoord, y: TileCoord, lifetime: int) -> None:
        super().__init__(x, y)
        self.life = lifetime
        self.did_something = False

    def stagger(
        self, game_map: Map, rng: RNG, symmetry: Symmetry, brush_size: int
    ) -> None:
        while self.life > 0:
            if game_map.tiles[self.x, self.y] == TileType.WALL:
                self.did_something = True
            paint(game_map, symmetry, brush_size, self.x, self.y)
            game_map.tiles[self.x, self.y] = TileType.DOWN_STAIRS

            self.stagger_direction(game_map, rng)
            self.life -= 1


class TileDigger(Digger):
    """Staggers for as long as it stands on ``tile_type``."""

    def __init__(self, x: TileCoord, y: TileCoord, tile_type: TileType) -> None:
        super().__init__(x, y)
        self.tile_type = tile_type

    def stagger(self, game_map: Map, rng: RNG) -> WorldTilePos:
        """Walk until leaving ``tile_type``; return the last cell still on it.

        If the digger starts off ``tile_type`` it doesn't move and its own
        position is returned.
        """
        prev = self.position
        while game_map.tiles[self.x, self.y] == self.tile_type:
            prev = self.position
            self.stagger_direction(game_map, rng)
        return prev
