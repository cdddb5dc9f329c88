"""The stage that stamps prefab templates onto a level.

PrefabBuilder works in four modes:

- level: a whole ASCII level drawn from the top-left corner (initial stage)
- rex_level: the same from a REXPaint ``.xp`` file
- sectional: one fixed section stamped at an edge, corner or the middle of an
  existing map; spawns already planned inside it are dropped
- room_vaults: small vaults dropped into open floor pockets of an existing
  map; again, spawns already planned inside each vault are dropped

Cells on the map border are never stamped, so the level stays closed.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, TypeAlias

import numpy as np
import tcod.console
import tcod.tileset
from numpy.lib.stride_tricks import sliding_window_view

from undercroft.environment.tile_types import TileType
from undercroft.types import TileCoord
from undercroft.util.coordinates import Rect
from undercroft.util.rng import roll_dice

from ..chain import InitialMapBuilder, MetaMapBuilder, NoValidStartError
from ..common import remove_unreachable_areas_returning_most_distant
from .levels import GUARD_POST, PrefabLevel
from .rooms import ALL_VAULTS, PrefabRoom
from .sections import HorizontalPlacement, PrefabSection, VerticalPlacement
from .templates import GLYPH_SPAWNS, GLYPH_TILES, START_GLYPH, template_rows

if TYPE_CHECKING:
    from undercroft.util.rng import RNG

    from ..build_data import BuildData

logger = logging.getLogger(__name__)

MAX_VAULTS = 3

# REXPaint paints transparent cells with a magenta background.
REX_TRANSPARENT_BG = (255, 0, 255)

_CP437 = np.asarray(tcod.tileset.CHARMAP_CP437)


@dataclass(frozen=True)
class LevelMode:
    level: PrefabLevel


@dataclass(frozen=True)
class RexLevelMode:
    path: Path


@dataclass(frozen=True)
class SectionalMode:
    section: PrefabSection


@dataclass(frozen=True)
class RoomVaultsMode:
    vaults: tuple[PrefabRoom, ...]


PrefabMode: TypeAlias = LevelMode | RexLevelMode | SectionalMode | RoomVaultsMode


class PrefabBuilder(InitialMapBuilder, MetaMapBuilder):
    """Stamp hand-made templates. Usable as an initial or a meta stage.

    The level modes are meant to start a chain; sectional and room vault modes
    decorate a map an earlier stage produced.
    """

    def __init__(self, mode: PrefabMode) -> None:
        self.mode = mode

    @classmethod
    def level(cls, level: PrefabLevel = GUARD_POST) -> PrefabBuilder:
        return cls(LevelMode(level))

    @classmethod
    def rex_level(cls, path: str | Path) -> PrefabBuilder:
        return cls(RexLevelMode(Path(path)))

    @classmethod
    def sectional(cls, section: PrefabSection) -> PrefabBuilder:
        return cls(SectionalMode(section))

    @classmethod
    def room_vaults(cls, vaults: tuple[PrefabRoom, ...] = ALL_VAULTS) -> PrefabBuilder:
        return cls(RoomVaultsMode(vaults))

    def build_map(self, rng: RNG, build_data: BuildData) -> None:
        match self.mode:
            case LevelMode(level=level):
                rows = template_rows(level.template, level.width, level.height)
                self._load_level(build_data, rows)
            case RexLevelMode(path=path):
                layers = tcod.console.load_xp(path, order="F")
                self._load_level(build_data, self._rex_rows(layers))
            case SectionalMode(section=section):
                self._apply_sectional(build_data, section)
            case RoomVaultsMode(vaults=vaults):
                self._apply_room_vaults(rng, build_data, vaults)

    # -------------------------------------------------------------------------
    # Glyphs
    # -------------------------------------------------------------------------

    @staticmethod
    def _char_to_map(build_data: BuildData, ch: str, x: TileCoord, y: TileCoord) -> None:
        """Apply one template glyph to the map at (x, y).

        Unknown glyphs are logged and leave the cell as it was.
        """
        game_map = build_data.map
        if not game_map.in_bounds(x, y):
            return

        if ch in GLYPH_TILES:
            game_map.tiles[x, y] = GLYPH_TILES[ch]
            if ch == START_GLYPH:
                build_data.start = (x, y)
        elif ch in GLYPH_SPAWNS:
            game_map.tiles[x, y] = TileType.FLOOR
            build_data.spawn_list.append((game_map.xy_idx(x, y), GLYPH_SPAWNS[ch]))
        else:
            logger.warning("Unknown glyph when loading map: %r", ch)

    @staticmethod
    def _rex_rows(layers: Sequence[tcod.console.Console]) -> list[list[str | None]]:
        """Flatten the layers of an .xp image into rows of glyphs.

        Layers must be loaded with ``order="F"``. Later layers draw over earlier
        ones; transparent cells draw nothing and come out as None. REXPaint
        stores code page 437 indices, which are mapped to Unicode here.
        """
        width = max((layer.width for layer in layers), default=0)
        height = max((layer.height for layer in layers), default=0)
        grid: list[list[str | None]] = [[None] * width for _ in range(height)]
        for layer in layers:
            codes = np.where(layer.ch < len(_CP437), _CP437[layer.ch.clip(0, 255)], layer.ch)
            opaque = (layer.bg != REX_TRANSPARENT_BG).any(axis=-1)
            for x, y in np.argwhere(opaque).tolist():
                grid[y][x] = chr(codes[x, y])
        return grid

    # -------------------------------------------------------------------------
    # Level mode
    # -------------------------------------------------------------------------

    def _load_level(
        self, build_data: BuildData, rows: Sequence[Sequence[str | None]]
    ) -> None:
        game_map = build_data.map
        for y, row in enumerate(rows[: game_map.height]):
            for x, ch in enumerate(row[: game_map.width]):
                if ch is not None:
                    self._char_to_map(build_data, ch, x, y)
        build_data.take_snapshot()

        if build_data.start is None:
            build_data.start = self._fallback_start(build_data)
            build_data.take_snapshot()

        if not (game_map.tiles == TileType.DOWN_STAIRS).any():
            exit_idx = remove_unreachable_areas_returning_most_distant(
                game_map, build_data.start_idx
            )
            game_map.tiles_flat[exit_idx] = TileType.DOWN_STAIRS
            build_data.prune_spawns()
            build_data.take_snapshot()

    @staticmethod
    def _fallback_start(build_data: BuildData) -> tuple[int, int]:
        """Walk left from the map center to the first Floor tile."""
        game_map = build_data.map
        x, y = game_map.center()
        while x > 0:
            if game_map.tiles[x, y] == TileType.FLOOR:
                return (x, y)
            x -= 1
        raise NoValidStartError("No floor to the left of the map center")

    # -------------------------------------------------------------------------
    # Sectional mode
    # -------------------------------------------------------------------------

    def _apply_sectional(self, build_data: BuildData, section: PrefabSection) -> None:
        game_map = build_data.map
        rows = template_rows(section.template, section.width, section.height)
        horizontal, vertical = section.placement

        match horizontal:
            case HorizontalPlacement.LEFT:
                chunk_x = 0
            case HorizontalPlacement.CENTER:
                chunk_x = (game_map.width // 2) - (section.width // 2)
            case HorizontalPlacement.RIGHT:
                chunk_x = (game_map.width - 1) - section.width
        match vertical:
            case VerticalPlacement.TOP:
                chunk_y = 0
            case VerticalPlacement.CENTER:
                chunk_y = (game_map.height // 2) - (section.height // 2)
            case VerticalPlacement.BOTTOM:
                chunk_y = (game_map.height - 1) - section.height
        chunk_x = max(chunk_x, 0)
        chunk_y = max(chunk_y, 0)

        build_data.discard_spawns_in(Rect(chunk_x, chunk_y, section.width, section.height))
        for ty, row in enumerate(rows):
            for tx, ch in enumerate(row):
                self._char_to_map(build_data, ch, chunk_x + tx, chunk_y + ty)

        # A section stamped over the start must not wall the player in.
        if build_data.start is not None:
            start_x, start_y = build_data.start
            if game_map.tiles[start_x, start_y] == TileType.WALL:
                game_map.tiles[start_x, start_y] = TileType.FLOOR
        build_data.take_snapshot()

    # -------------------------------------------------------------------------
    # Room vault mode
    # -------------------------------------------------------------------------

    def _apply_room_vaults(
        self, rng: RNG, build_data: BuildData, vaults: tuple[PrefabRoom, ...]
    ) -> None:
        game_map = build_data.map
        depth = game_map.depth
        possible_vaults = [vault for vault in vaults if vault.allowed_at(depth)]
        if not possible_vaults:
            return

        n_vaults = min(roll_dice(rng, 1, MAX_VAULTS), len(possible_vaults))
        used = np.zeros((game_map.width, game_map.height), dtype=bool, order="F")

        for _ in range(n_vaults):
            vault_index = rng.randrange(len(possible_vaults))
            vault = possible_vaults[vault_index]
            positions = self.find_vault_positions(build_data, vault, used)
            if not positions:
                logger.warning("No open pocket fits a %dx%d vault", vault.width, vault.height)
                continue

            chunk_x, chunk_y = rng.choice(positions)
            build_data.discard_spawns_in(Rect(chunk_x, chunk_y, vault.width, vault.height))
            rows = template_rows(vault.template, vault.width, vault.height)
            for ty, row in enumerate(rows):
                for tx, ch in enumerate(row):
                    self._char_to_map(build_data, ch, chunk_x + tx, chunk_y + ty)
            used[chunk_x : chunk_x + vault.width, chunk_y : chunk_y + vault.height] = True
            build_data.take_snapshot()
            possible_vaults.pop(vault_index)

    @staticmethod
    def find_vault_positions(
        build_data: BuildData, vault: PrefabRoom, used: np.ndarray
    ) -> list[tuple[int, int]]:
        """Top-left corners where ``vault`` covers only free Floor, row by row.

        The vault must also keep a two tile margin from the map edge.
        """
        game_map = build_data.map
        if vault.width > game_map.width or vault.height > game_map.height:
            return []
        free = (game_map.tiles == TileType.FLOOR) & ~used
        fits = sliding_window_view(free, (vault.width, vault.height)).all(axis=(2, 3))

        xs = np.arange(fits.shape[0])[:, None]
        ys = np.arange(fits.shape[1])[None, :]
        fits &= (xs > 1) & (xs + vault.width < game_map.width - 2)
        fits &= (ys > 1) & (ys + vault.height < game_map.height - 2)

        # argwhere on the transpose yields (y, x) pairs in row-major order.
        return [(int(x), int(y)) for y, x in np.argwhere(fits.T)]
