from __future__ import annotations

from typing import TypeAlias

# =============================================================================
# GRID TYPES
# =============================================================================

TileCoord: TypeAlias = int

# (x, y) on the level map; (0, 0) is the top-left border corner.
WorldTilePos: TypeAlias = tuple[TileCoord, TileCoord]

# Flat row-major index into a map's tile arrays: idx = y * width + x
TileIndex: TypeAlias = int

# =============================================================================
# GENERATION TYPES
# =============================================================================

# Master seed: an int, a readable string such as "undercroft", or None for
# system entropy.
RandomSeed: TypeAlias = int | str | None

# A pending entity placement: (tile index, entity name), e.g. (812, "Goblin")
SpawnEntry: TypeAlias = tuple[TileIndex, str]
