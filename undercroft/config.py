"""
Configuration constants.

Centralizes all magic numbers and configuration values used by the level
generators. Organized by functional area for easy maintenance.
"""

# =============================================================================
# GENERAL
# =============================================================================

# Default master seed for build_level and the preview script. Set to None to
# draw a fresh seed from system entropy on every run.
RANDOM_SEED = "undercroft"

# =============================================================================
# MAP DIMENSIONS
# =============================================================================

MAP_WIDTH = 80
MAP_HEIGHT = 43

# =============================================================================
# DIAGNOSTICS
# =============================================================================

# Default for BuilderChain(record_history=...). When True every stage appends
# revealed copies of the map to BuildData.history for step-by-step playback.
# Generation output is identical either way.
SHOW_MAPGEN_VISUALIZER = False

# =============================================================================
# REACHABILITY
# =============================================================================

# Flood distance cap used by CullUnreachable / DistantExit. Tiles further than
# this from the start count as unreachable.
DIJKSTRA_MAX_DEPTH = 1000

# Movement costs used by the reachability flood (8-way).
CARDINAL_STEP_COST = 100
DIAGONAL_STEP_COST = 145

# =============================================================================
# ROOM-BASED GENERATORS
# =============================================================================

SIMPLE_MAP_MAX_ROOMS = 30
SIMPLE_MAP_MIN_ROOM_SIZE = 6
SIMPLE_MAP_MAX_ROOM_SIZE = 10

# Number of candidate rooms drawn from the BSP rectangle pool.
BSP_DUNGEON_ATTEMPTS = 240

# Partitions are split until their half-size drops to this value.
BSP_INTERIOR_MIN_ROOM_SIZE = 8

# =============================================================================
# ORGANIC GENERATORS
# =============================================================================

CELLULAR_AUTOMATA_ITERATIONS = 15
CELLULAR_AUTOMATA_FLOOR_CHANCE = 0.45

VORONOI_SEEDS = 64

# =============================================================================
# WAVE FUNCTION COLLAPSE
# =============================================================================

WFC_CHUNK_SIZE = 7

# =============================================================================
# SPAWNING
# =============================================================================

# A room or region rolls 1d(SPAWN_MAX_MONSTERS + 3) + depth - 4 spawns, floored
# at 0.
SPAWN_MAX_MONSTERS = 4

# Feature size of the cellular noise used to group floor tiles into spawn
# regions. Smaller values give larger regions.
SPAWN_REGION_FREQUENCY = 0.08
