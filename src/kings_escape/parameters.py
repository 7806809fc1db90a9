"""Game parameters for King's Escape.

This module is the SINGLE SOURCE OF TRUTH for the game's constants.

Parameter Categories:
- Board: size limits and default layout
- Spawning: how new pieces appear after each enemy turn

Usage:
    from kings_escape.parameters import DEFAULT_BOARD_SIZE, SPAWN_ENEMY_PROBABILITY
"""

# =============================================================================
# BOARD PARAMETERS
# =============================================================================

MIN_BOARD_SIZE = 2
"""Smallest playable board (N x N)."""

MAX_BOARD_SIZE = 12
"""Largest board accepted at the configuration boundary.

Larger requests are clamped down to this value.
"""

DEFAULT_BOARD_SIZE = 8
"""Board size used when no (or non-numeric) size is supplied."""

DEFAULT_START = (1, 1)
"""Default king start square (x, y)."""

DEFAULT_EXIT = (2, 2)
"""Default exit square (x, y)."""

DEFAULT_INITIAL_ENEMIES = 1
"""Number of enemies placed on the board by a new game."""

RESERVED_CELLS = 2
"""Cells never available to initial enemies: the king's start and the exit.

The initial enemy count is clamped to N*N - RESERVED_CELLS.
"""


# =============================================================================
# SPAWN PARAMETERS
# =============================================================================

SPAWN_ENEMY_PROBABILITY = 0.70
"""Probability that the piece spawned after an enemy turn is an enemy.

The remaining 0.30 spawns an ally. Constant; not derived from board state.
"""
