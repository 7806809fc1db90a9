"""King's Escape game models.

This module exports the core data structures for the game.
"""

from .board import (
    READY_STATUS,
    BoardState,
    GameConfig,
    GamePhase,
    GameResult,
    PieceRecord,
    PieceType,
    TurnSnapshot,
)
from .geometry import (
    Position,
    chebyshev_distance,
    clamp_coordinate,
    in_bounds,
    neighbors8,
)

__all__ = [
    # Enums
    "GameResult",
    "GamePhase",
    "PieceType",
    # State Models
    "BoardState",
    "GameConfig",
    "PieceRecord",
    "TurnSnapshot",
    "Position",
    # Geometry Functions
    "chebyshev_distance",
    "clamp_coordinate",
    "in_bounds",
    "neighbors8",
    # Constants
    "READY_STATUS",
]
