"""King move validation.

Rules are checked in order and the first failure wins:
1. The game must be in progress (GameOverError / GameNotStartedError)
2. The destination must be on the board (OutOfBoundsError)
3. The destination must be one king step away (NotAdjacentError)
4. The destination must not hold an enemy or an ally (OccupiedError)

Validation is pure: it never modifies the board.
"""

from __future__ import annotations

from kings_escape.errors import (
    GameNotStartedError,
    GameOverError,
    MoveError,
    NotAdjacentError,
    OccupiedError,
    OutOfBoundsError,
)
from kings_escape.models.board import BoardState, GamePhase
from kings_escape.models.geometry import Position, chebyshev_distance, in_bounds, neighbors8


def validate_move(state: BoardState, destination: Position) -> None:
    """Check that the king may move to destination.

    Args:
        state: Current board
        destination: Requested king square

    Raises:
        GameNotStartedError: No game has been started
        GameOverError: The game already ended
        OutOfBoundsError: Destination is off the board
        NotAdjacentError: Destination is not a neighbor of the king
        OccupiedError: Destination holds an enemy or an ally
    """
    phase = state.phase
    if phase == GamePhase.READY:
        raise GameNotStartedError()
    if phase != GamePhase.IN_PROGRESS:
        raise GameOverError()

    if not in_bounds(destination.x, destination.y, state.size):
        raise OutOfBoundsError()

    if chebyshev_distance(state.king, destination) != 1:
        raise NotAdjacentError()

    if destination in state.enemies or destination in state.allies:
        raise OccupiedError()


def is_legal_move(state: BoardState, destination: Position) -> bool:
    """Return True if validate_move accepts destination."""
    try:
        validate_move(state, destination)
    except MoveError:
        return False
    return True


def legal_moves(state: BoardState) -> list[Position]:
    """All squares the king may move to this turn.

    Empty unless the game is in progress.
    """
    if state.phase != GamePhase.IN_PROGRESS:
        return []
    return [
        cell
        for cell in neighbors8(state.king.x, state.king.y, state.size)
        if is_legal_move(state, cell)
    ]


def has_free_neighbor(state: BoardState) -> bool:
    """True if at least one king neighbor is free of enemies and allies."""
    occupied = set(state.enemies) | set(state.allies)
    return any(
        cell not in occupied
        for cell in neighbors8(state.king.x, state.king.y, state.size)
    )
