"""Abstract repository interfaces for King's Escape storage.

This module defines the abstract base classes for the turn history store and
the current-game store. Both SQLite and file-based (JSON) backends implement
these interfaces, so the engine and CLI use storage without knowing which
backend is active.

Failures are never retried or masked here; backend errors propagate to the
caller.
"""

from abc import ABC, abstractmethod
from typing import Optional

from kings_escape.models.board import BoardState, PieceRecord
from kings_escape.models.geometry import Position


class HistoryRecorder(ABC):
    """Append-only log of per-turn piece positions."""

    @abstractmethod
    def reset(self) -> None:
        """Delete every recorded snapshot."""
        pass

    @abstractmethod
    def record_turn(
        self,
        turn: int,
        king: Position,
        allies: list[Position],
        enemies: list[Position],
    ) -> None:
        """Append one row per piece for a turn.

        Rows are written king first, then allies in list order, then enemies
        in list order. Only enemy rows (piece type "Pawn") have is_enemy set.

        Args:
            turn: Turn number the snapshot belongs to
            king: King square
            allies: Ally squares
            enemies: Enemy squares
        """
        pass

    @abstractmethod
    def fetch_turn(self, turn: int) -> list[PieceRecord]:
        """Return the rows recorded for a turn, in insertion order.

        Args:
            turn: Turn number

        Returns:
            List of PieceRecord (empty if nothing was recorded)
        """
        pass

    @abstractmethod
    def list_turns(self) -> list[int]:
        """Return the distinct recorded turn numbers in ascending order."""
        pass


class GameStateRepository(ABC):
    """Storage for the board of the current game between requests."""

    @abstractmethod
    def load_state(self) -> Optional[BoardState]:
        """Load the saved board.

        Returns:
            BoardState, or None if nothing has been saved
        """
        pass

    @abstractmethod
    def save_state(self, state: BoardState) -> None:
        """Persist the board, replacing any previous one."""
        pass

    @abstractmethod
    def clear_state(self) -> bool:
        """Forget the saved board.

        Returns:
            True if a board was deleted, False if none was saved
        """
        pass
