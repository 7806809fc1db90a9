"""Board state models for King's Escape.

This module defines the authoritative snapshot of one game (BoardState), the
per-turn snapshot handed to the history store (TurnSnapshot / PieceRecord),
and the boundary configuration for a new game (GameConfig).

Boundary configuration is never rejected: out-of-range values are clamped
into the playable range and every adjustment is logged and recorded.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, field_validator, model_validator

from kings_escape.errors import ConfigRangeError
from kings_escape.models.geometry import Position, clamp_coordinate, in_bounds
from kings_escape.parameters import (
    DEFAULT_BOARD_SIZE,
    DEFAULT_EXIT,
    DEFAULT_INITIAL_ENEMIES,
    DEFAULT_START,
    MAX_BOARD_SIZE,
    MIN_BOARD_SIZE,
    RESERVED_CELLS,
)

logger = logging.getLogger(__name__)

READY_STATUS = "Ready. Start a new game to begin."


class GameResult(Enum):
    """Outcome of a game."""

    ONGOING = "ongoing"
    WIN = "win"
    LOSE = "lose"


class GamePhase(Enum):
    """Turn engine state machine phases."""

    READY = "ready"  # No game started yet
    IN_PROGRESS = "in_progress"
    WON = "won"
    LOST = "lost"


class PieceType(Enum):
    """Piece types as they are written to the history store."""

    KING = "King"
    ALLY = "Ally"
    PAWN = "Pawn"


def _int_from(value: Any, fallback: int) -> int:
    """Parse an integer leniently, returning fallback for non-numeric input.

    Integers and integer strings keep full precision, however large, so the
    range clamp sees the real value. Only float-like input goes through float.
    """
    if value is None or isinstance(value, bool):
        return fallback
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            pass
    try:
        return int(float(value))
    except (TypeError, ValueError, OverflowError):
        return fallback


def _position_from(value: Any, fallback: tuple[int, int]) -> Any:
    """Coerce an (x, y) pair into Position input, with per-coordinate fallback."""
    if isinstance(value, Position):
        return value
    if isinstance(value, dict):
        return {
            "x": _int_from(value.get("x"), fallback[0]),
            "y": _int_from(value.get("y"), fallback[1]),
        }
    if isinstance(value, (tuple, list)) and len(value) == 2:
        return {"x": _int_from(value[0], fallback[0]), "y": _int_from(value[1], fallback[1])}
    return {"x": fallback[0], "y": fallback[1]}


class PieceRecord(BaseModel):
    """One persisted history row.

    Attributes:
        piece_type: King, Ally or Pawn
        x: Column
        y: Row
        is_enemy: True only for Pawn rows
    """

    piece_type: PieceType
    x: int
    y: int
    is_enemy: bool


class TurnSnapshot(BaseModel):
    """Piece positions at the end of one turn."""

    turn: int = Field(ge=0)
    king: Position
    allies: list[Position] = Field(default_factory=list)
    enemies: list[Position] = Field(default_factory=list)

    def records(self) -> list[PieceRecord]:
        """Flatten the snapshot into rows: king, then allies, then enemies."""
        rows = [PieceRecord(piece_type=PieceType.KING, x=self.king.x, y=self.king.y, is_enemy=False)]
        rows.extend(
            PieceRecord(piece_type=PieceType.ALLY, x=a.x, y=a.y, is_enemy=False)
            for a in self.allies
        )
        rows.extend(
            PieceRecord(piece_type=PieceType.PAWN, x=e.x, y=e.y, is_enemy=True)
            for e in self.enemies
        )
        return rows


class GameConfig(BaseModel):
    """Parameters for a new game, normalized at the boundary.

    Attributes:
        board_size: N, clamped to [MIN_BOARD_SIZE, MAX_BOARD_SIZE]
        start: King start square, clamped onto the board
        exit: Exit square, clamped onto the board
        initial_enemy_count: Clamped to [0, N*N - RESERVED_CELLS]
        adjustments: Human-readable notes for every value that was clamped
    """

    board_size: int = DEFAULT_BOARD_SIZE
    start: Position = Field(default_factory=lambda: Position.of(*DEFAULT_START))
    exit: Position = Field(default_factory=lambda: Position.of(*DEFAULT_EXIT))
    initial_enemy_count: int = DEFAULT_INITIAL_ENEMIES
    adjustments: list[str] = Field(default_factory=list)

    @field_validator("board_size", mode="before")
    @classmethod
    def parse_board_size(cls, v: Any) -> int:
        return _int_from(v, DEFAULT_BOARD_SIZE)

    @field_validator("initial_enemy_count", mode="before")
    @classmethod
    def parse_enemy_count(cls, v: Any) -> int:
        return _int_from(v, DEFAULT_INITIAL_ENEMIES)

    @field_validator("start", mode="before")
    @classmethod
    def parse_start(cls, v: Any) -> Any:
        return _position_from(v, DEFAULT_START)

    @field_validator("exit", mode="before")
    @classmethod
    def parse_exit(cls, v: Any) -> Any:
        return _position_from(v, DEFAULT_EXIT)

    @model_validator(mode="after")
    def clamp_to_board(self) -> GameConfig:
        """Clamp every value into its playable range, recording adjustments."""
        size = max(MIN_BOARD_SIZE, min(MAX_BOARD_SIZE, self.board_size))
        if size != self.board_size:
            self._adjust(f"board_size {self.board_size} clamped to {size}")
            self.board_size = size

        for name in ("start", "exit"):
            pos: Position = getattr(self, name)
            clamped = Position(x=clamp_coordinate(pos.x, size), y=clamp_coordinate(pos.y, size))
            if clamped != pos:
                self._adjust(f"{name} {pos} clamped to {clamped}")
                setattr(self, name, clamped)

        capacity = size * size - RESERVED_CELLS
        count = max(0, min(capacity, self.initial_enemy_count))
        if count != self.initial_enemy_count:
            self._adjust(f"initial_enemy_count {self.initial_enemy_count} clamped to {count}")
            self.initial_enemy_count = count
        return self

    def _adjust(self, note: str) -> None:
        logger.warning(f"Config out of range: {note}")
        self.adjustments.append(note)

    def ensure_unadjusted(self) -> None:
        """Raise ConfigRangeError if any value had to be clamped.

        Raises:
            ConfigRangeError: If adjustments is non-empty
        """
        if self.adjustments:
            raise ConfigRangeError(self.adjustments)


class BoardState(BaseModel):
    """Complete state of one game.

    Attributes:
        size: Board size N (N x N cells)
        start: Square the king started on
        exit: Square the king must reach
        turn: Accepted moves so far (0 before the first move)
        king: Current king square
        enemies: Enemy squares, in processing order (earlier enemies move first)
        allies: Ally squares (order insignificant)
        status: Human-readable description of the last action
        result: ongoing, win or lose
        initial_enemy_count: Enemy count requested by the last new game
        started: False until the first new game; the READY phase
    """

    size: int = Field(default=DEFAULT_BOARD_SIZE, ge=MIN_BOARD_SIZE)
    start: Position = Field(default_factory=lambda: Position.of(*DEFAULT_START))
    exit: Position = Field(default_factory=lambda: Position.of(*DEFAULT_EXIT))
    turn: int = Field(default=0, ge=0)
    king: Position = Field(default_factory=lambda: Position.of(*DEFAULT_START))
    enemies: list[Position] = Field(default_factory=list)
    allies: list[Position] = Field(default_factory=list)
    status: str = READY_STATUS
    result: GameResult = GameResult.ONGOING
    initial_enemy_count: int = Field(default=DEFAULT_INITIAL_ENEMIES, ge=0)
    started: bool = False

    @model_validator(mode="after")
    def check_positions_in_bounds(self) -> BoardState:
        """Every position field must lie on the board."""
        named = [("start", self.start), ("exit", self.exit), ("king", self.king)]
        named.extend(("enemy", e) for e in self.enemies)
        named.extend(("ally", a) for a in self.allies)
        for name, pos in named:
            if not in_bounds(pos.x, pos.y, self.size):
                raise ValueError(f"{name} {pos} is outside the {self.size}x{self.size} board")
        return self

    @property
    def phase(self) -> GamePhase:
        """Current state machine phase."""
        if not self.started:
            return GamePhase.READY
        if self.result == GameResult.WIN:
            return GamePhase.WON
        if self.result == GameResult.LOSE:
            return GamePhase.LOST
        return GamePhase.IN_PROGRESS

    @property
    def is_over(self) -> bool:
        return self.result != GameResult.ONGOING

    def occupancy(self) -> dict[Position, PieceType]:
        """Map each occupied cell to the piece on it."""
        cells: dict[Position, PieceType] = {e: PieceType.PAWN for e in self.enemies}
        cells.update((a, PieceType.ALLY) for a in self.allies)
        cells[self.king] = PieceType.KING
        return cells

    def snapshot(self) -> TurnSnapshot:
        """Snapshot of the current piece positions."""
        return TurnSnapshot(
            turn=self.turn,
            king=self.king,
            allies=list(self.allies),
            enemies=list(self.enemies),
        )
