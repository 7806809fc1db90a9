"""Turn engine for King's Escape.

This module implements the TurnEngine class, which owns the game's state
machine and runs one turn at a time against an explicit BoardState.

Phases:
    READY -> (new game) -> IN_PROGRESS -> WON | LOST -> (new game) -> IN_PROGRESS

Turn Sequence:
1. VALIDATE - Reject illegal king moves (board unchanged, status updated)
2. KING MOVE - Increment turn, move the king
3. ENEMY TURN - Resolve enemy movement; a capture ends the game at once
4. SPAWN - Add one enemy or ally on a random empty cell
5. RECORD - Persist the turn's snapshot to the history store
6. CHECK ENDINGS - Enemy on king (lose), king on exit (win), trapped (lose)

Each turn is computed into fresh values and returned as a new BoardState;
the caller's BoardState is never modified.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from typing import Any, Optional

from kings_escape.engine.movement import MovementResult, Sacrifice, resolve_enemy_moves
from kings_escape.engine.spawning import Spawn, SpawnKind, spawn_initial_enemies, spawn_random_piece
from kings_escape.engine.validation import has_free_neighbor, validate_move
from kings_escape.errors import MoveError
from kings_escape.models.board import BoardState, GameConfig, GameResult, TurnSnapshot
from kings_escape.models.geometry import Position
from kings_escape.storage.repository import HistoryRecorder

logger = logging.getLogger(__name__)

NEW_GAME_STATUS = "Game started. King at start."


@dataclass
class TurnReport:
    """What happened during one move request.

    Attributes:
        accepted: Whether the king move passed validation
        turn: Turn number after the request
        error: The rejection (None if accepted)
        captured: Whether an enemy stepped onto the king
        captured_enemy_index: Index of the capturing enemy (None if no capture)
        sacrifices: Allies removed during the enemy turn
        spawn: Piece added after the enemy turn (None if none)
        trapped: Whether the game was lost because the king cannot move
    """

    accepted: bool
    turn: int
    error: Optional[MoveError] = None
    captured: bool = False
    captured_enemy_index: Optional[int] = None
    sacrifices: list[Sacrifice] = field(default_factory=list)
    spawn: Optional[Spawn] = None
    trapped: bool = False


class TurnEngine:
    """Runs new games and turns against an explicit BoardState.

    The engine holds no board of its own; callers pass the current
    BoardState in and keep the one returned.

    Attributes:
        history: Turn history store written after every accepted move
    """

    def __init__(
        self,
        history: HistoryRecorder,
        random_seed: Optional[int] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        """Initialize the engine.

        Args:
            history: Turn history store
            random_seed: Seed for the random source (ignored if rng is given)
            rng: Random source for movement order and spawns
        """
        self.history = history
        self._random = rng if rng is not None else random.Random(random_seed)

    # =========================================================================
    # Public API
    # =========================================================================

    def new_game(self, config: Optional[GameConfig] = None) -> BoardState:
        """Start a new game, discarding any previous board and history.

        Args:
            config: Board size, start, exit and initial enemy count
                (clamped; defaults from kings_escape.parameters)

        Returns:
            BoardState at turn 0, IN_PROGRESS
        """
        if config is None:
            config = GameConfig()

        enemies = spawn_initial_enemies(
            config.initial_enemy_count,
            config.board_size,
            config.start,
            config.exit,
            self._random,
        )
        state = BoardState(
            size=config.board_size,
            start=config.start,
            exit=config.exit,
            turn=0,
            king=config.start,
            enemies=enemies,
            allies=[],
            status=NEW_GAME_STATUS,
            result=GameResult.ONGOING,
            initial_enemy_count=config.initial_enemy_count,
            started=True,
        )

        self.history.reset()
        self._record(state.snapshot())
        logger.info(
            f"New game: {state.size}x{state.size} board, king at {state.start}, "
            f"exit at {state.exit}, {len(enemies)} enemies"
        )
        return state

    def move(self, state: BoardState, destination: Position) -> BoardState:
        """Play one turn: move the king to destination, then the enemies.

        Args:
            state: Current board
            destination: Requested king square

        Returns:
            The updated board (status describes the outcome)
        """
        new_state, _ = self.play_turn(state, destination)
        return new_state

    def play_turn(self, state: BoardState, destination: Position) -> tuple[BoardState, TurnReport]:
        """Play one turn and report what happened.

        A rejected move returns the board with only its status changed and
        writes nothing to the history.

        Args:
            state: Current board
            destination: Requested king square

        Returns:
            Tuple of (updated board, TurnReport)
        """
        try:
            validate_move(state, destination)
        except MoveError as e:
            logger.debug(f"Rejected move to {destination} at turn {state.turn}: {e.status}")
            rejected = self._commit(state, status=e.status)
            return rejected, TurnReport(accepted=False, turn=state.turn, error=e)

        turn = state.turn + 1
        king = destination
        report = TurnReport(accepted=True, turn=turn)

        # Phase 3: ENEMY TURN
        movement = resolve_enemy_moves(state.size, king, state.enemies, state.allies, self._random)
        self._apply_movement(report, movement)
        enemies = movement.enemies
        allies = movement.allies

        if movement.captured:
            self._record(TurnSnapshot(turn=turn, king=king, allies=allies, enemies=enemies))
            logger.info(f"King captured at {king} on turn {turn}")
            return self._commit(
                state,
                turn=turn,
                king=king,
                enemies=enemies,
                allies=allies,
                result=GameResult.LOSE,
                status=f"An enemy moved onto the King at turn {turn}. You were captured. Game over.",
            ), report

        # Phase 4: SPAWN
        spawn = spawn_random_piece(state.size, enemies, allies, king, state.exit, self._random)
        if spawn is not None:
            report.spawn = spawn
            if spawn.kind == SpawnKind.ENEMY:
                enemies = [*enemies, spawn.position]
            else:
                allies = [*allies, spawn.position]

        # Phase 5: RECORD
        self._record(TurnSnapshot(turn=turn, king=king, allies=allies, enemies=enemies))

        # Phase 6: CHECK ENDINGS
        result, status = self._check_endings(state, turn, king, enemies, allies, report)
        if result == GameResult.ONGOING:
            logger.debug(f"Turn {turn}: king at {king}, {len(enemies)} enemies, {len(allies)} allies")
        return self._commit(
            state,
            turn=turn,
            king=king,
            enemies=enemies,
            allies=allies,
            result=result,
            status=status,
        ), report

    def clear_history(self) -> None:
        """Delete the recorded history. Boards and results are untouched."""
        self.history.reset()

    # =========================================================================
    # Internals
    # =========================================================================

    def _apply_movement(self, report: TurnReport, movement: MovementResult) -> None:
        report.captured = movement.captured
        report.captured_enemy_index = movement.captured_enemy_index
        report.sacrifices = list(movement.sacrifices)

    def _check_endings(
        self,
        state: BoardState,
        turn: int,
        king: Position,
        enemies: list[Position],
        allies: list[Position],
        report: TurnReport,
    ) -> tuple[GameResult, str]:
        """Evaluate the terminal rules in order, after spawning."""
        if king in enemies:
            logger.info(f"Enemy spawned on the king at {king} on turn {turn}")
            return GameResult.LOSE, f"An enemy spawned on the King at turn {turn}. You were captured. Game over."

        if king == state.exit:
            logger.info(f"King reached the exit at {king} on turn {turn}")
            return GameResult.WIN, f"Victory! The King reached the exit at turn {turn}."

        after = self._commit(state, king=king, enemies=enemies, allies=allies)
        if not has_free_neighbor(after):
            report.trapped = True
            logger.info(f"King trapped at {king} on turn {turn}")
            return GameResult.LOSE, f"No legal moves available after turn {turn}. The King is trapped. You lose."

        return GameResult.ONGOING, f"Move accepted to ({king.x},{king.y}). Turn {turn} complete."

    def _record(self, snapshot: TurnSnapshot) -> None:
        self.history.record_turn(snapshot.turn, snapshot.king, snapshot.allies, snapshot.enemies)

    @staticmethod
    def _commit(state: BoardState, **changes: Any) -> BoardState:
        """Build a validated copy of state with changes applied."""
        return BoardState.model_validate({**state.model_dump(), **changes})


def create_engine(
    history: HistoryRecorder,
    random_seed: Optional[int] = None,
) -> TurnEngine:
    """Create a turn engine writing to the given history store.

    Args:
        history: Turn history store
        random_seed: Seed for reproducibility

    Returns:
        Initialized TurnEngine
    """
    return TurnEngine(history=history, random_seed=random_seed)
