"""King's Escape command-line interface.

Each invocation performs one action against the saved board and exits, so a
game is played one command per turn.

Usage:
    kings-escape new --size 8 --start 1 1 --exit 6 6 --enemies 3
    kings-escape move 2 2
    kings-escape show
    kings-escape history --turn 1
    kings-escape clear

Storage follows the KINGS_ESCAPE_* environment variables (see
kings_escape.storage); --backend overrides the backend.
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Optional

from kings_escape.engine.game_engine import TurnEngine
from kings_escape.engine.validation import legal_moves
from kings_escape.errors import ConfigRangeError
from kings_escape.models.board import BoardState, GameConfig, PieceRecord, PieceType
from kings_escape.models.geometry import Position
from kings_escape.storage import (
    StorageBackend,
    get_history_recorder,
    get_state_repository,
)

logger = logging.getLogger(__name__)

PIECE_SYMBOLS = {
    PieceType.KING: "K",
    PieceType.PAWN: "E",
    PieceType.ALLY: "A",
}
EXIT_SYMBOL = "X"
LEGAL_SYMBOL = "*"
EMPTY_SYMBOL = "."


# =============================================================================
# Formatting
# =============================================================================


def format_board(state: BoardState) -> str:
    """Render the board as text, highest row first.

    K king, E enemy, A ally, X exit, * legal king move, . empty.
    """
    cells = state.occupancy()
    legal = set(legal_moves(state))
    lines = []
    for y in reversed(range(state.size)):
        row = []
        for x in range(state.size):
            pos = Position(x=x, y=y)
            if pos in cells:
                row.append(PIECE_SYMBOLS[cells[pos]])
            elif pos == state.exit:
                row.append(EXIT_SYMBOL)
            elif pos in legal:
                row.append(LEGAL_SYMBOL)
            else:
                row.append(EMPTY_SYMBOL)
        lines.append(f"{y:>2} " + " ".join(row))
    lines.append("   " + " ".join(str(x % 10) for x in range(state.size)))
    return "\n".join(lines)


def format_summary(state: BoardState) -> str:
    """One header line plus the status line."""
    header = (
        f"Move number {state.turn} | King position: {state.king} | "
        f"Exit: {state.exit} | Result: {state.result.value}"
    )
    return f"{header}\nStatus: {state.status}"


def format_history(turn: int, rows: list[PieceRecord]) -> str:
    """Tabulate the history rows of one turn."""
    if not rows:
        return f"No entries for turn {turn}."
    lines = [f"Turn {turn}:", f"{'Type':<6} {'X':>3} {'Y':>3}  is enemy"]
    for row in rows:
        lines.append(
            f"{row.piece_type.value:<6} {row.x:>3} {row.y:>3}  {'yes' if row.is_enemy else 'no'}"
        )
    return "\n".join(lines)


# =============================================================================
# Commands
# =============================================================================


def cmd_new(args: argparse.Namespace, engine: TurnEngine, state: BoardState) -> tuple[int, BoardState]:
    config = GameConfig(
        board_size=args.size,
        start=args.start,
        exit=args.exit,
        initial_enemy_count=args.enemies,
    )
    if args.strict:
        try:
            config.ensure_unadjusted()
        except ConfigRangeError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 2, state
    for note in config.adjustments:
        print(f"Note: {note}")

    state = engine.new_game(config)
    print(format_summary(state))
    print(format_board(state))
    return 0, state


def cmd_move(args: argparse.Namespace, engine: TurnEngine, state: BoardState) -> tuple[int, BoardState]:
    state, report = engine.play_turn(state, Position(x=args.x, y=args.y))
    print(format_summary(state))
    print(format_board(state))
    return (0 if report.accepted else 1), state


def cmd_show(args: argparse.Namespace, engine: TurnEngine, state: BoardState) -> tuple[int, BoardState]:
    print(format_summary(state))
    print(format_board(state))
    return 0, state


def cmd_history(args: argparse.Namespace, engine: TurnEngine, state: BoardState) -> tuple[int, BoardState]:
    turns = [args.turn] if args.turn is not None else engine.history.list_turns()
    if not turns:
        print("History is empty.")
    for turn in turns:
        print(format_history(turn, engine.history.fetch_turn(turn)))
    return 0, state


def cmd_clear(args: argparse.Namespace, engine: TurnEngine, state: BoardState) -> tuple[int, BoardState]:
    engine.clear_history()
    print("History cleared.")
    return 0, state


COMMANDS = {
    "new": cmd_new,
    "move": cmd_move,
    "show": cmd_show,
    "history": cmd_history,
    "clear": cmd_clear,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="kings-escape",
        description="Guide the King to the exit before the enemies close in.",
    )
    parser.add_argument(
        "--backend",
        choices=[b.value for b in StorageBackend],
        default=None,
        help="Storage backend (default: KINGS_ESCAPE_STORAGE_BACKEND or sqlite)",
    )
    parser.add_argument("--seed", type=int, default=None, help="Random seed for this command")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", required=True)

    new = subparsers.add_parser("new", help="Start a new game")
    new.add_argument("--size", default=None, help="Board size N (2-12)")
    new.add_argument("--start", nargs=2, metavar=("X", "Y"), default=None, help="King start square")
    new.add_argument("--exit", nargs=2, metavar=("X", "Y"), default=None, help="Exit square")
    new.add_argument("--enemies", default=None, help="Initial enemy count")
    new.add_argument(
        "--strict",
        action="store_true",
        help="Refuse out-of-range values instead of clamping them",
    )

    move = subparsers.add_parser("move", help="Move the King one square")
    move.add_argument("x", type=int)
    move.add_argument("y", type=int)

    subparsers.add_parser("show", help="Show the board")

    history = subparsers.add_parser("history", help="Show recorded piece positions")
    history.add_argument("--turn", type=int, default=None, help="Only this turn")

    subparsers.add_parser("clear", help="Clear the recorded history")
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    """Entry point for the CLI application."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    backend = StorageBackend(args.backend) if args.backend else None
    states = get_state_repository(backend)
    engine = TurnEngine(get_history_recorder(backend), random_seed=args.seed)

    state = states.load_state() or BoardState()
    logger.debug(f"Running '{args.command}' at turn {state.turn} ({state.phase.value})")
    code, state = COMMANDS[args.command](args, engine, state)
    states.save_state(state)
    return code


if __name__ == "__main__":
    sys.exit(main())
