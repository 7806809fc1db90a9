"""Tests for the King's Escape command-line interface.

Each test points the storage environment variables at a temporary directory
and drives main() with argument lists.
"""

import pytest

from kings_escape.cli.app import format_board, format_history, main
from kings_escape.models.board import GameResult, PieceRecord, PieceType
from kings_escape.models.geometry import Position
from kings_escape.storage import get_state_repository

from conftest import make_state


@pytest.fixture(params=["file", "sqlite"])
def storage_env(request, tmp_path, monkeypatch):
    """Point both backends at tmp_path and select one."""
    monkeypatch.setenv("KINGS_ESCAPE_STORAGE_BACKEND", request.param)
    monkeypatch.setenv("KINGS_ESCAPE_DATABASE_URI", str(tmp_path / "game.db"))
    monkeypatch.setenv("KINGS_ESCAPE_STATE_PATH", str(tmp_path / "state.json"))
    monkeypatch.setenv("KINGS_ESCAPE_HISTORY_PATH", str(tmp_path / "history.json"))
    return request.param


NEW_3X3 = ["new", "--size", "3", "--start", "0", "0", "--exit", "2", "2", "--enemies", "0"]


class TestFormatting:
    """Tests for text rendering."""

    def test_format_board(self):
        state = make_state(size=3, king=(0, 0), exit=(2, 2), enemies=[(2, 0)], allies=[(0, 1)])
        assert format_board(state) == "\n".join([
            " 2 . . X",
            " 1 A * .",
            " 0 K * E",
            "   0 1 2",
        ])

    def test_format_board_hides_moves_when_over(self):
        state = make_state(size=2, king=(0, 0), exit=(1, 1))
        state = state.model_copy(update={"result": GameResult.WIN})
        assert "*" not in format_board(state)

    def test_format_history(self):
        rows = [
            PieceRecord(piece_type=PieceType.KING, x=1, y=1, is_enemy=False),
            PieceRecord(piece_type=PieceType.PAWN, x=2, y=0, is_enemy=True),
        ]
        text = format_history(3, rows)
        assert text.splitlines()[0] == "Turn 3:"
        assert "King     1   1  no" in text
        assert "Pawn     2   0  yes" in text

    def test_format_history_empty(self):
        assert format_history(4, []) == "No entries for turn 4."


class TestCommands:
    """Tests for the CLI commands against real storage."""

    def test_new_game(self, storage_env, capsys):
        assert main(["--seed", "1", *NEW_3X3]) == 0
        out = capsys.readouterr().out
        assert "Game started. King at start." in out
        assert get_state_repository().load_state().turn == 0

    def test_move_accepted(self, storage_env, capsys):
        main(NEW_3X3)
        assert main(["--seed", "2", "move", "1", "1"]) == 0
        state = get_state_repository().load_state()
        assert state.turn == 1
        assert state.king == Position(x=1, y=1)
        assert "Move accepted to (1,1)" in capsys.readouterr().out

    def test_move_rejected(self, storage_env, capsys):
        main(NEW_3X3)
        assert main(["move", "5", "5"]) == 1
        assert "Invalid move: out of bounds." in capsys.readouterr().out
        assert get_state_repository().load_state().turn == 0

    def test_move_without_game(self, storage_env, capsys):
        assert main(["move", "1", "1"]) == 1
        assert "No game in progress" in capsys.readouterr().out

    def test_show(self, storage_env, capsys):
        main(NEW_3X3)
        capsys.readouterr()
        assert main(["show"]) == 0
        out = capsys.readouterr().out
        assert "Move number 0" in out
        assert " 0 K * ." in out

    def test_history_and_clear(self, storage_env, capsys):
        main(NEW_3X3)
        capsys.readouterr()

        assert main(["history", "--turn", "0"]) == 0
        assert "King" in capsys.readouterr().out

        assert main(["clear"]) == 0
        assert "History cleared." in capsys.readouterr().out

        main(["history"])
        assert "History is empty." in capsys.readouterr().out
        # Clearing the history leaves the board alone.
        assert get_state_repository().load_state().started

    def test_new_game_clamps_and_notes(self, storage_env, capsys):
        assert main(["new", "--size", "40", "--enemies", "0"]) == 0
        assert "Note: board_size 40 clamped to 12" in capsys.readouterr().out
        assert get_state_repository().load_state().size == 12

    def test_strict_rejects_out_of_range(self, storage_env, capsys):
        assert main(["new", "--size", "40", "--strict"]) == 2
        assert "Configuration out of range" in capsys.readouterr().err
        assert get_state_repository().load_state().phase.value == "ready"

    def test_backend_flag_overrides_env(self, storage_env, tmp_path, capsys):
        assert main(["--backend", "file", *NEW_3X3]) == 0
        assert (tmp_path / "state.json").exists()
