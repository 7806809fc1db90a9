"""File-based repository implementations using JSON files.

The history is a single JSON document holding every recorded row in
insertion order. The current board is a JSON document of its own.
"""

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from kings_escape.models.board import BoardState, PieceRecord, TurnSnapshot
from kings_escape.models.geometry import Position

from .repository import GameStateRepository, HistoryRecorder

logger = logging.getLogger(__name__)


def _write_json(path: Path, data) -> None:
    """Write data as JSON, replacing path only once the write has completed."""
    tmp_path = path.with_name(path.name + ".tmp")
    with open(tmp_path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)
    tmp_path.replace(path)


class FileHistoryRecorder(HistoryRecorder):
    """JSON file-based turn history.

    Rows are stored as {"turn", "piece_type", "x", "y", "is_enemy"} objects.
    """

    def __init__(self, history_path: str | Path = "instance/history.json"):
        """Initialize repository.

        Args:
            history_path: Path to the history JSON file
        """
        self.history_path = Path(history_path)
        self.history_path.parent.mkdir(parents=True, exist_ok=True)

    def _load_rows(self) -> list[dict]:
        if not self.history_path.exists():
            return []
        with open(self.history_path, encoding="utf-8") as f:
            return json.load(f)

    def _write_rows(self, rows: list[dict]) -> None:
        _write_json(self.history_path, rows)

    def reset(self) -> None:
        """Delete every recorded snapshot."""
        self._write_rows([])
        logger.info(f"Cleared turn history in {self.history_path}")

    def record_turn(
        self,
        turn: int,
        king: Position,
        allies: list[Position],
        enemies: list[Position],
    ) -> None:
        """Append one row per piece for a turn."""
        snapshot = TurnSnapshot(turn=turn, king=king, allies=allies, enemies=enemies)
        rows = self._load_rows()
        rows.extend(
            {"turn": turn, **record.model_dump(mode="json")}
            for record in snapshot.records()
        )
        self._write_rows(rows)

    def fetch_turn(self, turn: int) -> list[PieceRecord]:
        """Return the rows recorded for a turn, in insertion order."""
        return [
            PieceRecord.model_validate({k: v for k, v in row.items() if k != "turn"})
            for row in self._load_rows()
            if row["turn"] == turn
        ]

    def list_turns(self) -> list[int]:
        """Return the distinct recorded turn numbers in ascending order."""
        return sorted({row["turn"] for row in self._load_rows()})


class FileGameStateRepository(GameStateRepository):
    """JSON file-based storage for the current board."""

    def __init__(self, state_path: str | Path = "instance/game_state.json"):
        """Initialize repository.

        Args:
            state_path: Path to the board JSON file
        """
        self.state_path = Path(state_path)
        self.state_path.parent.mkdir(parents=True, exist_ok=True)

    def load_state(self) -> Optional[BoardState]:
        """Load the saved board."""
        if not self.state_path.exists():
            return None
        with open(self.state_path, encoding="utf-8") as f:
            data = json.load(f)
        data.pop("updated_at", None)
        return BoardState.model_validate(data)

    def save_state(self, state: BoardState) -> None:
        """Persist the board, replacing any previous one."""
        state_with_meta = {
            **state.model_dump(mode="json"),
            "updated_at": datetime.now(timezone.utc).isoformat(),
        }
        _write_json(self.state_path, state_with_meta)

    def clear_state(self) -> bool:
        """Forget the saved board."""
        if self.state_path.exists():
            self.state_path.unlink()
            return True
        return False
