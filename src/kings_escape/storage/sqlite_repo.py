"""SQLite-based repository implementations.

The history table keeps one row per piece per turn, in the column layout
the game has always used (move number, piece type, x, y, is_enemy). The
current board is stored as JSON in a single-row-per-session table.
"""

import logging
import sqlite3
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from kings_escape.models.board import BoardState, PieceRecord, PieceType, TurnSnapshot
from kings_escape.models.geometry import Position

from .repository import GameStateRepository, HistoryRecorder

logger = logging.getLogger(__name__)


def dict_factory(cursor: sqlite3.Cursor, row: tuple) -> dict:
    """Convert sqlite3 row to dict."""
    return {col[0]: row[idx] for idx, col in enumerate(cursor.description)}


class _SQLiteRepository:
    """Connection handling shared by the SQLite repositories."""

    def __init__(self, database_uri: str = "instance/kings_escape.db"):
        """Initialize repository.

        Args:
            database_uri: Path to SQLite database file
        """
        self.database_path = Path(database_uri)
        self.database_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_db()

    def _get_connection(self) -> sqlite3.Connection:
        """Get database connection."""
        conn = sqlite3.connect(self.database_path)
        conn.row_factory = dict_factory
        return conn

    def _init_db(self) -> None:
        raise NotImplementedError


class SQLiteHistoryRecorder(_SQLiteRepository, HistoryRecorder):
    """SQLite-based turn history."""

    def _init_db(self) -> None:
        """Initialize database schema."""
        conn = self._get_connection()
        cursor = conn.cursor()
        cursor.execute("""
            CREATE TABLE IF NOT EXISTS chessboard_positions (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                move_number INTEGER NOT NULL,
                piece_type VARCHAR(10) NOT NULL,
                position_x INTEGER NOT NULL,
                position_y INTEGER NOT NULL,
                is_enemy BOOLEAN NOT NULL
            )
        """)
        cursor.execute(
            "CREATE INDEX IF NOT EXISTS idx_positions_move ON chessboard_positions(move_number)"
        )
        conn.commit()
        conn.close()

    def reset(self) -> None:
        """Delete every recorded snapshot."""
        conn = self._get_connection()
        conn.execute("DELETE FROM chessboard_positions")
        conn.commit()
        conn.close()
        logger.info(f"Cleared turn history in {self.database_path}")

    def record_turn(
        self,
        turn: int,
        king: Position,
        allies: list[Position],
        enemies: list[Position],
    ) -> None:
        """Append one row per piece for a turn."""
        snapshot = TurnSnapshot(turn=turn, king=king, allies=allies, enemies=enemies)
        rows = [
            (turn, r.piece_type.value, r.x, r.y, 1 if r.is_enemy else 0)
            for r in snapshot.records()
        ]
        conn = self._get_connection()
        conn.executemany("""
            INSERT INTO chessboard_positions (move_number, piece_type, position_x, position_y, is_enemy)
            VALUES (?, ?, ?, ?, ?)
        """, rows)
        conn.commit()
        conn.close()

    def fetch_turn(self, turn: int) -> list[PieceRecord]:
        """Return the rows recorded for a turn, in insertion order."""
        conn = self._get_connection()
        cursor = conn.cursor()
        cursor.execute("""
            SELECT piece_type, position_x, position_y, is_enemy
            FROM chessboard_positions
            WHERE move_number = ?
            ORDER BY id ASC
        """, (turn,))
        rows = cursor.fetchall()
        conn.close()
        return [
            PieceRecord(
                piece_type=PieceType(row["piece_type"]),
                x=row["position_x"],
                y=row["position_y"],
                is_enemy=bool(row["is_enemy"]),
            )
            for row in rows
        ]

    def list_turns(self) -> list[int]:
        """Return the distinct recorded turn numbers in ascending order."""
        conn = self._get_connection()
        cursor = conn.cursor()
        cursor.execute(
            "SELECT DISTINCT move_number FROM chessboard_positions ORDER BY move_number"
        )
        rows = cursor.fetchall()
        conn.close()
        return [row["move_number"] for row in rows]


class SQLiteGameStateRepository(_SQLiteRepository, GameStateRepository):
    """SQLite-based storage for the current board.

    Each session id holds one board, serialized as JSON.
    """

    def __init__(self, database_uri: str = "instance/kings_escape.db", session_id: str = "default"):
        """Initialize repository.

        Args:
            database_uri: Path to SQLite database file
            session_id: Key of the board within the table
        """
        self.session_id = session_id
        super().__init__(database_uri)

    def _init_db(self) -> None:
        """Initialize database schema."""
        conn = self._get_connection()
        conn.execute("""
            CREATE TABLE IF NOT EXISTS game_sessions (
                id TEXT PRIMARY KEY,
                data TEXT NOT NULL,
                updated_at TEXT
            )
        """)
        conn.commit()
        conn.close()

    def load_state(self) -> Optional[BoardState]:
        """Load the saved board."""
        conn = self._get_connection()
        cursor = conn.cursor()
        cursor.execute("SELECT data FROM game_sessions WHERE id = ?", (self.session_id,))
        row = cursor.fetchone()
        conn.close()

        if row is None:
            return None
        return BoardState.model_validate_json(row["data"])

    def save_state(self, state: BoardState) -> None:
        """Persist the board, replacing any previous one."""
        now = datetime.now(timezone.utc).isoformat()
        conn = self._get_connection()
        conn.execute("""
            INSERT INTO game_sessions (id, data, updated_at)
            VALUES (?, ?, ?)
            ON CONFLICT(id) DO UPDATE SET
                data = excluded.data,
                updated_at = excluded.updated_at
        """, (self.session_id, state.model_dump_json(), now))
        conn.commit()
        conn.close()

    def clear_state(self) -> bool:
        """Forget the saved board."""
        conn = self._get_connection()
        cursor = conn.cursor()
        cursor.execute("DELETE FROM game_sessions WHERE id = ?", (self.session_id,))
        deleted = cursor.rowcount > 0
        conn.commit()
        conn.close()
        return deleted
