"""Storage module for King's Escape.

This module provides repository interfaces and implementations for
persisting the turn history and the current board.

Usage:
    from kings_escape.storage import get_history_recorder, get_state_repository

    # Get repositories using configured backend (from environment)
    history = get_history_recorder()
    boards = get_state_repository()

    # Or specify backend explicitly
    from kings_escape.storage import StorageBackend
    history = get_history_recorder(StorageBackend.FILE)

Configuration via environment variables:
    KINGS_ESCAPE_STORAGE_BACKEND: "file" or "sqlite" (default: "sqlite")
    KINGS_ESCAPE_DATABASE_URI: SQLite database path (default: "instance/kings_escape.db")
    KINGS_ESCAPE_STATE_PATH: Board JSON path (default: "instance/game_state.json")
    KINGS_ESCAPE_HISTORY_PATH: History JSON path (default: "instance/history.json")
"""

from .config import (
    StorageBackend,
    get_database_uri,
    get_history_path,
    get_history_recorder,
    get_state_path,
    get_state_repository,
    get_storage_backend,
)
from .file_repo import FileGameStateRepository, FileHistoryRecorder
from .repository import GameStateRepository, HistoryRecorder
from .sqlite_repo import SQLiteGameStateRepository, SQLiteHistoryRecorder

__all__ = [
    # Abstract interfaces
    "HistoryRecorder",
    "GameStateRepository",
    # File implementations
    "FileHistoryRecorder",
    "FileGameStateRepository",
    # SQLite implementations
    "SQLiteHistoryRecorder",
    "SQLiteGameStateRepository",
    # Configuration
    "StorageBackend",
    "get_storage_backend",
    "get_database_uri",
    "get_state_path",
    "get_history_path",
    # Factory functions
    "get_history_recorder",
    "get_state_repository",
]
