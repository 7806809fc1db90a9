"""Storage configuration for King's Escape.

This module provides configuration for storage backends and factory functions
to create appropriate repository instances based on configuration.
"""

import os
from enum import Enum

from .file_repo import FileGameStateRepository, FileHistoryRecorder
from .repository import GameStateRepository, HistoryRecorder
from .sqlite_repo import SQLiteGameStateRepository, SQLiteHistoryRecorder


class StorageBackend(Enum):
    """Available storage backends."""

    FILE = "file"
    SQLITE = "sqlite"


# Default configuration (can be overridden via environment variables)
DEFAULT_STORAGE_BACKEND = StorageBackend.SQLITE
DEFAULT_DATABASE_URI = "instance/kings_escape.db"
DEFAULT_STATE_PATH = "instance/game_state.json"
DEFAULT_HISTORY_PATH = "instance/history.json"


def get_storage_backend() -> StorageBackend:
    """Get configured storage backend from environment.

    Returns:
        StorageBackend enum value
    """
    backend_str = os.environ.get("KINGS_ESCAPE_STORAGE_BACKEND", DEFAULT_STORAGE_BACKEND.value).lower()
    if backend_str == "file":
        return StorageBackend.FILE
    return StorageBackend.SQLITE


def get_database_uri() -> str:
    """Get configured database URI from environment."""
    return os.environ.get("KINGS_ESCAPE_DATABASE_URI", DEFAULT_DATABASE_URI)


def get_state_path() -> str:
    """Get configured board file path from environment."""
    return os.environ.get("KINGS_ESCAPE_STATE_PATH", DEFAULT_STATE_PATH)


def get_history_path() -> str:
    """Get configured history file path from environment."""
    return os.environ.get("KINGS_ESCAPE_HISTORY_PATH", DEFAULT_HISTORY_PATH)


def get_history_recorder(
    backend: StorageBackend | None = None,
) -> HistoryRecorder:
    """Factory function to create the turn history store.

    Args:
        backend: Storage backend to use. If None, uses environment config.

    Returns:
        HistoryRecorder instance
    """
    if backend is None:
        backend = get_storage_backend()

    if backend == StorageBackend.FILE:
        return FileHistoryRecorder(get_history_path())
    return SQLiteHistoryRecorder(get_database_uri())


def get_state_repository(
    backend: StorageBackend | None = None,
) -> GameStateRepository:
    """Factory function to create the current-board store.

    Args:
        backend: Storage backend to use. If None, uses environment config.

    Returns:
        GameStateRepository instance
    """
    if backend is None:
        backend = get_storage_backend()

    if backend == StorageBackend.FILE:
        return FileGameStateRepository(get_state_path())
    return SQLiteGameStateRepository(get_database_uri())
