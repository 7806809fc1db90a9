"""Shared pytest fixtures and helpers for all tests."""

import random

import pytest

from kings_escape.models.board import BoardState
from kings_escape.models.geometry import Position
from kings_escape.storage.sqlite_repo import SQLiteHistoryRecorder


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )


def pos(x: int, y: int) -> Position:
    """Shorthand for Position(x=x, y=y)."""
    return Position(x=x, y=y)


class PreferenceRandom(random.Random):
    """Random source whose shuffle puts preferred cells first.

    Cells not in ``preferred`` keep their relative order after the preferred
    ones. Everything else (choice, random, sample) is an ordinary seeded
    random.Random.
    """

    preferred: list = []

    def shuffle(self, x):
        rank = {p: i for i, p in enumerate(self.preferred)}
        x.sort(key=lambda p: rank.get(p, len(rank)))


def preference_random(preferred, seed: int = 0) -> PreferenceRandom:
    """Build a PreferenceRandom with the given cell preference order."""
    rng = PreferenceRandom(seed)
    rng.preferred = list(preferred)
    return rng


def make_state(
    size: int = 3,
    king=(0, 0),
    exit=(2, 2),
    enemies=(),
    allies=(),
    turn: int = 0,
) -> BoardState:
    """Build an in-progress board from coordinate tuples."""
    return BoardState(
        size=size,
        start=pos(*king),
        exit=pos(*exit),
        turn=turn,
        king=pos(*king),
        enemies=[pos(*e) for e in enemies],
        allies=[pos(*a) for a in allies],
        status="test",
        initial_enemy_count=len(enemies),
        started=True,
    )


@pytest.fixture
def history(tmp_path):
    """SQLite history store in a temporary directory."""
    return SQLiteHistoryRecorder(str(tmp_path / "history.db"))
