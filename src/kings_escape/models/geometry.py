"""Grid geometry for King's Escape.

Positions are immutable integer pairs on an N x N board. Both the king and
the enemies move to any of the up to 8 cells at Chebyshev distance 1.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

# Neighbor offsets, enumerated column by column. The order is stable so a
# resolution step is reproducible for a given random source.
NEIGHBOR_OFFSETS: tuple[tuple[int, int], ...] = tuple(
    (dx, dy)
    for dx in (-1, 0, 1)
    for dy in (-1, 0, 1)
    if (dx, dy) != (0, 0)
)


class Position(BaseModel):
    """A cell on the board.

    Attributes:
        x: Column index (0-based)
        y: Row index (0-based)
    """

    model_config = ConfigDict(frozen=True)

    x: int
    y: int

    @classmethod
    def of(cls, x: int, y: int) -> Position:
        """Build a position from a bare coordinate pair."""
        return cls(x=x, y=y)

    def __str__(self) -> str:
        return f"({self.x},{self.y})"


def in_bounds(x: int, y: int, size: int) -> bool:
    """Return True iff (x, y) lies on a size x size board."""
    return 0 <= x < size and 0 <= y < size


def neighbors8(x: int, y: int, size: int) -> list[Position]:
    """Return the in-bounds cells at Chebyshev distance 1 from (x, y).

    Args:
        x: Column of the centre cell
        y: Row of the centre cell
        size: Board size N

    Returns:
        Up to 8 positions, in NEIGHBOR_OFFSETS order
    """
    return [
        Position(x=x + dx, y=y + dy)
        for dx, dy in NEIGHBOR_OFFSETS
        if in_bounds(x + dx, y + dy, size)
    ]


def chebyshev_distance(a: Position, b: Position) -> int:
    """King-move distance between two cells."""
    return max(abs(a.x - b.x), abs(a.y - b.y))


def clamp_coordinate(value: int, size: int) -> int:
    """Clamp a single coordinate into [0, size)."""
    return max(0, min(size - 1, value))
