"""Random piece placement.

Two kinds of placement:
- Initial enemies for a new game, on distinct cells other than the king's
  start and the exit
- One new piece after each enemy turn that did not end in a capture: an
  empty cell is picked uniformly at random and becomes an enemy with
  probability SPAWN_ENEMY_PROBABILITY, otherwise an ally

A spawned enemy does not move until the next enemy turn.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional

from kings_escape.models.geometry import Position
from kings_escape.parameters import SPAWN_ENEMY_PROBABILITY

logger = logging.getLogger(__name__)


class SpawnKind(Enum):
    """What a spawned piece becomes."""

    ENEMY = "enemy"
    ALLY = "ally"


@dataclass(frozen=True)
class Spawn:
    """A piece to be added to the board."""

    kind: SpawnKind
    position: Position


def empty_cells(size: int, occupied: Iterable[Position]) -> list[Position]:
    """All cells of the board not in occupied, in row-major (x, then y) order."""
    taken = set(occupied)
    return [
        Position(x=x, y=y)
        for x in range(size)
        for y in range(size)
        if Position(x=x, y=y) not in taken
    ]


def spawn_initial_enemies(
    count: int,
    size: int,
    king: Position,
    exit: Position,
    rng: random.Random,
) -> list[Position]:
    """Place up to count enemies on distinct cells, avoiding king and exit.

    Cells are sampled without replacement from the free cells, so the
    result has exactly min(count, free cells) enemies.

    Args:
        count: Requested number of enemies
        size: Board size N
        king: King start square
        exit: Exit square
        rng: Random source

    Returns:
        Enemy squares in placement order
    """
    free = empty_cells(size, [king, exit])
    placed = min(max(0, count), len(free))
    if placed < count:
        logger.warning(f"Only {placed} of {count} initial enemies fit on a {size}x{size} board")
    return rng.sample(free, placed)


def roll_spawn_kind(rng: random.Random, enemy_probability: float = SPAWN_ENEMY_PROBABILITY) -> SpawnKind:
    """Weighted coin: ENEMY with enemy_probability, otherwise ALLY."""
    return SpawnKind.ENEMY if rng.random() < enemy_probability else SpawnKind.ALLY


def spawn_random_piece(
    size: int,
    enemies: list[Position],
    allies: list[Position],
    king: Position,
    exit: Position,
    rng: random.Random,
) -> Optional[Spawn]:
    """Pick one empty cell and a piece kind for it.

    The king's square and the exit are never used.

    Returns:
        Spawn, or None if the board has no empty cell
    """
    free = empty_cells(size, [*enemies, *allies, king, exit])
    if not free:
        logger.debug("No empty cell; nothing spawned")
        return None
    position = rng.choice(free)
    kind = roll_spawn_kind(rng)
    logger.debug(f"Spawned {kind.value} at {position}")
    return Spawn(kind=kind, position=position)
