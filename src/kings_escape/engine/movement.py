"""Enemy movement resolution.

After the king moves, every enemy takes at most one step, in list order.
Earlier enemies have priority: a cell claimed by an enemy this turn is
unavailable to the enemies processed after it.

Per enemy, the 8 neighbor cells are shuffled (uniformly, via the injected
random source) and tried in turn:

1. Cell already claimed this turn -> try the next cell
2. Cell holds an ally -> the ally is sacrificed, the enemy stays put and
   stops trying
3. Cell is the king's square -> the enemy moves there and captures the king
4. Cell is another enemy's pre-turn square -> try the next cell
5. Otherwise -> the enemy moves there

An enemy with no accepted cell stays where it is.

Usage:
    result = resolve_enemy_moves(state.size, state.king, state.enemies, state.allies, rng)
    if result.captured:
        ...
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from typing import Optional

from kings_escape.models.geometry import Position, neighbors8

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Sacrifice:
    """An ally removed by an enemy's attempted step.

    Attributes:
        enemy_index: Index of the enemy (processing order) that was blocked
        ally_index: Index of the ally in the pre-turn ally list
        position: Square the ally occupied
    """

    enemy_index: int
    ally_index: int
    position: Position


@dataclass
class MovementResult:
    """Outcome of one enemy turn.

    Attributes:
        enemies: Post-turn enemy squares, in processing order
        allies: Surviving allies, in their original relative order
        captured: Whether an enemy stepped onto the king
        captured_enemy_index: Index of the capturing enemy (None if no capture)
        sacrifices: Allies removed this turn
        duplicates_removed: Enemy entries dropped by deduplication
    """

    enemies: list[Position]
    allies: list[Position]
    captured: bool = False
    captured_enemy_index: Optional[int] = None
    sacrifices: list[Sacrifice] = field(default_factory=list)
    duplicates_removed: int = 0


def shuffled_candidates(origin: Position, size: int, rng: random.Random) -> list[Position]:
    """Neighbor cells of origin in uniformly random order (Fisher-Yates)."""
    candidates = neighbors8(origin.x, origin.y, size)
    rng.shuffle(candidates)
    return candidates


def dedupe_positions(positions: list[Position]) -> tuple[list[Position], int]:
    """Drop repeated positions, keeping the first occurrence.

    Returns:
        Tuple of (unique positions in order, number removed)
    """
    seen: set[Position] = set()
    unique: list[Position] = []
    for pos in positions:
        if pos in seen:
            continue
        seen.add(pos)
        unique.append(pos)
    return unique, len(positions) - len(unique)


def resolve_enemy_moves(
    size: int,
    king: Position,
    enemies: list[Position],
    allies: list[Position],
    rng: random.Random,
) -> MovementResult:
    """Advance every enemy by at most one step.

    Inputs are not modified; the result holds fresh lists.

    Args:
        size: Board size N
        king: King square after the king's move
        enemies: Pre-turn enemy squares, in processing order
        allies: Pre-turn ally squares
        rng: Random source used to order each enemy's candidate cells

    Returns:
        MovementResult with the new enemy and ally lists
    """
    ally_index = {pos: i for i, pos in enumerate(allies)}
    # Neighbor cells never equal their origin, so membership here means another enemy.
    pre_turn = set(enemies)
    sacrificed: set[int] = set()
    claimed: set[Position] = set()
    moved: list[Position] = []
    result = MovementResult(enemies=[], allies=[])

    for i, origin in enumerate(enemies):
        destination = origin

        for cell in shuffled_candidates(origin, size, rng):
            if cell in claimed:
                continue

            if cell in ally_index:
                index = ally_index.pop(cell)
                sacrificed.add(index)
                result.sacrifices.append(Sacrifice(enemy_index=i, ally_index=index, position=cell))
                logger.debug(f"Enemy {i} at {origin} blocked; ally at {cell} sacrificed")
                break

            if cell == king:
                destination = cell
                result.captured = True
                result.captured_enemy_index = i
                logger.debug(f"Enemy {i} at {origin} captures the king at {cell}")
                break

            if cell in pre_turn:
                continue

            destination = cell
            break

        claimed.add(destination)
        moved.append(destination)

    result.allies = [pos for i, pos in enumerate(allies) if i not in sacrificed]
    result.enemies, result.duplicates_removed = dedupe_positions(moved)
    if result.duplicates_removed:
        logger.warning(f"Removed {result.duplicates_removed} duplicate enemy positions")
    return result
