"""Game engine module for King's Escape.

This module contains the core game logic including:
- validation: King move legality
- movement: Enemy movement resolution (priority, blocking, sacrifice, capture)
- spawning: Initial enemy placement and per-turn random spawns
- game_engine: Turn sequence and win/lose state machine

Usage:
    from kings_escape.engine import TurnEngine
    from kings_escape.models import GameConfig, Position
    from kings_escape.storage import get_history_recorder

    engine = TurnEngine(get_history_recorder(), random_seed=42)
    state = engine.new_game(GameConfig(board_size=8, initial_enemy_count=3))

    state = engine.move(state, Position(x=2, y=2))
    print(state.status)

    if state.is_over:
        print(f"Game over: {state.result.value}")
"""

from kings_escape.engine.game_engine import (
    NEW_GAME_STATUS,
    TurnEngine,
    TurnReport,
    create_engine,
)
from kings_escape.engine.movement import (
    MovementResult,
    Sacrifice,
    dedupe_positions,
    resolve_enemy_moves,
    shuffled_candidates,
)
from kings_escape.engine.spawning import (
    Spawn,
    SpawnKind,
    empty_cells,
    roll_spawn_kind,
    spawn_initial_enemies,
    spawn_random_piece,
)
from kings_escape.engine.validation import (
    has_free_neighbor,
    is_legal_move,
    legal_moves,
    validate_move,
)

__all__ = [
    # Turn engine
    "TurnEngine",
    "TurnReport",
    "create_engine",
    "NEW_GAME_STATUS",
    # Validation
    "validate_move",
    "is_legal_move",
    "legal_moves",
    "has_free_neighbor",
    # Movement
    "MovementResult",
    "Sacrifice",
    "resolve_enemy_moves",
    "shuffled_candidates",
    "dedupe_positions",
    # Spawning
    "Spawn",
    "SpawnKind",
    "empty_cells",
    "roll_spawn_kind",
    "spawn_initial_enemies",
    "spawn_random_piece",
]
