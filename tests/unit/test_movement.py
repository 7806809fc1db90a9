"""Unit tests for kings_escape.engine.movement.

Tests cover:
- Single enemy steps: move, stay when blocked, capture
- Priority: cells claimed by earlier enemies, pre-turn enemy squares
- Ally sacrifice: ally removed, enemy stays, no further candidates
- Deduplication is a no-op for well-formed boards
"""

import random

import pytest

from kings_escape.engine.movement import (
    dedupe_positions,
    resolve_enemy_moves,
    shuffled_candidates,
)
from kings_escape.models.geometry import chebyshev_distance, neighbors8

from conftest import pos, preference_random


class TestShuffledCandidates:
    """Tests for candidate ordering."""

    def test_is_a_permutation_of_neighbors(self):
        rng = random.Random(3)
        cells = shuffled_candidates(pos(2, 2), 5, rng)
        assert sorted(cells, key=lambda p: (p.x, p.y)) == sorted(
            neighbors8(2, 2, 5), key=lambda p: (p.x, p.y)
        )

    def test_same_seed_same_order(self):
        a = shuffled_candidates(pos(2, 2), 5, random.Random(11))
        b = shuffled_candidates(pos(2, 2), 5, random.Random(11))
        assert a == b

    def test_every_first_choice_occurs(self):
        """The shuffle is uniform enough that every neighbor comes first sometimes."""
        rng = random.Random(0)
        firsts = {shuffled_candidates(pos(1, 1), 3, rng)[0] for _ in range(400)}
        assert firsts == set(neighbors8(1, 1, 3))


class TestSingleEnemy:
    """Tests for one enemy on an otherwise empty board."""

    def test_moves_exactly_one_step(self):
        result = resolve_enemy_moves(5, pos(4, 4), [pos(0, 0)], [], random.Random(1))
        assert len(result.enemies) == 1
        assert chebyshev_distance(result.enemies[0], pos(0, 0)) == 1
        assert not result.captured

    def test_preferred_cell_taken(self):
        rng = preference_random([pos(1, 0)])
        result = resolve_enemy_moves(4, pos(3, 3), [pos(0, 0)], [], rng)
        assert result.enemies == [pos(1, 0)]

    def test_captures_king(self):
        rng = preference_random([pos(1, 1)])
        result = resolve_enemy_moves(3, pos(1, 1), [pos(2, 2)], [], rng)
        assert result.captured
        assert result.captured_enemy_index == 0
        assert result.enemies == [pos(1, 1)]

    def test_inputs_not_modified(self):
        enemies = [pos(0, 0)]
        allies = [pos(1, 0)]
        resolve_enemy_moves(3, pos(2, 2), enemies, allies, preference_random([pos(1, 0)]))
        assert enemies == [pos(0, 0)]
        assert allies == [pos(1, 0)]


class TestAllySacrifice:
    """An enemy stepping into an ally removes it and stays put."""

    def test_ally_removed_enemy_stays(self):
        rng = preference_random([pos(1, 0)])
        result = resolve_enemy_moves(3, pos(0, 0), [pos(2, 0)], [pos(1, 0)], rng)
        assert result.allies == []
        assert result.enemies == [pos(2, 0)]
        assert not result.captured
        assert [(s.enemy_index, s.ally_index, s.position) for s in result.sacrifices] == [
            (0, 0, pos(1, 0))
        ]

    def test_sacrifice_stops_further_candidates(self):
        """After a sacrifice the enemy does not try the king's square."""
        rng = preference_random([pos(1, 0), pos(1, 1)])
        result = resolve_enemy_moves(3, pos(1, 1), [pos(2, 0)], [pos(1, 0)], rng)
        assert not result.captured
        assert result.enemies == [pos(2, 0)]

    def test_sacrifice_regardless_of_shuffle_when_other_cells_blocked(self):
        """Neighbors held by other enemies are rejected, so the ally is always reached."""
        for seed in range(20):
            result = resolve_enemy_moves(
                3,
                pos(0, 0),
                [pos(2, 0), pos(1, 1), pos(2, 1)],
                [pos(1, 0)],
                random.Random(seed),
            )
            assert result.enemies[0] == pos(2, 0)
            assert result.sacrifices[0].enemy_index == 0
            assert pos(1, 0) not in result.allies

    def test_survivors_keep_order(self):
        rng = preference_random([pos(1, 1)])
        allies = [pos(3, 3), pos(1, 1), pos(0, 3)]
        result = resolve_enemy_moves(4, pos(3, 0), [pos(0, 0)], allies, rng)
        assert result.allies == [pos(3, 3), pos(0, 3)]

    def test_each_ally_sacrificed_once(self):
        """Two enemies aiming at the same ally: the second finds it gone."""
        rng = preference_random([pos(1, 1)])
        result = resolve_enemy_moves(
            4, pos(3, 3), [pos(0, 0), pos(2, 2)], [pos(1, 1)], rng
        )
        assert len(result.sacrifices) == 1
        assert result.enemies[0] == pos(0, 0)
        # The ally cell is now empty and unclaimed, so the second enemy steps in.
        assert result.enemies[1] == pos(1, 1)


class TestPriority:
    """Earlier enemies block later ones."""

    def test_claimed_cell_rejected(self):
        rng = preference_random([pos(1, 0)])
        result = resolve_enemy_moves(4, pos(3, 3), [pos(0, 0), pos(2, 0)], [], rng)
        assert result.enemies[0] == pos(1, 0)
        assert result.enemies[1] == pos(1, 1)

    def test_pre_turn_square_rejected_even_if_vacated(self):
        rng = preference_random([pos(1, 0), pos(0, 1)])
        result = resolve_enemy_moves(4, pos(3, 3), [pos(0, 0), pos(1, 0)], [], rng)
        assert result.enemies == [pos(0, 1), pos(1, 1)]

    def test_fully_blocked_enemy_stays(self):
        result = resolve_enemy_moves(
            3,
            pos(2, 2),
            [pos(0, 0), pos(0, 1), pos(1, 0), pos(1, 1)],
            [],
            random.Random(5),
        )
        assert result.enemies[0] == pos(0, 0)

    def test_crowded_board_only_reaches_free_cells(self):
        """On a full 12x12 board only the free cell and the king's square are reachable."""
        king, free = pos(11, 11), pos(5, 5)
        enemies = [pos(x, y) for x in range(12) for y in range(12) if pos(x, y) not in (king, free)]

        result = resolve_enemy_moves(12, king, enemies, [], random.Random(0))

        moved = [(before, after) for before, after in zip(enemies, result.enemies) if before != after]
        assert {after for _, after in moved} <= {free, king}
        assert len(moved) <= 2
        assert result.duplicates_removed == 0
        assert len(result.enemies) == len(enemies)

    def test_only_first_capturer_counts(self):
        """Once the king's square is claimed, later enemies cannot enter it."""
        rng = preference_random([pos(1, 1)])
        result = resolve_enemy_moves(3, pos(1, 1), [pos(0, 0), pos(2, 2)], [], rng)
        assert result.captured_enemy_index == 0
        assert result.enemies.count(pos(1, 1)) == 1


class TestDeduplication:
    """Tests for the defensive deduplication step."""

    def test_dedupe_keeps_first_occurrence(self):
        unique, removed = dedupe_positions([pos(1, 1), pos(0, 0), pos(1, 1)])
        assert unique == [pos(1, 1), pos(0, 0)]
        assert removed == 1

    @pytest.mark.parametrize("seed", range(25))
    def test_blocking_rules_never_produce_duplicates(self, seed):
        rng = random.Random(seed)
        size = 5
        cells = [pos(x, y) for x in range(size) for y in range(size)]
        picked = rng.sample(cells, 13)
        king, enemies, allies = picked[0], picked[1:9], picked[9:]

        result = resolve_enemy_moves(size, king, enemies, allies, rng)

        assert result.duplicates_removed == 0
        assert len(result.enemies) == len(enemies)
        assert len(set(result.enemies)) == len(result.enemies)
        for before, after in zip(enemies, result.enemies):
            assert chebyshev_distance(before, after) <= 1
        assert set(result.allies) <= set(allies)
        assert len(result.allies) == len(allies) - len(result.sacrifices)
