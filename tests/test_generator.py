# tests/test_generator.py

import unittest

import pytest

from conftest import make_puzzle
from roomlogic.core import cp_audit
from roomlogic.core.board_generator import generate_board
from roomlogic.core.config_loader import GenerationConfig
from roomlogic.core.clue_types import AdjacentToObject, InRoom, OnObject
from roomlogic.core.enums import Difficulty, ObjectKind
from roomlogic.core.errors import GenerationExhausted
from roomlogic.core.generator import (
    DIFFICULTY_PROFILES,
    PuzzleGenerator,
    draw_params,
    generate,
    pick_suspect_placements,
    separating_clues,
)
from roomlogic.core.geometry import clue_holds, placement_valid, room_at
from roomlogic.core.rng import SeededRng
from roomlogic.core.solver import solve
from roomlogic.core.types import Board, Coord


@pytest.mark.parametrize("prefix", ["seed-", "x", "p"])
@pytest.mark.parametrize("difficulty", list(Difficulty))
def test_generated_puzzles_are_unique(difficulty, prefix):
    for i in range(200):
        puzzle = generate(f"{prefix}{i}", difficulty)
        result = solve(puzzle, 2)
        assert len(result.solutions) == 1, f"{prefix}{i} ({difficulty})"


@pytest.mark.parametrize("difficulty", list(Difficulty))
def test_solution_has_victim_and_assassin(difficulty):
    for i in range(20):
        puzzle = generate(f"killer-{i}", difficulty)
        solution = solve(puzzle, 1).solutions[0]
        board = puzzle.board
        assert placement_valid(board, solution.placements)
        assert solution.assassin_id in solution.placements
        assert room_at(board, solution.placements[solution.assassin_id]) == room_at(board, solution.victim)


def test_clues_are_true_for_solution():
    puzzle = generate("truth", Difficulty.HARD)
    solution = solve(puzzle, 1).solutions[0]
    for suspect in puzzle.suspects:
        for clue in suspect.clues:
            assert clue_holds(puzzle.board, clue, solution.placements[suspect.id])


def test_generation_is_deterministic():
    assert generate("same", Difficulty.MEDIUM) == generate("same", Difficulty.MEDIUM)
    assert generate("same", "medium") == generate("same", Difficulty.MEDIUM)


def test_difficulty_changes_the_puzzle():
    assert generate("same", Difficulty.EASY) != generate("same", Difficulty.HARD)


def test_unknown_difficulty_raises():
    with pytest.raises(ValueError):
        generate("x", "nightmare")


def test_exhaustion_raises(monkeypatch, blocked_board):
    monkeypatch.setattr("roomlogic.core.generator.generate_board", lambda *args: blocked_board)
    generator = PuzzleGenerator({"max_attempts": 3})
    with pytest.raises(GenerationExhausted) as exc_info:
        generator.generate("stuck", Difficulty.EASY)
    assert exc_info.value.attempts == 3
    assert exc_info.value.seed == "stuck"
    assert generator.stats.attempts == 3


def test_cross_check_accepts_generated_puzzle():
    puzzle = generate("audit", Difficulty.MEDIUM, GenerationConfig(cross_check=True))
    assert cp_audit.count_solutions(puzzle, 2) == 1


def test_separating_clues_follow_solver_feedback(corridor_board):
    objects = dict(corridor_board.objects)
    objects[Coord(2, 2)] = ObjectKind.BED
    board = Board(3, 3, corridor_board.rooms, objects)
    puzzle = make_puzzle(board, [InRoom(1)], [OnObject(ObjectKind.RUG)])
    first, second = solve(puzzle, 2).solutions

    # NearObject(Bed) истинна в обеих клетках S1 и ничего не отсекает
    assert separating_clues(puzzle, keep=first, drop=second) == [(0, [AdjacentToObject(ObjectKind.BED)])]
    assert separating_clues(puzzle, keep=first, drop=first) == []


def test_refinement_adds_only_separating_clue(corridor_board):
    objects = dict(corridor_board.objects)
    objects[Coord(2, 2)] = ObjectKind.BED
    board = Board(3, 3, corridor_board.rooms, objects)
    puzzle = make_puzzle(board, [InRoom(1)], [OnObject(ObjectKind.RUG)])

    generator = PuzzleGenerator()
    refined = generator._ensure_unique(puzzle, SeededRng("refine"))

    assert refined is not None
    assert refined.suspects[0].clues == (InRoom(1), AdjacentToObject(ObjectKind.BED))
    assert solve(refined, 2).is_unique
    assert generator.stats.refinements == 1


def test_refinement_gives_up_without_spending_budget(ambiguous_puzzle):
    # в коридоре без объектов клетки (2,1) и (2,2) неразличимы уликами
    generator = PuzzleGenerator({"refine_budget": 50})
    assert generator._ensure_unique(ambiguous_puzzle, SeededRng("stuck")) is None
    assert generator.stats.refinements == 0


def test_zero_budget_accepts_only_unique_first_draft():
    generator = PuzzleGenerator({"refine_budget": 0})
    for i in range(10):
        puzzle = generator.generate(f"budget-{i}", Difficulty.HARD)
        assert solve(puzzle, 2).is_unique
        assert generator.stats.refinements == 0


class TestDifficultyParams(unittest.TestCase):
    """Параметры сложности тянутся из диапазонов в фиксированном порядке."""

    def test_params_within_ranges(self):
        for difficulty, ranges in DIFFICULTY_PROFILES.items():
            for i in range(50):
                params = draw_params(difficulty, SeededRng(f"p{i}"))
                lo, hi = ranges["grid_size"]
                self.assertTrue(lo <= params.grid_size <= hi)
                self.assertLessEqual(params.suspects, params.grid_size - 1)
                lo, hi = ranges["clues_per_suspect"]
                self.assertTrue(lo <= params.clues_per_suspect <= hi)

    def test_suspect_placements_use_distinct_lines(self):
        rng = SeededRng("placements")
        board = generate_board(5, 5, 3, 0, 0, 1, rng)
        placements = pick_suspect_placements(board, 4, rng)
        self.assertEqual(list(placements), ["S1", "S2", "S3", "S4"])
        self.assertTrue(placement_valid(board, placements))

    def test_placements_on_blocked_board(self):
        board = Board(2, 2, ((0, 0), (0, 0)), {Coord(x, y): ObjectKind.BOX for x in range(2) for y in range(2)})
        self.assertIsNone(pick_suspect_placements(board, 1, SeededRng("boxed")))

    def test_stats_are_collected(self):
        generator = PuzzleGenerator()
        puzzle = generator.generate("stats", Difficulty.EASY)
        self.assertGreaterEqual(generator.stats.attempts, 1)
        self.assertGreater(generator.stats.elapsed_ms, 0.0)
        self.assertEqual(len(puzzle.suspects), puzzle.board.width - 1)


if __name__ == '__main__':
    unittest.main()
