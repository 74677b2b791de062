# tests/test_cp_audit.py
from dataclasses import replace

import pytest

from roomlogic.core import cp_audit
from roomlogic.core.enums import Difficulty
from roomlogic.core.generator import generate
from roomlogic.core.solver import solve


def test_counts_match_hand_made_puzzles(unique_puzzle, ambiguous_puzzle, impossible_puzzle):
    assert cp_audit.count_solutions(unique_puzzle) == 1
    assert cp_audit.count_solutions(ambiguous_puzzle) == 2
    assert cp_audit.count_solutions(impossible_puzzle) == 0


def test_limit_stops_search(ambiguous_puzzle):
    assert cp_audit.count_solutions(ambiguous_puzzle, limit=1) == 1


@pytest.mark.parametrize("difficulty", list(Difficulty))
def test_agrees_with_backtracking_solver(difficulty):
    """Два независимых решателя должны видеть одно и то же число решений."""
    for i in range(10):
        puzzle = generate(f"cp-{i}", difficulty)
        assert cp_audit.count_solutions(puzzle, 2) == len(solve(puzzle, 2).solutions) == 1


def test_agrees_on_weakened_puzzles():
    # только первая улика у каждого: решений обычно несколько, но оценки должны совпасть
    for i in range(5):
        puzzle = generate(f"weak-{i}", Difficulty.EASY)
        suspects = tuple(replace(s, clues=s.clues[:1]) for s in puzzle.suspects)
        weakened = replace(puzzle, suspects=suspects)
        assert cp_audit.count_solutions(weakened, 2) == len(solve(weakened, 2).solutions)
