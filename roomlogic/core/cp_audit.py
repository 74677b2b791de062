# roomlogic/core/cp_audit.py
"""
Независимая проверка единственности решения на движке Google OR-Tools CP-SAT.

Модель строится напрямую из улик и не использует PuzzleSolver, поэтому
расхождение в числе решений означает ошибку в одном из решателей.
"""
import logging
from typing import Dict, List, Tuple

from ortools.sat.python import cp_model

from .geometry import candidate_cells, is_blocked
from .types import Coord, Puzzle

log = logging.getLogger(__name__)

TIME_LIMIT_SECONDS = 10.0


class SolutionCounter(cp_model.CpSolverSolutionCallback):
    """Вспомогательный класс для эффективного подсчета решений в CP-SAT."""
    def __init__(self, limit: int):
        super().__init__()
        self._solution_count = 0
        self._limit = limit

    def on_solution_callback(self) -> None:
        self._solution_count += 1
        if self._solution_count >= self._limit:
            self.StopSearch()  # Прекращаем поиск, как только достигли лимита

    @property
    def solution_count(self) -> int:
        return self._solution_count


def build_model(puzzle: Puzzle) -> Tuple[cp_model.CpModel, Dict[Tuple[str, Coord], cp_model.IntVar]]:
    """
    Булева модель расстановки:
      p[s, c]  - подозреваемый s стоит в клетке c (только клетки его домена);
      v[c]     - клетка c свободна по строке и столбцу (кандидат в жертвы).
    """
    board = puzzle.board
    model = cp_model.CpModel()
    unblocked = [c for c in board.all_coords() if not is_blocked(board, c)]

    placement_vars: Dict[Tuple[str, Coord], cp_model.IntVar] = {}
    for suspect in puzzle.suspects:
        domain = set(unblocked)
        for clue in suspect.clues:
            domain &= set(candidate_cells(board, clue))
        cells = sorted(domain, key=board.index)
        for coord in cells:
            placement_vars[(suspect.id, coord)] = model.NewBoolVar(f"p_{suspect.id}_{coord.x}_{coord.y}")
        model.AddExactlyOne([placement_vars[(suspect.id, c)] for c in cells])

    def on_row(y: int) -> List[cp_model.IntVar]:
        return [var for (_, c), var in placement_vars.items() if c.y == y]

    def on_col(x: int) -> List[cp_model.IntVar]:
        return [var for (_, c), var in placement_vars.items() if c.x == x]

    lines = [on_row(y) for y in range(board.height)] + [on_col(x) for x in range(board.width)]
    for line in lines:
        if len(line) > 1:
            model.Add(sum(line) <= 1)

    victim_vars: Dict[Coord, cp_model.IntVar] = {}
    for coord in unblocked:
        v = model.NewBoolVar(f"v_{coord.x}_{coord.y}")
        row_used, col_used = sum(on_row(coord.y)), sum(on_col(coord.x))
        model.Add(v + row_used <= 1)
        model.Add(v + col_used <= 1)
        model.Add(v + row_used + col_used >= 1)
        victim_vars[coord] = v
    model.Add(sum(victim_vars.values()) == 1)

    # Жертва должна делить комнату хотя бы с одним подозреваемым
    for coord, v in victim_vars.items():
        room = board.rooms[coord.y][coord.x]
        in_room = [var for (_, c), var in placement_vars.items() if board.rooms[c.y][c.x] == room]
        model.Add(v <= sum(in_room))

    return model, placement_vars


def count_solutions(puzzle: Puzzle, limit: int = 2) -> int:
    """
    Считает решения: 0, 1, ... до `limit`.
    Если решатель не успел за отведенное время, считаем, что решений много (limit).
    """
    board = puzzle.board
    unblocked = {c for c in board.all_coords() if not is_blocked(board, c)}
    for suspect in puzzle.suspects:
        domain = set(unblocked)
        for clue in suspect.clues:
            domain &= set(candidate_cells(board, clue))
        if not domain:
            return 0
    if not unblocked:
        return 0

    model, _ = build_model(puzzle)
    solver = cp_model.CpSolver()
    solver.parameters.enumerate_all_solutions = True
    solver.parameters.max_time_in_seconds = TIME_LIMIT_SECONDS
    counter = SolutionCounter(limit=limit)
    status = solver.Solve(model, counter)
    if status == cp_model.UNKNOWN:
        log.warning("CP-SAT не уложился в %.1f сек. для seed='%s'", TIME_LIMIT_SECONDS, puzzle.seed)
        return limit
    return counter.solution_count
