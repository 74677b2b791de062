# roomlogic/core/solver.py
import logging
from typing import Dict, List, Optional

from .geometry import candidate_cells, is_blocked, placement_valid, solution_from_placements, victim_cell
from .types import Board, Coord, PlacementMap, Puzzle, Solution, SolverResult

log = logging.getLogger(__name__)


class PuzzleSolver:
    """
    Решатель с распространением ограничений и перебором с возвратом.

    Домены подозреваемых хранятся как битовые маски (int) по упакованным
    индексам клеток `y * width + x`; i-й домен принадлежит i-му подозреваемому.
    Порядок обхода детерминирован: одинаковый вход -> одинаковые решения
    в одинаковом порядке. Входная головоломка не изменяется.
    """

    def __init__(self, puzzle: Puzzle):
        self.puzzle = puzzle
        self.board: Board = puzzle.board
        self.suspect_ids = [s.id for s in puzzle.suspects]
        width, height = self.board.width, self.board.height
        self._row_masks = [sum(1 << (y * width + x) for x in range(width)) for y in range(height)]
        self._col_masks = [sum(1 << (y * width + x) for y in range(height)) for x in range(width)]
        self._free_mask = sum(
            1 << self.board.index(c) for c in self.board.all_coords() if not is_blocked(self.board, c)
        )
        self._solutions: List[Solution] = []
        self._limit = 1
        self.nodes = 0

    # --- Домены ---

    def build_domains(self) -> List[int]:
        """Начальный домен = пересечение кандидатов всех улик, без заблокированных клеток."""
        domains = []
        for suspect in self.puzzle.suspects:
            domain = self._free_mask
            for clue in suspect.clues:
                domain &= self._mask_of(candidate_cells(self.board, clue))
            domains.append(domain)
        return domains

    def propagate(self, domains: List[int]) -> Dict[int, int]:
        """
        Доводит домены до неподвижной точки: одноэлементные домены фиксируются,
        их строка и столбец вычеркиваются из всех остальных незафиксированных доменов.
        Изменяет `domains` на месте, возвращает {индекс подозреваемого: индекс клетки}.
        """
        committed: Dict[int, int] = {}
        changed = True
        while changed:
            changed = False
            for i, domain in enumerate(domains):
                if i not in committed and _popcount(domain) == 1:
                    committed[i] = domain.bit_length() - 1
                    changed = True
            if changed:
                used = 0
                for cell in committed.values():
                    used |= self._line_mask(cell)
                for i in range(len(domains)):
                    if i not in committed:
                        domains[i] &= ~used
        return committed

    # --- Поиск ---

    def solve(self, max_solutions: int = 2) -> SolverResult:
        if max_solutions < 1:
            raise ValueError(f"max_solutions должен быть >= 1, получено {max_solutions}")
        self._solutions = []
        self._limit = max_solutions
        self.nodes = 0

        domains = self.build_domains()
        committed = self.propagate(domains)
        propagated = self._placements(committed)

        if not placement_valid(self.board, propagated):
            log.debug("Противоречие уже после распространения: %s", propagated)
            return SolverResult()

        self._backtrack(domains, dict(committed))
        log.debug("Найдено решений: %d (узлов перебора: %d)", len(self._solutions), self.nodes)
        return SolverResult(solutions=list(self._solutions), hint=self._hint(committed, propagated))

    def _backtrack(self, domains: List[int], committed: Dict[int, int]) -> None:
        if len(self._solutions) >= self._limit:
            return
        self.nodes += 1

        if len(committed) == len(domains):
            solution = solution_from_placements(self.board, self._placements(committed))
            if solution is not None:
                self._solutions.append(solution)
            return

        chosen = self._select_unassigned(domains, committed)
        if chosen is None:
            return

        domain = domains[chosen]
        while domain:
            low_bit = domain & -domain
            cell = low_bit.bit_length() - 1
            domain ^= low_bit

            line = self._line_mask(cell)
            next_domains = list(domains)
            next_domains[chosen] = low_bit
            dead_end = False
            for i in range(len(next_domains)):
                if i == chosen or i in committed:
                    continue
                next_domains[i] &= ~line
                if not next_domains[i]:
                    dead_end = True
                    break
            if dead_end:
                continue

            committed[chosen] = cell
            self._backtrack(next_domains, committed)
            del committed[chosen]
            if len(self._solutions) >= self._limit:
                return

    @staticmethod
    def _select_unassigned(domains: List[int], committed: Dict[int, int]) -> Optional[int]:
        """Наиболее ограниченная переменная; при равенстве - первая по порядку подозреваемых."""
        best, best_size = None, None
        for i, domain in enumerate(domains):
            if i in committed:
                continue
            size = _popcount(domain)
            if size == 0:
                return None
            if best_size is None or size < best_size:
                best, best_size = i, size
        return best

    # --- Вспомогательное ---

    def _hint(self, committed: Dict[int, int], propagated: PlacementMap) -> Optional[str]:
        if not self._solutions:
            return None
        unresolved = [i for i in range(len(self.suspect_ids)) if i not in committed]
        if len(unresolved) == 1:
            suspect = self.puzzle.suspects[unresolved[0]]
            coord = self._solutions[0].placements[suspect.id]
            return f"{suspect.name} может находиться только в клетке ({coord.x + 1},{coord.y + 1}) при текущих уликах."
        if not unresolved and victim_cell(self.board, propagated) is not None:
            return "Жертва находится в последней свободной клетке после расстановки подозреваемых."
        return None

    def _placements(self, committed: Dict[int, int]) -> PlacementMap:
        return {self.suspect_ids[i]: self.board.coord_at(cell) for i, cell in sorted(committed.items())}

    def _line_mask(self, cell: int) -> int:
        return self._row_masks[cell // self.board.width] | self._col_masks[cell % self.board.width]

    def _mask_of(self, coords: List[Coord]) -> int:
        mask = 0
        for coord in coords:
            if self.board.contains(coord):
                mask |= 1 << self.board.index(coord)
        return mask


def _popcount(mask: int) -> int:
    return mask.bit_count()


def solve(puzzle: Puzzle, max_solutions: int = 2) -> SolverResult:
    """Находит до `max_solutions` решений головоломки."""
    return PuzzleSolver(puzzle).solve(max_solutions)
