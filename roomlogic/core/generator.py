# generator.py

import logging
import time
from dataclasses import dataclass, replace
from typing import Any, Dict, List, Optional, Tuple, Union

from . import cp_audit
from .board_generator import generate_board
from .clue_types import Clue, clue_label
from .config_loader import GenerationConfig
from .enums import Difficulty
from .errors import GenerationExhausted
from .geometry import assassin_id, clue_holds, is_blocked, true_clues_at, victim_cell
from .logger import TRACE_LOGGER_NAME
from .rng import SeededRng
from .solver import solve
from .types import Board, Coord, PlacementMap, Puzzle, Solution, Suspect

log = logging.getLogger(__name__)
trace = logging.getLogger(TRACE_LOGGER_NAME)


# Диапазоны параметров (включительно). Порядок ключей = порядок вызовов rng.next_int.
DIFFICULTY_PROFILES: Dict[Difficulty, Dict[str, Tuple[int, int]]] = {
    Difficulty.EASY: {
        "grid_size": (4, 4), "suspects": (3, 4), "rooms": (2, 3),
        "blocking": (2, 6), "occupiable": (1, 2), "windows": (1, 2), "clues_per_suspect": (1, 1),
    },
    Difficulty.MEDIUM: {
        "grid_size": (4, 5), "suspects": (4, 5), "rooms": (3, 4),
        "blocking": (3, 7), "occupiable": (1, 3), "windows": (1, 3), "clues_per_suspect": (1, 2),
    },
    Difficulty.HARD: {
        "grid_size": (5, 6), "suspects": (5, 6), "rooms": (3, 6),
        "blocking": (4, 8), "occupiable": (2, 3), "windows": (2, 3), "clues_per_suspect": (2, 2),
    },
}


@dataclass(frozen=True)
class DifficultyParams:
    grid_size: int
    suspects: int
    rooms: int
    blocking: int
    occupiable: int
    windows: int
    clues_per_suspect: int


@dataclass
class GenerationStats:
    """Сводка последней генерации: для отчетов и логов."""
    attempts: int = 0
    refinements: int = 0
    elapsed_ms: float = 0.0


def draw_params(difficulty: Difficulty, rng: SeededRng) -> DifficultyParams:
    """
    Тянет параметры из диапазонов сложности. Число подозреваемых ограничено
    размером поля минус один: одна строка и один столбец остаются жертве.
    """
    ranges = DIFFICULTY_PROFILES[difficulty]
    grid_size = rng.next_int(*ranges["grid_size"])
    lo, hi = ranges["suspects"]
    capped_hi = min(hi, grid_size - 1)
    capped_lo = min(lo, capped_hi)
    return DifficultyParams(
        grid_size=grid_size,
        suspects=rng.next_int(capped_lo, capped_hi),
        rooms=rng.next_int(*ranges["rooms"]),
        blocking=rng.next_int(*ranges["blocking"]),
        occupiable=rng.next_int(*ranges["occupiable"]),
        windows=rng.next_int(*ranges["windows"]),
        clues_per_suspect=rng.next_int(*ranges["clues_per_suspect"]),
    )


def pick_suspect_placements(board: Board, count: int, rng: SeededRng) -> Optional[PlacementMap]:
    """
    i-я перемешанная строка в паре с i-м перемешанным столбцом: различие строк и
    столбцов гарантировано построением. None, если клетка оказалась заблокирована.
    """
    rows = list(range(board.height))
    cols = list(range(board.width))
    rng.shuffle(rows)
    rng.shuffle(cols)
    if count > min(len(rows), len(cols)):
        return None
    placements: PlacementMap = {}
    for i in range(count):
        coord = Coord(cols[i], rows[i])
        if is_blocked(board, coord):
            return None
        placements[f"S{i + 1}"] = coord
    return placements


class PuzzleGenerator:
    """
    Ядро генератора головоломок.

    Цикл попытки: поле -> расстановка -> проверка жертвы -> улики -> укрепление
    до единственности решения. Все случайные решения берутся из одного SeededRng
    строго в этом порядке, поэтому (seed, сложность, лимиты) однозначно задают результат.
    """

    def __init__(self, config: Optional[Union[GenerationConfig, Dict[str, Any]]] = None):
        if isinstance(config, GenerationConfig):
            self.config = config
        else:
            self.config = GenerationConfig.from_config(config)
        self.stats = GenerationStats()

    def generate(self, seed: str, difficulty: Union[Difficulty, str]) -> Puzzle:
        difficulty = Difficulty.parse(difficulty)
        rng = SeededRng(seed + difficulty.value)
        params = draw_params(difficulty, rng)
        self.stats = GenerationStats()
        start_time = time.perf_counter()
        log.debug("Генерация seed='%s' (%s): %s", seed, difficulty, params)

        for attempt in range(1, self.config.max_attempts + 1):
            self.stats.attempts = attempt
            puzzle = self._try_generate(seed, difficulty, params, rng, attempt)
            if puzzle is not None:
                self.stats.elapsed_ms = (time.perf_counter() - start_time) * 1000
                log.info("Головоломка seed='%s' (%s) готова: попытка %d, улик %d, %.1f мс",
                         seed, difficulty, attempt, sum(len(s.clues) for s in puzzle.suspects),
                         self.stats.elapsed_ms)
                return puzzle

        self.stats.elapsed_ms = (time.perf_counter() - start_time) * 1000
        log.error("Исчерпан лимит попыток (%d) для seed='%s' (%s)", self.config.max_attempts, seed, difficulty)
        raise GenerationExhausted(seed, difficulty, self.config.max_attempts)

    def _try_generate(self, seed: str, difficulty: Difficulty, params: DifficultyParams,
                      rng: SeededRng, attempt: int) -> Optional[Puzzle]:
        """Одна попытка. None - попытка отбракована."""
        extra = {"seed": seed, "difficulty": difficulty, "attempt": attempt}
        board = generate_board(params.grid_size, params.grid_size, params.rooms,
                               params.blocking, params.occupiable, params.windows, rng)

        placements = pick_suspect_placements(board, params.suspects, rng)
        if placements is None:
            trace.debug("Подозреваемый попал на заблокированную клетку", extra=extra)
            return None

        victim = victim_cell(board, placements)
        if victim is None:
            trace.debug("Нет единственной клетки для жертвы", extra=extra)
            return None
        if not assassin_id(board, placements, victim):
            trace.debug("В комнате жертвы нет подозреваемых", extra=extra)
            return None

        suspects = self._build_suspects(board, placements, params.clues_per_suspect, rng)
        puzzle = Puzzle(seed=seed, difficulty=difficulty, board=board, suspects=suspects)

        puzzle = self._ensure_unique(puzzle, rng)
        if puzzle is None:
            trace.debug("Укрепление не достигло единственности", extra=extra)
            return None

        if self.config.cross_check:
            audited = cp_audit.count_solutions(puzzle, limit=2)
            if audited != 1:
                log.warning("CP-SAT нашел %d решений вместо 1 (seed='%s', попытка %d). Отбраковка.",
                            audited, seed, attempt)
                return None
        return puzzle

    @staticmethod
    def _build_suspects(board: Board, placements: PlacementMap, clue_count: int,
                        rng: SeededRng) -> Tuple[Suspect, ...]:
        suspects = []
        for index, (suspect_id, coord) in enumerate(placements.items()):
            possible = true_clues_at(board, coord)
            rng.shuffle(possible)
            suspects.append(Suspect(
                id=suspect_id,
                name=f"Подозреваемый {index + 1}",
                clues=tuple(possible[:min(clue_count, len(possible))]),
            ))
        return tuple(suspects)

    def _ensure_unique(self, puzzle: Puzzle, rng: SeededRng) -> Optional[Puzzle]:
        """
        Доукрепление по подсказке решателя: пока найдено два решения, выбираем
        случайного подозреваемого, стоящего в них в разных клетках, и добавляем
        ему улику, истинную для его клетки в первом решении и ложную во втором.
        Первое решение остается решением, второе отсекается, поэтому число
        решений строго убывает. Если первое решение от второго улики отличить
        не могут, роли решений меняются. Если не годится ни одна улика, попытка
        бросается сразу, не тратя бюджет.
        """
        result = solve(puzzle, 2)
        refinements = 0
        while len(result.solutions) > 1:
            if refinements >= self.config.refine_budget:
                return None
            first, second = result.solutions[0], result.solutions[1]
            options = separating_clues(puzzle, keep=first, drop=second)
            if not options:
                options = separating_clues(puzzle, keep=second, drop=first)
            if not options:
                log.debug("  - Решения неразличимы уликами, попытка отбракована")
                return None

            index, candidates = rng.pick(options)
            clue = rng.pick(candidates)
            suspect = puzzle.suspects[index]
            refinements += 1
            self.stats.refinements += 1
            log.debug("  - Найдено %d решений. Добавлена улика %s для %s", len(result.solutions),
                      clue_label(clue), suspect.id)
            suspects = list(puzzle.suspects)
            suspects[index] = replace(suspect, clues=suspect.clues + (clue,))
            puzzle = replace(puzzle, suspects=tuple(suspects))
            result = solve(puzzle, 2)

        return puzzle if len(result.solutions) == 1 else None


def separating_clues(puzzle: Puzzle, keep: Solution, drop: Solution) -> List[Tuple[int, List[Clue]]]:
    """
    Для каждого подозреваемого, стоящего в `keep` и `drop` в разных клетках:
    новые для него улики, истинные в клетке из `keep` и ложные в клетке из `drop`.
    Возвращает пары (индекс подозреваемого, улики) в порядке подозреваемых.
    """
    board = puzzle.board
    options: List[Tuple[int, List[Clue]]] = []
    for index, suspect in enumerate(puzzle.suspects):
        here = keep.placements[suspect.id]
        there = drop.placements[suspect.id]
        if here == there:
            continue
        clues = [c for c in true_clues_at(board, here)
                 if c not in suspect.clues and not clue_holds(board, c, there)]
        if clues:
            options.append((index, clues))
    return options


def generate(seed: str, difficulty: Union[Difficulty, str],
             config: Optional[Union[GenerationConfig, Dict[str, Any]]] = None) -> Puzzle:
    """Генерирует головоломку с единственным решением или бросает GenerationExhausted."""
    return PuzzleGenerator(config).generate(seed, difficulty)
