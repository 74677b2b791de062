import logging
from typing import Any, Dict, Iterable, List, Optional

import pandas as pd
from tqdm import tqdm

from .config_loader import GenerationConfig
from .enums import Difficulty
from .errors import GenerationExhausted
from .generator import PuzzleGenerator
from .solver import solve

log = logging.getLogger(__name__)

COLUMNS = ['seed', 'difficulty', 'grid', 'suspects', 'rooms', 'clues', 'attempts',
           'refinements', 'elapsed_ms', 'unique', 'failed']


class BatchReporter:
    """
    Прогоняет генератор по множеству seed и собирает статистику в pandas.DataFrame:
    сколько попыток и улик требуется на каждом уровне сложности и как часто
    генерация упирается в лимит.
    """

    def __init__(self, config: Optional[GenerationConfig] = None, show_progress: bool = True):
        self.config = config or GenerationConfig()
        self.show_progress = show_progress
        self.results: pd.DataFrame = pd.DataFrame(columns=COLUMNS)

    def run(self, difficulties: Iterable[Difficulty], count: int, seed_prefix: str = "bench") -> pd.DataFrame:
        rows: List[Dict[str, Any]] = []
        jobs = [(d, i) for d in difficulties for i in range(count)]
        for difficulty, i in tqdm(jobs, desc="Генерация", unit="puzzle", disable=not self.show_progress):
            rows.append(self._run_one(f"{seed_prefix}-{difficulty.value}-{i}", difficulty))
        self.results = pd.DataFrame(rows, columns=COLUMNS)
        log.info("Собрано %d записей", len(self.results))
        return self.results

    def _run_one(self, seed: str, difficulty: Difficulty) -> Dict[str, Any]:
        generator = PuzzleGenerator(self.config)
        try:
            puzzle = generator.generate(seed, difficulty)
        except GenerationExhausted as e:
            log.warning("❌ %s", e)
            return {'seed': seed, 'difficulty': difficulty.value, 'attempts': e.attempts,
                    'elapsed_ms': generator.stats.elapsed_ms, 'unique': False, 'failed': True}
        board = puzzle.board
        return {
            'seed': seed,
            'difficulty': difficulty.value,
            'grid': board.width,
            'suspects': len(puzzle.suspects),
            'rooms': len(board.room_ids),
            'clues': sum(len(s.clues) for s in puzzle.suspects),
            'attempts': generator.stats.attempts,
            'refinements': generator.stats.refinements,
            'elapsed_ms': round(generator.stats.elapsed_ms, 2),
            'unique': solve(puzzle, 2).is_unique,
            'failed': False,
        }

    def summary(self) -> pd.DataFrame:
        """Сводка по уровням сложности."""
        if self.results.empty:
            return pd.DataFrame()
        df = self.results.copy()
        # у неудачных записей часть колонок пустая (NaN)
        for column in ('clues', 'attempts', 'elapsed_ms'):
            df[column] = pd.to_numeric(df[column])
        df['failed'] = df['failed'].astype(bool)
        df['unique'] = df['unique'].astype(bool)
        grouped = df.groupby('difficulty', sort=False)
        return pd.DataFrame({
            'puzzles': grouped.size(),
            'failed': grouped['failed'].sum(),
            'unique_rate': grouped['unique'].mean().round(3),
            'avg_clues': grouped['clues'].mean().round(2),
            'avg_attempts': grouped['attempts'].mean().round(2),
            'max_attempts': grouped['attempts'].max(),
            'avg_ms': grouped['elapsed_ms'].mean().round(1),
        })

    def render(self) -> str:
        summary = self.summary()
        if summary.empty:
            return "Нет данных для отчета."
        return summary.to_string()
