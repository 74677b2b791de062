"""
Командная строка roomlogic.

  roomlogic generate --seed abc --difficulty medium -o puzzle.json
  roomlogic solve puzzle.json
  roomlogic bench --count 50 --difficulty easy --difficulty hard
"""
import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .core.clue_types import clue_label
from .core.config_loader import EnvConfigLoader, GenerationConfig
from .core.enums import Difficulty
from .core.errors import GenerationExhausted
from .core.generator import PuzzleGenerator
from .core.logger import setup_logging
from .core.reporter import BatchReporter
from .core.snapshot import dump_puzzle, load_puzzle
from .core.solver import solve
from .core.types import Board, Coord, Puzzle

log = logging.getLogger(__name__)


def render_board(board: Board) -> str:
    """Текстовая схема поля: номер комнаты, '#' - блокирующий объект, '+' - занимаемый."""
    lines = []
    for y in range(board.height):
        cells = []
        for x in range(board.width):
            obj = board.objects.get(Coord(x, y))
            mark = "" if obj is None else ("#" if obj.is_blocking else "+")
            cells.append(f"{board.rooms[y][x]}{mark}".ljust(3))
        lines.append(" ".join(cells).rstrip())
    return "\n".join(lines)


def describe_puzzle(puzzle: Puzzle) -> str:
    lines = [f"Seed: {puzzle.seed} ({puzzle.difficulty})", render_board(puzzle.board)]
    for window in puzzle.board.windows:
        cells = ", ".join(f"({c.x},{c.y})" for c in window.cells())
        lines.append(f"Окно #{window.id}: {cells}")
    for suspect in puzzle.suspects:
        clues = "; ".join(clue_label(c) for c in suspect.clues)
        lines.append(f"{suspect.id} {suspect.name}: {clues}")
    return "\n".join(lines)


def _read_snapshot(path: str) -> Optional[str]:
    if path == "-":
        return sys.stdin.read()
    try:
        return Path(path).read_text(encoding="utf-8")
    except OSError as e:
        log.error("❌ Не удалось прочитать файл %s: %s", path, e)
        return None


def cmd_generate(args: argparse.Namespace, config: GenerationConfig) -> int:
    generator = PuzzleGenerator(config)
    try:
        puzzle = generator.generate(args.seed, args.difficulty)
    except GenerationExhausted as e:
        log.error("❌ %s", e)
        return 1

    payload = dump_puzzle(puzzle)
    if args.output:
        Path(args.output).write_text(payload, encoding="utf-8")
        log.info("✅ Снимок сохранен: %s", args.output)
    else:
        print(payload)
    if args.show:
        print(describe_puzzle(puzzle))
    return 0


def cmd_solve(args: argparse.Namespace, config: GenerationConfig) -> int:
    puzzle = load_puzzle(_read_snapshot(args.snapshot))
    if puzzle is None:
        log.error("❌ Снимок головоломки не прочитан: %s", args.snapshot)
        return 1

    result = solve(puzzle, args.max_solutions)
    print(f"Решений найдено: {len(result.solutions)} (лимит {args.max_solutions})")
    for i, solution in enumerate(result.solutions, 1):
        placements = ", ".join(f"{sid}=({c.x},{c.y})" for sid, c in solution.placements.items())
        print(f"  #{i}: {placements}; жертва ({solution.victim.x},{solution.victim.y}); убийца {solution.assassin_id}")
    if result.hint:
        print(f"Подсказка: {result.hint}")
    return 0


def cmd_bench(args: argparse.Namespace, config: GenerationConfig) -> int:
    difficulties = args.difficulty or list(Difficulty)
    reporter = BatchReporter(config, show_progress=not args.quiet)
    results = reporter.run(difficulties, args.count, seed_prefix=args.seed_prefix)
    print(reporter.render())
    if args.csv:
        results.to_csv(args.csv, index=False)
        log.info("✅ Результаты сохранены: %s", args.csv)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="roomlogic",
        description="Генератор и решатель головоломок 'кто где стоял'.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument("--env-file", default=None, help="Путь к .env с переменными RL_*.")
    sub = parser.add_subparsers(dest="command", required=True)

    gen = sub.add_parser("generate", help="Сгенерировать головоломку и вывести снимок JSON.")
    gen.add_argument("--seed", required=True)
    gen.add_argument("--difficulty", type=Difficulty.parse, default=Difficulty.EASY)
    gen.add_argument("-o", "--output", default=None, help="Файл для снимка (по умолчанию stdout).")
    gen.add_argument("--show", action="store_true", help="Дополнительно напечатать схему поля и улики.")
    gen.set_defaults(handler=cmd_generate)

    slv = sub.add_parser("solve", help="Решить головоломку из снимка JSON ('-' - stdin).")
    slv.add_argument("snapshot")
    slv.add_argument("--max-solutions", type=int, default=2)
    slv.set_defaults(handler=cmd_solve)

    bench = sub.add_parser("bench", help="Пакетная генерация и сводная статистика.")
    bench.add_argument("--count", type=int, default=20, help="Головоломок на каждый уровень сложности.")
    bench.add_argument("--difficulty", type=Difficulty.parse, action="append",
                       help="Уровень сложности; можно указать несколько раз (по умолчанию все).")
    bench.add_argument("--seed-prefix", default="bench")
    bench.add_argument("--csv", default=None, help="Сохранить сырые результаты в CSV.")
    bench.add_argument("--quiet", action="store_true", help="Без индикатора прогресса.")
    bench.set_defaults(handler=cmd_bench)
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """CLI-точка входа."""
    parser = build_parser()
    args = parser.parse_args(argv)

    env_config = EnvConfigLoader(dotenv_path=args.env_file).load_config()
    setup_logging(env_config)
    try:
        config = GenerationConfig.from_config(env_config)
    except ValueError as e:
        log.error("❌ Некорректная конфигурация генератора: %s", e)
        return 1

    if getattr(args, "max_solutions", 1) < 1:
        log.error("❌ --max-solutions должен быть >= 1")
        return 1
    return args.handler(args, config)


if __name__ == "__main__":
    sys.exit(main())
