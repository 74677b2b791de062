# tests/conftest.py
import logging

import pytest

from roomlogic.core.clue_types import InRoom, OnObject
from roomlogic.core.enums import Difficulty, Direction, ObjectKind
from roomlogic.core.logger import TRACE_LOGGER_NAME, StructuredFormatter
from roomlogic.core.types import Board, Coord, Puzzle, Suspect, WindowSegment


def make_puzzle(board: Board, *clue_sets) -> Puzzle:
    suspects = tuple(
        Suspect(id=f"S{i}", name=f"Подозреваемый {i}", clues=tuple(clues))
        for i, clues in enumerate(clue_sets, 1)
    )
    return Puzzle(seed="manual", difficulty=Difficulty.EASY, board=board, suspects=suspects)


@pytest.fixture
def example_board() -> Board:
    """
    Поле 2x2: комната 0 занимает три клетки, комната 1 - клетку (1,1).
    Растение в (0,0), стол в (1,1), внешнее окно над (0,0) и внутреннее между (0,1) и (1,1).
    """
    return Board(
        width=2,
        height=2,
        rooms=((0, 0), (0, 1)),
        objects={Coord(0, 0): ObjectKind.PLANT, Coord(1, 1): ObjectKind.TABLE},
        windows=(
            WindowSegment("borda", Coord(0, 0), direction=Direction.N),
            WindowSegment("interna", Coord(0, 1), Coord(1, 1), Direction.E),
        ),
    )


@pytest.fixture
def corridor_board() -> Board:
    """Поле 3x3: левые два столбца - комната 0, правый столбец - комната 1. Ковер в (0,0)."""
    return Board(
        width=3,
        height=3,
        rooms=((0, 0, 1), (0, 0, 1), (0, 0, 1)),
        objects={Coord(0, 0): ObjectKind.RUG},
    )


@pytest.fixture
def unique_puzzle(corridor_board) -> Puzzle:
    """Стол в (1,2) отсекает одно из двух положений S1: решение единственно."""
    objects = dict(corridor_board.objects)
    objects[Coord(1, 2)] = ObjectKind.TABLE
    board = Board(corridor_board.width, corridor_board.height, corridor_board.rooms, objects)
    return make_puzzle(board, [InRoom(1)], [OnObject(ObjectKind.RUG)])


@pytest.fixture
def ambiguous_puzzle(corridor_board) -> Puzzle:
    return make_puzzle(corridor_board, [InRoom(1)], [OnObject(ObjectKind.RUG)])


@pytest.fixture
def impossible_puzzle(corridor_board) -> Puzzle:
    """Оба подозреваемых заперты в одном столбце."""
    return make_puzzle(corridor_board, [InRoom(1)], [InRoom(1)])


@pytest.fixture
def blocked_board() -> Board:
    """Поле 4x4, где каждая клетка занята столом: ни одна попытка генерации не пройдет."""
    coords = [Coord(x, y) for y in range(4) for x in range(4)]
    return Board(4, 4, tuple((0,) * 4 for _ in range(4)), {c: ObjectKind.TABLE for c in coords})


@pytest.fixture
def restore_logging():
    """Снимает обработчики, добавленные setup_logging, и возвращает уровни логгеров."""
    root = logging.getLogger()
    trace = logging.getLogger(TRACE_LOGGER_NAME)
    saved = (root.level, trace.level, trace.propagate)
    yield
    for logger in (root, trace):
        for handler in list(logger.handlers):
            if isinstance(handler.formatter, StructuredFormatter):
                logger.removeHandler(handler)
                handler.close()
    root.setLevel(saved[0])
    trace.setLevel(saved[1])
    trace.propagate = saved[2]
