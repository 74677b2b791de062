# roomlogic/core/checks.py
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Set

from .geometry import clue_holds, is_blocked
from .types import PlacementMap, Puzzle


class ContradictionKind(str, Enum):
    BLOCKED_CELL = "BLOCKED_CELL"    # подозреваемый стоит на блокирующем объекте
    SHARED_LINE = "SHARED_LINE"      # два подозреваемых в одной строке или столбце
    CLUE_MISMATCH = "CLUE_MISMATCH"  # клетка противоречит одной из улик подозреваемого

    def __str__(self):
        return self.value


@dataclass(frozen=True)
class Contradiction:
    kind: ContradictionKind
    suspect_id: str


def find_contradiction(puzzle: Puzzle, placements: PlacementMap) -> Optional[Contradiction]:
    """
    Проверяет (возможно, неполную) расстановку игрока.
    Подозреваемые обходятся в порядке головоломки; возвращается первое найденное противоречие.
    """
    board = puzzle.board
    rows: Set[int] = set()
    cols: Set[int] = set()
    for suspect in puzzle.suspects:
        coord = placements.get(suspect.id)
        if coord is None:
            continue
        if not board.contains(coord) or is_blocked(board, coord):
            return Contradiction(ContradictionKind.BLOCKED_CELL, suspect.id)
        if coord.y in rows or coord.x in cols:
            return Contradiction(ContradictionKind.SHARED_LINE, suspect.id)
        rows.add(coord.y)
        cols.add(coord.x)
        if not all(clue_holds(board, clue, coord) for clue in suspect.clues):
            return Contradiction(ContradictionKind.CLUE_MISMATCH, suspect.id)
    return None
