"""
Общие типы для проекта roomlogic.
Централизованное определение модели данных: поле, комнаты, объекты, окна,
подозреваемые, головоломка и решение.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, List, Mapping, NamedTuple, Optional, Tuple

from .clue_types import Clue
from .enums import Difficulty, Direction, ObjectKind


# ============================================================================
# Координаты
# ============================================================================

class Coord(NamedTuple):
    """Клетка поля: x - столбец, y - строка (обе с нуля)."""
    x: int
    y: int

    def key(self) -> str:
        """Строковый ключ для сохранения: 'x,y'."""
        return f"{self.x},{self.y}"

    @classmethod
    def from_key(cls, key: str) -> "Coord":
        x, y = key.split(",")
        return cls(int(x), int(y))


PlacementMap = Dict[str, Coord]


# ============================================================================
# Поле
# ============================================================================

@dataclass(frozen=True)
class WindowSegment:
    """
    Окно. Внешнее окно лежит на границе поля и касается одной клетки `a`.
    Внутреннее окно лежит между двумя клетками разных комнат: `a` и `b`.
    """
    id: str
    a: Coord
    b: Optional[Coord] = None
    direction: Optional[Direction] = None

    @property
    def is_interior(self) -> bool:
        return self.b is not None

    def cells(self) -> List[Coord]:
        return [self.a] if self.b is None else [self.a, self.b]


@dataclass(frozen=True)
class Board:
    """
    Прямоугольное поле. `rooms[y][x]` - номер комнаты клетки,
    `objects` - частичное отображение клетки в объект (только чтение).
    После генерации не изменяется.
    """
    width: int
    height: int
    rooms: Tuple[Tuple[int, ...], ...]
    objects: Mapping[Coord, ObjectKind] = field(default_factory=dict, hash=False)
    windows: Tuple[WindowSegment, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "rooms", tuple(tuple(row) for row in self.rooms))
        object.__setattr__(self, "objects", MappingProxyType(dict(self.objects)))
        object.__setattr__(self, "windows", tuple(self.windows))

    def __reduce__(self):
        # mappingproxy не копируется и не сериализуется напрямую
        return self.__class__, (self.width, self.height, self.rooms, dict(self.objects), self.windows)

    def contains(self, coord: Coord) -> bool:
        return 0 <= coord.x < self.width and 0 <= coord.y < self.height

    def index(self, coord: Coord) -> int:
        """Упакованный индекс клетки (построчный порядок)."""
        return coord.y * self.width + coord.x

    def coord_at(self, index: int) -> Coord:
        return Coord(index % self.width, index // self.width)

    def all_coords(self) -> List[Coord]:
        return [Coord(x, y) for y in range(self.height) for x in range(self.width)]

    @property
    def room_ids(self) -> List[int]:
        return sorted({room for row in self.rooms for room in row})

    def window(self, window_id: str) -> Optional[WindowSegment]:
        return next((w for w in self.windows if w.id == window_id), None)


# ============================================================================
# Головоломка и решение
# ============================================================================

@dataclass(frozen=True)
class Suspect:
    id: str
    name: str
    clues: Tuple[Clue, ...] = ()


@dataclass(frozen=True)
class Puzzle:
    seed: str
    difficulty: Difficulty
    board: Board
    suspects: Tuple[Suspect, ...]

    def suspect(self, suspect_id: str) -> Optional[Suspect]:
        return next((s for s in self.suspects if s.id == suspect_id), None)


@dataclass(frozen=True)
class Solution:
    placements: PlacementMap
    victim: Coord
    assassin_id: str


@dataclass
class SolverResult:
    """Результат решателя: 0..max_solutions решений и, возможно, подсказка."""
    solutions: List[Solution] = field(default_factory=list)
    hint: Optional[str] = None

    @property
    def is_unique(self) -> bool:
        return len(self.solutions) == 1
