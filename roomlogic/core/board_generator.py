# roomlogic/core/board_generator.py
"""
Генерация поля: разбиение на комнаты, расстановка объектов и окон.

Порядок обращений к SeededRng фиксирован и является частью контракта:
комнаты -> объекты -> окна. Любое изменение порядка меняет все головоломки
для уже опубликованных seed.
"""
import logging
from dataclasses import dataclass, replace
from typing import Dict, List, Tuple

from .enums import BLOCKING_OBJECTS, OCCUPIABLE_OBJECTS, Direction, ObjectKind
from .rng import SeededRng
from .types import Board, Coord, WindowSegment

log = logging.getLogger(__name__)

MIN_ROOM_AREA = 3


@dataclass(frozen=True)
class RoomRect:
    id: int
    x: int
    y: int
    w: int
    h: int

    @property
    def area(self) -> int:
        return self.w * self.h


def _split_options(room: RoomRect) -> Tuple[List[int], List[int]]:
    """Допустимые позиции разреза (горизонтальные, вертикальные): обе части не меньше MIN_ROOM_AREA."""
    horizontal = [s for s in range(1, room.h) if s * room.w >= MIN_ROOM_AREA and (room.h - s) * room.w >= MIN_ROOM_AREA]
    vertical = [s for s in range(1, room.w) if s * room.h >= MIN_ROOM_AREA and (room.w - s) * room.h >= MIN_ROOM_AREA]
    return horizontal, vertical


def split_room(room: RoomRect, new_id: int, rng: SeededRng) -> Tuple[RoomRect, RoomRect]:
    """
    Делит комнату по одной оси. Если подходят обе оси, ось выбирается
    вызовом rng.next() (> 0.5 - горизонтально), затем rng.pick выбирает позицию разреза.
    """
    horizontal, vertical = _split_options(room)
    if not horizontal and not vertical:
        raise ValueError(f"Комнату {room} нельзя разделить")
    split_horizontally = bool(horizontal) and (not vertical or rng.next() > 0.5)
    if split_horizontally:
        cut = rng.pick(horizontal)
        return replace(room, h=cut), RoomRect(new_id, room.x, room.y + cut, room.w, room.h - cut)
    cut = rng.pick(vertical)
    return replace(room, w=cut), RoomRect(new_id, room.x + cut, room.y, room.w - cut, room.h)


def generate_rooms(width: int, height: int, count: int, rng: SeededRng) -> Tuple[Tuple[int, ...], ...]:
    """
    Рекурсивное разбиение пространства через явный список областей.
    Останавливается при достижении `count` комнат или когда делить больше нечего.
    """
    rooms: List[RoomRect] = [RoomRect(0, 0, 0, width, height)]
    while len(rooms) < count:
        splittable = [i for i, room in enumerate(rooms) if any(_split_options(room))]
        if not splittable:
            log.debug("Больше нет делимых комнат: %d из %d", len(rooms), count)
            break
        index = rng.pick(splittable)
        first, second = split_room(rooms[index], len(rooms), rng)
        rooms[index:index + 1] = [first, second]

    grid = [[0] * width for _ in range(height)]
    for room in rooms:
        for y in range(room.y, room.y + room.h):
            for x in range(room.x, room.x + room.w):
                grid[y][x] = room.id
    return tuple(tuple(row) for row in grid)


def place_objects(width: int, height: int, blocking: int, occupiable: int, rng: SeededRng) -> Dict[Coord, ObjectKind]:
    """Первые `blocking` клеток перемешанного списка - блокирующие объекты, следующие `occupiable` - занимаемые."""
    cells = [Coord(x, y) for y in range(height) for x in range(width)]
    rng.shuffle(cells)
    objects: Dict[Coord, ObjectKind] = {}
    index = 0
    for _ in range(min(blocking, len(cells))):
        objects[cells[index]] = rng.pick(BLOCKING_OBJECTS)
        index += 1
    for _ in range(min(occupiable, len(cells) - index)):
        objects[cells[index]] = rng.pick(OCCUPIABLE_OBJECTS)
        index += 1
    return objects


def list_window_segments(width: int, height: int, rooms: Tuple[Tuple[int, ...], ...]) -> List[WindowSegment]:
    """Все места, где может быть окно: стороны граничных клеток и стыки разных комнат."""
    segments: List[WindowSegment] = []
    for y in range(height):
        for x in range(width):
            coord = Coord(x, y)
            if y == 0:
                segments.append(WindowSegment("", coord, direction=Direction.N))
            if y == height - 1:
                segments.append(WindowSegment("", coord, direction=Direction.S))
            if x == 0:
                segments.append(WindowSegment("", coord, direction=Direction.W))
            if x == width - 1:
                segments.append(WindowSegment("", coord, direction=Direction.E))
            if x < width - 1 and rooms[y][x] != rooms[y][x + 1]:
                segments.append(WindowSegment("", coord, Coord(x + 1, y), Direction.E))
            if y < height - 1 and rooms[y][x] != rooms[y + 1][x]:
                segments.append(WindowSegment("", coord, Coord(x, y + 1), Direction.S))
    return segments


def place_windows(width: int, height: int, rooms: Tuple[Tuple[int, ...], ...], count: int, rng: SeededRng) -> Tuple[WindowSegment, ...]:
    segments = list_window_segments(width, height, rooms)
    rng.shuffle(segments)
    return tuple(replace(segment, id=str(i + 1)) for i, segment in enumerate(segments[:count]))


def generate_board(width: int, height: int, room_count: int, blocking: int, occupiable: int,
                   window_count: int, rng: SeededRng) -> Board:
    rooms = generate_rooms(width, height, room_count, rng)
    objects = place_objects(width, height, blocking, occupiable, rng)
    windows = place_windows(width, height, rooms, window_count, rng)
    return Board(width=width, height=height, rooms=rooms, objects=objects, windows=windows)
