# roomlogic/core/geometry.py
"""
Чистые геометрические функции над полем: соседство, комнаты, объекты,
кандидаты для улик, клетка жертвы и убийца.
Ни одна функция не изменяет поле или расстановку.
"""
from typing import Dict, Iterable, List, Optional, Set

from .clue_types import AdjacentToObject, Clue, InFrontOfWindow, InRoom, NearObject, OnObject
from .enums import ObjectKind
from .types import Board, Coord, PlacementMap, Solution


def adjacent_coords(board: Board, coord: Coord) -> List[Coord]:
    """Ортогональные соседи (слева, справа, сверху, снизу) в пределах поля."""
    candidates = [
        Coord(coord.x - 1, coord.y),
        Coord(coord.x + 1, coord.y),
        Coord(coord.x, coord.y - 1),
        Coord(coord.x, coord.y + 1),
    ]
    return [c for c in candidates if board.contains(c)]


def room_at(board: Board, coord: Coord) -> Optional[int]:
    if not board.contains(coord):
        return None
    return board.rooms[coord.y][coord.x]


def object_at(board: Board, coord: Coord) -> Optional[ObjectKind]:
    return board.objects.get(coord)


def is_blocked(board: Board, coord: Coord) -> bool:
    obj = object_at(board, coord)
    return obj is not None and obj.is_blocking


def cells_in_room(board: Board, room_id: int) -> List[Coord]:
    return [c for c in board.all_coords() if board.rooms[c.y][c.x] == room_id]


def cells_with_object(board: Board, kind: ObjectKind) -> List[Coord]:
    return [c for c in board.all_coords() if board.objects.get(c) == kind]


def cells_adjacent_to_object(board: Board, kind: ObjectKind) -> List[Coord]:
    matches: Set[Coord] = set()
    for coord in cells_with_object(board, kind):
        matches.update(adjacent_coords(board, coord))
    return _row_major(board, matches)


def cells_near_object(board: Board, kind: ObjectKind) -> List[Coord]:
    """Соседние клетки + все клетки любой комнаты, где есть такой объект."""
    matches: Set[Coord] = set(cells_adjacent_to_object(board, kind))
    rooms_with_object = {board.rooms[c.y][c.x] for c in cells_with_object(board, kind)}
    matches.update(c for c in board.all_coords() if board.rooms[c.y][c.x] in rooms_with_object)
    return _row_major(board, matches)


def window_touches(board: Board, window_id: str, coord: Coord) -> bool:
    window = board.window(window_id)
    return window is not None and coord in window.cells()


def candidate_cells(board: Board, clue: Clue) -> List[Coord]:
    """Все клетки поля, в которых улика истинна."""
    match clue:
        case InRoom(room_id=room_id):
            return cells_in_room(board, room_id)
        case OnObject(object_kind=kind):
            return cells_with_object(board, kind)
        case AdjacentToObject(object_kind=kind):
            return cells_adjacent_to_object(board, kind)
        case NearObject(object_kind=kind):
            return cells_near_object(board, kind)
        case InFrontOfWindow(window_id=window_id):
            window = board.window(window_id)
            return window.cells() if window else []
    raise TypeError(f"Неизвестный тип улики: {type(clue).__name__}")


def clue_holds(board: Board, clue: Clue, coord: Coord) -> bool:
    return coord in candidate_cells(board, clue)


def victim_cell(board: Board, placements: PlacementMap) -> Optional[Coord]:
    """
    Единственная свободная незаблокированная клетка, не делящая строку и столбец
    ни с одним подозреваемым. None, если таких клеток нет или больше одной.
    """
    occupied = set(placements.values())
    rows = {c.y for c in occupied}
    cols = {c.x for c in occupied}
    remaining = [
        c for c in board.all_coords()
        if c not in occupied and c.y not in rows and c.x not in cols and not is_blocked(board, c)
    ]
    if len(remaining) != 1:
        return None
    return remaining[0]


def assassin_id(board: Board, placements: PlacementMap, victim: Coord) -> str:
    """
    Подозреваемый из той же комнаты, что и жертва.
    При нескольких совпадениях побеждает наименьший id (по возрастанию),
    при отсутствии - пустая строка.
    """
    victim_room = room_at(board, victim)
    if victim_room is None:
        return ""
    for suspect_id in sorted(placements):
        if room_at(board, placements[suspect_id]) == victim_room:
            return suspect_id
    return ""


def placement_valid(board: Board, placements: PlacementMap) -> bool:
    rows: Set[int] = set()
    cols: Set[int] = set()
    for coord in placements.values():
        if not board.contains(coord) or is_blocked(board, coord):
            return False
        if coord.y in rows or coord.x in cols:
            return False
        rows.add(coord.y)
        cols.add(coord.x)
    return True


def solution_from_placements(board: Board, placements: PlacementMap) -> Optional[Solution]:
    """Полная расстановка -> решение (жертва + убийца), либо None."""
    if not placement_valid(board, placements):
        return None
    victim = victim_cell(board, placements)
    if victim is None:
        return None
    assassin = assassin_id(board, placements, victim)
    if not assassin:
        return None
    return Solution(placements=dict(placements), victim=victim, assassin_id=assassin)


def _row_major(board: Board, coords: Iterable[Coord]) -> List[Coord]:
    return sorted(coords, key=board.index)


def true_clues_at(board: Board, coord: Coord) -> List[Clue]:
    """
    Все улики, истинные для клетки, без повторов, в порядке первого появления:
    комната, объект под ногами, соседние объекты, объекты комнаты, окна.
    """
    clues: Dict[Clue, None] = {}
    room_id = room_at(board, coord)
    if room_id is not None:
        clues[InRoom(room_id)] = None
    obj = object_at(board, coord)
    if obj is not None:
        clues[OnObject(obj)] = None
    neighbour_kinds: Dict[ObjectKind, None] = {}
    for adjacent in adjacent_coords(board, coord):
        adjacent_obj = object_at(board, adjacent)
        if adjacent_obj is not None:
            neighbour_kinds[adjacent_obj] = None
    for kind in neighbour_kinds:
        clues[AdjacentToObject(kind)] = None
        clues[NearObject(kind)] = None
    for cell in cells_in_room(board, room_id) if room_id is not None else []:
        room_obj = object_at(board, cell)
        if room_obj is not None:
            clues[NearObject(room_obj)] = None
    for window in board.windows:
        if coord in window.cells():
            clues[InFrontOfWindow(window.id)] = None
    return list(clues)
