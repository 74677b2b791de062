# roomlogic/core/snapshot.py
"""
Кодек для обмена с внешним хранилищем: снимок головоломки и запись прогресса
{seed, difficulty, placements}. Формат - обычный JSON-совместимый словарь.
Поврежденные данные трактуются как отсутствие данных (None), а не как ошибка.
"""
import json
import logging
from typing import Any, Dict, List, Mapping, Optional, Union

from pydantic import BaseModel, model_validator

from .clue_types import AdjacentToObject, Clue, ClueKind, InFrontOfWindow, InRoom, NearObject, OnObject
from .enums import Difficulty, Direction, ObjectKind
from .types import Board, Coord, PlacementMap, Puzzle, Suspect, WindowSegment

log = logging.getLogger(__name__)

RawData = Union[str, bytes, Mapping[str, Any]]


class CoordModel(BaseModel):
    x: int
    y: int


class WindowModel(BaseModel):
    id: str
    a: CoordModel
    b: Optional[CoordModel] = None
    dir: Optional[Direction] = None


class ClueModel(BaseModel):
    kind: ClueKind
    room_id: Optional[int] = None
    object_kind: Optional[ObjectKind] = None
    window_id: Optional[str] = None

    @model_validator(mode="after")
    def check_payload(self):
        required = {
            ClueKind.IN_ROOM: self.room_id,
            ClueKind.ON_OBJECT: self.object_kind,
            ClueKind.ADJACENT_TO_OBJECT: self.object_kind,
            ClueKind.NEAR_OBJECT: self.object_kind,
            ClueKind.IN_FRONT_OF_WINDOW: self.window_id,
        }[self.kind]
        if required is None:
            raise ValueError(f"Улика {self.kind} без параметра")
        return self


class SuspectModel(BaseModel):
    id: str
    name: str
    clues: List[ClueModel] = []


class BoardModel(BaseModel):
    width: int
    height: int
    rooms: List[List[int]]
    objects: Dict[str, ObjectKind] = {}
    windows: List[WindowModel] = []

    @model_validator(mode="after")
    def check_shape(self):
        if self.width < 1 or self.height < 1:
            raise ValueError("Размеры поля должны быть положительными")
        if len(self.rooms) != self.height or any(len(row) != self.width for row in self.rooms):
            raise ValueError("Карта комнат не совпадает с размерами поля")
        for key in self.objects:
            x, y = (int(part) for part in key.split(","))
            if not (0 <= x < self.width and 0 <= y < self.height):
                raise ValueError(f"Объект вне поля: {key}")
        return self


class PuzzleSnapshot(BaseModel):
    seed: str
    difficulty: Difficulty
    board: BoardModel
    suspects: List[SuspectModel]


class ProgressRecord(BaseModel):
    seed: str
    difficulty: Difficulty
    placements: Dict[str, CoordModel] = {}

    def placement_map(self) -> PlacementMap:
        return {suspect_id: Coord(c.x, c.y) for suspect_id, c in self.placements.items()}

    @classmethod
    def from_placements(cls, seed: str, difficulty: Difficulty, placements: PlacementMap) -> "ProgressRecord":
        return cls(seed=seed, difficulty=difficulty,
                   placements={sid: CoordModel(x=c.x, y=c.y) for sid, c in placements.items()})


# --- Преобразования улик ---

def _clue_to_model(clue: Clue) -> ClueModel:
    match clue:
        case InRoom(room_id=room_id):
            return ClueModel(kind=clue.kind, room_id=room_id)
        case OnObject(object_kind=obj) | AdjacentToObject(object_kind=obj) | NearObject(object_kind=obj):
            return ClueModel(kind=clue.kind, object_kind=obj)
        case InFrontOfWindow(window_id=window_id):
            return ClueModel(kind=clue.kind, window_id=window_id)
    raise TypeError(f"Неизвестный тип улики: {type(clue).__name__}")


def _clue_from_model(model: ClueModel) -> Clue:
    match model.kind:
        case ClueKind.IN_ROOM:
            return InRoom(model.room_id)
        case ClueKind.ON_OBJECT:
            return OnObject(model.object_kind)
        case ClueKind.ADJACENT_TO_OBJECT:
            return AdjacentToObject(model.object_kind)
        case ClueKind.NEAR_OBJECT:
            return NearObject(model.object_kind)
        case ClueKind.IN_FRONT_OF_WINDOW:
            return InFrontOfWindow(model.window_id)
    raise ValueError(f"Неизвестный тип улики: {model.kind}")


# --- Головоломка ---

def puzzle_to_dict(puzzle: Puzzle) -> Dict[str, Any]:
    board = puzzle.board
    snapshot = PuzzleSnapshot(
        seed=puzzle.seed,
        difficulty=puzzle.difficulty,
        board=BoardModel(
            width=board.width,
            height=board.height,
            rooms=[list(row) for row in board.rooms],
            objects={coord.key(): kind for coord, kind in sorted(board.objects.items(), key=lambda kv: board.index(kv[0]))},
            windows=[
                WindowModel(id=w.id, a=CoordModel(x=w.a.x, y=w.a.y),
                            b=CoordModel(x=w.b.x, y=w.b.y) if w.b else None, dir=w.direction)
                for w in board.windows
            ],
        ),
        suspects=[
            SuspectModel(id=s.id, name=s.name, clues=[_clue_to_model(c) for c in s.clues])
            for s in puzzle.suspects
        ],
    )
    return snapshot.model_dump(mode="json")


def puzzle_from_dict(data: Mapping[str, Any]) -> Puzzle:
    """Строгая загрузка: бросает ValueError (в т.ч. pydantic.ValidationError) на плохих данных."""
    snapshot = PuzzleSnapshot.model_validate(data)
    b = snapshot.board
    board = Board(
        width=b.width,
        height=b.height,
        rooms=tuple(tuple(row) for row in b.rooms),
        objects={Coord.from_key(key): kind for key, kind in b.objects.items()},
        windows=tuple(
            WindowSegment(w.id, Coord(w.a.x, w.a.y), Coord(w.b.x, w.b.y) if w.b else None, w.dir)
            for w in b.windows
        ),
    )
    suspects = tuple(
        Suspect(id=s.id, name=s.name, clues=tuple(_clue_from_model(c) for c in s.clues))
        for s in snapshot.suspects
    )
    return Puzzle(seed=snapshot.seed, difficulty=snapshot.difficulty, board=board, suspects=suspects)


def dump_puzzle(puzzle: Puzzle) -> str:
    return json.dumps(puzzle_to_dict(puzzle), ensure_ascii=False)


def load_puzzle(raw: Optional[RawData]) -> Optional[Puzzle]:
    """Мягкая загрузка снимка: None, если данных нет или они повреждены."""
    data = _decode(raw)
    if data is None:
        return None
    try:
        return puzzle_from_dict(data)
    except (ValueError, TypeError) as e:
        log.warning("Снимок головоломки поврежден, игнорируем: %s", e)
        return None


# --- Прогресс ---

def dump_progress(record: ProgressRecord) -> str:
    return record.model_dump_json()


def load_progress(raw: Optional[RawData]) -> Optional[ProgressRecord]:
    data = _decode(raw)
    if data is None:
        return None
    try:
        return ProgressRecord.model_validate(data)
    except ValueError as e:
        log.warning("Запись прогресса повреждена, игнорируем: %s", e)
        return None


def _decode(raw: Optional[RawData]) -> Optional[Mapping[str, Any]]:
    if raw is None or raw == "" or raw == b"":
        return None
    if isinstance(raw, (str, bytes)):
        try:
            raw = json.loads(raw)
        except ValueError as e:
            log.warning("Не удалось декодировать JSON: %s", e)
            return None
    if not isinstance(raw, Mapping):
        log.warning("Ожидался JSON-объект, получено %s", type(raw).__name__)
        return None
    return raw
