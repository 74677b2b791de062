# clue_types.py

from dataclasses import dataclass
from enum import Enum
from typing import Union

from .enums import ObjectKind


class ClueKind(str, Enum):
    """
    Перечисление всех возможных типов улик.
    Значения совпадают с дискриминатором `kind` в сохраненных снимках.
    """
    IN_ROOM = "InRoom"                        # (room_id) - был в комнате
    ON_OBJECT = "OnObject"                    # (kind) - стоял на объекте
    ADJACENT_TO_OBJECT = "AdjacentToObject"   # (kind) - в соседней клетке с объектом
    NEAR_OBJECT = "NearObject"                # (kind) - рядом или в той же комнате
    IN_FRONT_OF_WINDOW = "InFrontOfWindow"    # (window_id) - перед окном

    def __str__(self):
        return self.value


@dataclass(frozen=True)
class InRoom:
    room_id: int
    kind = ClueKind.IN_ROOM


@dataclass(frozen=True)
class OnObject:
    object_kind: ObjectKind
    kind = ClueKind.ON_OBJECT


@dataclass(frozen=True)
class AdjacentToObject:
    object_kind: ObjectKind
    kind = ClueKind.ADJACENT_TO_OBJECT


@dataclass(frozen=True)
class NearObject:
    object_kind: ObjectKind
    kind = ClueKind.NEAR_OBJECT


@dataclass(frozen=True)
class InFrontOfWindow:
    window_id: str
    kind = ClueKind.IN_FRONT_OF_WINDOW


# Закрытое объединение: любая функция, разбирающая улику, обязана обработать все пять вариантов
Clue = Union[InRoom, OnObject, AdjacentToObject, NearObject, InFrontOfWindow]


def clue_label(clue: Clue) -> str:
    """Короткая служебная запись улики для логов и CLI (не локализованный текст)."""
    match clue:
        case InRoom(room_id=room_id):
            return f"{clue.kind}({room_id})"
        case OnObject(object_kind=obj) | AdjacentToObject(object_kind=obj) | NearObject(object_kind=obj):
            return f"{clue.kind}({obj})"
        case InFrontOfWindow(window_id=window_id):
            return f"{clue.kind}(#{window_id})"
    raise TypeError(f"Неизвестный тип улики: {type(clue).__name__}")
