# roomlogic/core/enums.py
from enum import Enum


class Difficulty(str, Enum):
    """
    Уровень сложности генерируемой головоломки.
    От него зависят размер поля, число подозреваемых, комнат, объектов и улик.
    """
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"

    def __str__(self):
        return self.value

    @classmethod
    def parse(cls, value) -> "Difficulty":
        """Принимает как сам Enum, так и строку ('easy', 'Medium', ...)."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValueError(f"Неизвестная сложность '{value}'. Допустимо: {[d.value for d in cls]}") from None


class ObjectKind(str, Enum):
    """Типы объектов на поле. Часть из них блокирует клетку, часть - нет."""
    # --- Можно занять (подозреваемый может стоять на объекте) ---
    ARMCHAIR = "Armchair"
    RUG = "Rug"
    BED = "Bed"

    # --- Блокирующие ---
    TABLE = "Table"
    TV = "TV"
    PLANT = "Plant"
    SHELF = "Shelf"
    BOX = "Box"

    def __str__(self):
        return self.value

    @property
    def is_blocking(self) -> bool:
        return self in BLOCKING_OBJECTS


class Direction(str, Enum):
    """Сторона клетки, на которую выходит окно."""
    N = "N"
    S = "S"
    E = "E"
    W = "W"

    def __str__(self):
        return self.value


# Порядок важен: генератор выбирает из этих списков через SeededRng.pick
OCCUPIABLE_OBJECTS = (ObjectKind.ARMCHAIR, ObjectKind.RUG, ObjectKind.BED)
BLOCKING_OBJECTS = (ObjectKind.TABLE, ObjectKind.TV, ObjectKind.PLANT, ObjectKind.SHELF, ObjectKind.BOX)
