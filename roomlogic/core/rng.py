# roomlogic/core/rng.py
from typing import List, Sequence, TypeVar

T = TypeVar("T")

_MASK32 = 0xFFFFFFFF
_FNV_OFFSET = 2166136261
_FNV_PRIME = 16777619


class SeededRng:
    """
    Детерминированный генератор псевдослучайных чисел (FNV-1a + xorshift32).

    В отличие от модуля `random`, поток чисел зависит ТОЛЬКО от строки seed
    и порядка вызовов. Экземпляр принадлежит вызывающему коду и передается явно,
    поэтому несколько генераций могут идти параллельно, не мешая друг другу.
    """

    def __init__(self, seed: str):
        self.seed = seed
        state = _FNV_OFFSET
        for char in seed:
            state ^= ord(char)
            state = (state * _FNV_PRIME) & _MASK32
        # xorshift "залипает" в нуле
        self._state = state or _FNV_OFFSET

    @property
    def state(self) -> int:
        return self._state

    def next(self) -> float:
        """Следующее число в диапазоне [0, 1)."""
        x = self._state
        x ^= (x << 13) & _MASK32
        x ^= x >> 17
        x ^= (x << 5) & _MASK32
        self._state = x
        return x / 4294967296.0

    def next_int(self, lo: int, hi: int) -> int:
        """Равномерное целое из [lo, hi] включительно."""
        if hi < lo:
            raise ValueError(f"Пустой диапазон: [{lo}, {hi}]")
        return lo + int(self.next() * (hi - lo + 1))

    def pick(self, items: Sequence[T]) -> T:
        if not items:
            raise ValueError("Нельзя выбрать элемент из пустой последовательности")
        return items[self.next_int(0, len(items) - 1)]

    def shuffle(self, items: List[T]) -> None:
        """Перемешивание Фишера-Йетса на месте, как random.shuffle."""
        for i in range(len(items) - 1, 0, -1):
            j = self.next_int(0, i)
            items[i], items[j] = items[j], items[i]
