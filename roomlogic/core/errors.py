class PuzzleError(Exception):
    """Базовое исключение для ошибок движка головоломок"""
    pass


class GenerationExhausted(PuzzleError):
    """Исчерпан лимит попыток: уникальную головоломку построить не удалось"""

    def __init__(self, seed: str, difficulty, attempts: int):
        self.seed = seed
        self.difficulty = difficulty
        self.attempts = attempts
        super().__init__(
            f"Не удалось сгенерировать уникальную головоломку за {attempts} попыток "
            f"(seed='{seed}', сложность={difficulty})"
        )
