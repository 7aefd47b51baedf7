from __future__ import annotations

from drunkirk.api.models import Difficulty


DIFFICULTY_MULTIPLIERS: dict[Difficulty, int] = {
    Difficulty.easy: 1,
    Difficulty.normal: 2,
    Difficulty.hard: 3,
    Difficulty.brutal: 4,
}


def difficulty_multiplier(difficulty: Difficulty) -> int:
    return DIFFICULTY_MULTIPLIERS[difficulty]


def score_for(difficulty: Difficulty, quantity: int | None) -> int:
    """Points for a resolved challenge.

    A missing quantity counts as 1. Tracked challenges pass their drawn round count.
    """

    base = 1 if quantity is None else quantity
    return base * difficulty_multiplier(difficulty)
