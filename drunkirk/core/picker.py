from __future__ import annotations

import random
from collections.abc import Sequence

from drunkirk.api.models import AdvancedSettings, Challenge, Difficulty
from drunkirk.core.weighted import InvalidInputError, weighted_pick


DEFAULT_FAVORITE_BOOST = 2.0

# Easy outcomes are the most common, brutal ones are rare.
DIFFICULTY_BASE_WEIGHTS: dict[Difficulty, float] = {
    Difficulty.easy: 8.0,
    Difficulty.normal: 5.0,
    Difficulty.hard: 2.0,
    Difficulty.brutal: 0.75,
}


def difficulty_base_weight(difficulty: Difficulty) -> float:
    return DIFFICULTY_BASE_WEIGHTS[difficulty]


def eligible_pool(pool: Sequence[Challenge], advanced: AdvancedSettings) -> list[Challenge]:
    """Apply disabled-challenge and category filters.

    Never returns an empty list for a non-empty pool: if the category filter
    removes everything we fall back to the enabled challenges, and if those
    are empty too, to the whole pool.
    """

    enabled_only = [c for c in pool if not advanced.is_disabled(c.id)]

    category_filtered = [
        c
        for c in enabled_only
        if not c.categories or any(advanced.is_category_enabled(cat) for cat in c.categories)
    ]

    if category_filtered:
        return category_filtered
    if enabled_only:
        return enabled_only
    return list(pool)


def challenge_weight(
    challenge: Challenge,
    advanced: AdvancedSettings,
    *,
    favorite_boost: float = DEFAULT_FAVORITE_BOOST,
) -> float:
    base = difficulty_base_weight(challenge.difficulty)
    fav = favorite_boost if advanced.is_favorite(challenge.id) else 1.0
    custom = challenge.weight if challenge.weight is not None else 1.0
    return base * fav * custom


def pick_challenge(
    pool: Sequence[Challenge],
    advanced: AdvancedSettings,
    *,
    rng: random.Random,
    favorite_boost: float = DEFAULT_FAVORITE_BOOST,
) -> Challenge:
    if not pool:
        raise InvalidInputError("pick_challenge: empty challenge pool")

    candidates = eligible_pool(pool, advanced)
    weights = [challenge_weight(c, advanced, favorite_boost=favorite_boost) for c in candidates]
    return weighted_pick(candidates, weights, rng=rng)
