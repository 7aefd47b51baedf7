from __future__ import annotations

import random
from collections.abc import Sequence
from typing import TypeVar


T = TypeVar("T")


class InvalidInputError(ValueError):
    """Raised when the selector is handed an empty or mismatched population."""


def weighted_pick(items: Sequence[T], weights: Sequence[float], *, rng: random.Random) -> T:
    """Draw one item with probability proportional to its weight.

    Negative weights count as 0. If every weight is 0 the draw is uniform so
    selection never gets stuck.

    A zero-weight item is never returned while some weight is positive, even
    when the draw lands exactly on 0.
    """

    if not items:
        raise InvalidInputError("weighted_pick: empty items")
    if len(weights) != len(items):
        raise InvalidInputError(f"weighted_pick: size mismatch ({len(items)} items, {len(weights)} weights)")

    clamped = [max(0.0, float(w)) for w in weights]
    total = sum(clamped)

    if total <= 0:
        return items[rng.randrange(len(items))]

    r = rng.random() * total
    acc = 0.0
    for item, w in zip(items, clamped):
        acc += w
        if w > 0 and r <= acc:
            return item

    # Only reachable through floating point rounding.
    return items[-1]
