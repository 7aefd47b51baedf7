from __future__ import annotations

import random
from dataclasses import dataclass

from drunkirk.api.models import SimpleChallenge


QUANTITY_PLACEHOLDER = "{n}"


@dataclass(frozen=True, slots=True)
class FormattedChallenge:
    text: str
    quantity: int | None


def format_challenge(challenge: SimpleChallenge, *, rng: random.Random) -> FormattedChallenge:
    """Render a simple challenge template.

    Draws the quantity uniformly from the inclusive range and substitutes it
    for the first placeholder. Challenges without a range render verbatim.
    """

    if challenge.quantity is None:
        return FormattedChallenge(text=challenge.text, quantity=None)

    n = rng.randint(challenge.quantity.min, challenge.quantity.max)
    return FormattedChallenge(text=challenge.text.replace(QUANTITY_PLACEHOLDER, str(n), 1), quantity=n)


def format_tracked_text(target_name: str, action: str, rounds: int) -> str:
    unit = "round" if rounds == 1 else "rounds"
    return f"{target_name} has to {action} for {rounds} {unit}."
