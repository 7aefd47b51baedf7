from __future__ import annotations

import random
from dataclasses import dataclass
from uuid import uuid4

from drunkirk.api.models import ActiveTracked, Player, TrackedChallenge
from drunkirk.core.formatting import format_tracked_text


@dataclass(frozen=True, slots=True)
class TrackedOutcome:
    active: ActiveTracked
    text: str
    rounds: int


def instantiate_tracked(
    challenge: TrackedChallenge,
    *,
    target: Player,
    started_round: int,
    rng: random.Random,
) -> TrackedOutcome:
    rounds = rng.randint(challenge.rounds.min, challenge.rounds.max)
    active = ActiveTracked(
        id=uuid4().hex,
        challenge_id=challenge.id,
        target_player_id=target.id,
        action=challenge.action,
        remaining_rounds=rounds,
        started_round=started_round,
        difficulty=challenge.difficulty,
    )
    return TrackedOutcome(active=active, text=format_tracked_text(target.name, challenge.action, rounds), rounds=rounds)


def advance_round(active: tuple[ActiveTracked, ...]) -> tuple[ActiveTracked, ...]:
    """Round-end maintenance: tick every effect down once and expire the finished ones."""

    return tuple(
        a.model_copy(update={"remaining_rounds": a.remaining_rounds - 1})
        for a in active
        if a.remaining_rounds > 1
    )


def drop_for_player(active: tuple[ActiveTracked, ...], player_id: str) -> tuple[ActiveTracked, ...]:
    return tuple(a for a in active if a.target_player_id != player_id)
