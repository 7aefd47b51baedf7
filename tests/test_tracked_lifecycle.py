from __future__ import annotations

import random

from drunkirk.api.models import ActiveTracked, Player, TrackedChallenge
from drunkirk.core.tracked import advance_round, drop_for_player, instantiate_tracked


ALICE = Player(id="p1", name="Alice")
BOB = Player(id="p2", name="Bob")


def _active(id: str, target: str, remaining: int) -> ActiveTracked:
    return ActiveTracked(
        id=id,
        challenge_id="no_names",
        target_player_id=target,
        action="not say names",
        remaining_rounds=remaining,
        started_round=1,
        difficulty="normal",
    )


def test_instantiate_draws_rounds_and_renders_text() -> None:
    ch = TrackedChallenge(id="no_names", action="not say names", difficulty="normal", rounds={"min": 2, "max": 4})
    out = instantiate_tracked(ch, target=ALICE, started_round=3, rng=random.Random(9))

    assert 2 <= out.rounds <= 4
    assert out.active.remaining_rounds == out.rounds
    assert out.active.target_player_id == "p1"
    assert out.active.started_round == 3
    assert out.active.challenge_id == "no_names"
    assert out.text == f"Alice has to not say names for {out.rounds} rounds."


def test_instantiate_single_round_uses_singular() -> None:
    ch = TrackedChallenge(id="silent", action="stay silent", difficulty="brutal", rounds={"min": 1, "max": 1})
    out = instantiate_tracked(ch, target=BOB, started_round=1, rng=random.Random(0))
    assert out.text == "Bob has to stay silent for 1 round."


def test_instances_get_unique_ids() -> None:
    ch = TrackedChallenge(id="silent", action="stay silent", difficulty="brutal", rounds={"min": 1, "max": 1})
    rng = random.Random(0)
    ids = {instantiate_tracked(ch, target=BOB, started_round=1, rng=rng).active.id for _ in range(20)}
    assert len(ids) == 20


def test_advance_round_decrements_and_expires() -> None:
    active = (_active("a", "p1", 1), _active("b", "p2", 3))

    after = advance_round(active)

    assert [(a.id, a.remaining_rounds) for a in after] == [("b", 2)]
    # Inputs are untouched.
    assert active[1].remaining_rounds == 3


def test_drop_for_player_ignores_remaining_rounds() -> None:
    active = (_active("a", "p1", 5), _active("b", "p2", 1), _active("c", "p1", 1))
    assert [a.id for a in drop_for_player(active, "p1")] == ["b"]
    assert drop_for_player(active, "p9") == active
