from __future__ import annotations

import random
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import assert_never

from drunkirk.api.models import (
    ActiveTracked,
    Challenge,
    GameState,
    Player,
    SimpleChallenge,
    TrackedChallenge,
    TurnEntry,
)
from drunkirk.core.formatting import format_challenge
from drunkirk.core.picker import DEFAULT_FAVORITE_BOOST, pick_challenge
from drunkirk.core.scoring import score_for
from drunkirk.core.tracked import advance_round, instantiate_tracked
from drunkirk.fsm import GameFSM


def _now() -> datetime:
    return datetime.now(tz=UTC)


@dataclass(frozen=True, slots=True)
class TurnContext:
    """Everything a turn needs besides the state itself."""

    builtin_challenges: tuple[Challenge, ...]
    rng: random.Random
    favorite_boost: float = DEFAULT_FAVORITE_BOOST


@dataclass(frozen=True, slots=True)
class _Resolution:
    text: str
    quantity: int | None
    points: int
    new_tracked: ActiveTracked | None


def challenge_pool(state: GameState, ctx: TurnContext) -> list[Challenge]:
    return [*ctx.builtin_challenges, *state.custom_challenges]


def _resolve(challenge: Challenge, *, target: Player, started_round: int, rng: random.Random) -> _Resolution:
    if isinstance(challenge, SimpleChallenge):
        formatted = format_challenge(challenge, rng=rng)
        return _Resolution(
            text=formatted.text,
            quantity=formatted.quantity,
            points=score_for(challenge.difficulty, formatted.quantity),
            new_tracked=None,
        )
    if isinstance(challenge, TrackedChallenge):
        outcome = instantiate_tracked(challenge, target=target, started_round=started_round, rng=rng)
        # The drawn round count scores like a quantity but is not recorded as one.
        return _Resolution(
            text=outcome.text,
            quantity=None,
            points=score_for(challenge.difficulty, outcome.rounds),
            new_tracked=outcome.active,
        )
    assert_never(challenge)


def _reset_counters(state: GameState) -> GameState:
    return state.model_copy(
        update={
            "current_player_index": 0,
            "round": 1,
            "turn_in_round": 0,
            "current_turn": None,
            "history": (),
            "scores": {p.id: 0 for p in state.players},
            "active_tracked": (),
        }
    )


def start_game(state: GameState) -> GameState:
    if len(state.players) < 2:
        return state
    return _reset_counters(state)


def reset_game(state: GameState) -> GameState:
    return _reset_counters(state)


def next_turn(state: GameState, ctx: TurnContext) -> GameState:
    if not GameFSM(state).accepts_turns:
        return state

    player = state.players[state.current_player_index]
    picked = pick_challenge(
        challenge_pool(state, ctx),
        state.advanced,
        rng=ctx.rng,
        favorite_boost=ctx.favorite_boost,
    )

    turn_in_round = state.turn_in_round + 1
    finished_round = turn_in_round >= len(state.players)

    # Round-end maintenance runs before this turn's own effect is added.
    tracked = advance_round(state.active_tracked) if finished_round else state.active_tracked

    res = _resolve(picked, target=player, started_round=state.round, rng=ctx.rng)
    if res.new_tracked is not None:
        tracked = (*tracked, res.new_tracked)

    entry = TurnEntry(
        round=state.round,
        turn_in_round=turn_in_round,
        player_id=player.id,
        challenge_id=picked.id,
        challenge_text=res.text,
        difficulty=picked.difficulty,
        categories=picked.categories,
        quantity=res.quantity,
        points_awarded=res.points,
        timestamp=_now(),
    )

    return state.model_copy(
        update={
            "scores": {**state.scores, player.id: state.scores.get(player.id, 0) + res.points},
            "history": (*state.history, entry),
            "current_turn": entry,
            "current_player_index": (state.current_player_index + 1) % len(state.players),
            "turn_in_round": 0 if finished_round else turn_in_round,
            "round": state.round + 1 if finished_round else state.round,
            "active_tracked": tracked,
        }
    )


def skip_turn(state: GameState, ctx: TurnContext) -> GameState:
    """Skip the current player's turn.

    The index moves on first and the fresh challenge is drawn for the player
    who is now up, so there is always a challenge on screen. No points are
    awarded for either player.
    """

    if not GameFSM(state).accepts_turns:
        return state

    player_count = len(state.players)
    turn_in_round = state.turn_in_round + 1
    finished_round = turn_in_round >= player_count
    next_round = state.round + 1 if finished_round else state.round
    next_counter = 0 if finished_round else turn_in_round

    next_index = (state.current_player_index + 1) % player_count
    next_player = state.players[next_index]

    tracked = advance_round(state.active_tracked) if finished_round else state.active_tracked

    picked = pick_challenge(
        challenge_pool(state, ctx),
        state.advanced,
        rng=ctx.rng,
        favorite_boost=ctx.favorite_boost,
    )
    res = _resolve(picked, target=next_player, started_round=next_round, rng=ctx.rng)
    if res.new_tracked is not None:
        tracked = (*tracked, res.new_tracked)

    entry = TurnEntry(
        round=next_round,
        turn_in_round=player_count if next_counter == 0 else next_counter,
        player_id=next_player.id,
        challenge_id=picked.id,
        challenge_text=res.text,
        difficulty=picked.difficulty,
        categories=picked.categories,
        quantity=res.quantity,
        points_awarded=0,
        timestamp=_now(),
        is_skip=True,
    )

    return state.model_copy(
        update={
            "current_player_index": next_index,
            "round": next_round,
            "turn_in_round": next_counter,
            "current_turn": entry,
            "history": (*state.history, entry),
            "active_tracked": tracked,
        }
    )
