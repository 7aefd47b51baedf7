from __future__ import annotations

import pytest

from drunkirk.api.models import GamePhase, GameState, Player
from drunkirk.fsm import GameFSM, phase_event


def _players(n: int) -> tuple[Player, ...]:
    return tuple(Player(id=f"p{i}", name=f"P{i}") for i in range(n))


SETUP = GameState(players=_players(1))
PLAYING = GameState(players=_players(2), total_rounds=2)
DONE = GameState(players=_players(2), total_rounds=2, round=3, turn_in_round=0)


def test_phase_is_derived_from_players_and_counters() -> None:
    assert GameState().phase == GamePhase.setup
    assert SETUP.phase == GamePhase.setup
    assert PLAYING.phase == GamePhase.in_progress
    assert DONE.phase == GamePhase.complete
    # Mid-round on the last round is still in progress.
    assert PLAYING.model_copy(update={"round": 2, "turn_in_round": 1}).phase == GamePhase.in_progress


def test_fsm_starts_in_the_snapshot_phase() -> None:
    assert GameFSM(SETUP).current_state.id == "setup"
    assert GameFSM(PLAYING).current_state.id == "in_progress"
    assert GameFSM(DONE).current_state.id == "complete"


def test_only_in_progress_accepts_turns() -> None:
    assert not GameFSM(SETUP).accepts_turns
    assert GameFSM(PLAYING).accepts_turns
    assert not GameFSM(DONE).accepts_turns


@pytest.mark.parametrize(
    ("before", "after", "event"),
    [
        (SETUP, PLAYING, "players_ready"),
        (PLAYING, SETUP, "players_left"),
        (DONE, SETUP, "players_left"),
        (PLAYING, DONE, "finish"),
        (DONE, PLAYING, "restart"),
        (SETUP, DONE, "players_back"),
    ],
)
def test_phase_event_names_every_phase_change(before: GameState, after: GameState, event: str) -> None:
    assert phase_event(before, after) == event


def test_phase_event_is_none_when_phase_unchanged() -> None:
    assert phase_event(PLAYING, PLAYING.model_copy(update={"turn_in_round": 1})) is None
    assert phase_event(GameState(), SETUP) is None
