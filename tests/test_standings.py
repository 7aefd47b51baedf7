from __future__ import annotations

from drunkirk.api.models import GameState, Player
from drunkirk.core.standings import standings, winner_label, winners


PLAYERS = (Player(id="a", name="Alice"), Player(id="b", name="Bob"), Player(id="c", name="Cara"))


def test_standings_sort_by_score_and_keep_turn_order_on_ties() -> None:
    state = GameState(players=PLAYERS, scores={"a": 2, "b": 5, "c": 2})

    assert [(r.name, r.score) for r in standings(state)] == [("Bob", 5), ("Alice", 2), ("Cara", 2)]
    assert winner_label(state) == "Bob"


def test_tied_leaders_are_all_named() -> None:
    state = GameState(players=PLAYERS, scores={"a": 4, "b": 1, "c": 4})

    assert [r.player_id for r in winners(state)] == ["a", "c"]
    assert winner_label(state) == "Tie: Alice, Cara"


def test_no_players_no_winner() -> None:
    assert standings(GameState()) == []
    assert winner_label(GameState()) == ""


def test_missing_score_counts_as_zero() -> None:
    state = GameState(players=PLAYERS[:2], scores={"a": 1})
    assert [r.score for r in standings(state)] == [1, 0]
