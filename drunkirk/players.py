from __future__ import annotations

from uuid import uuid4

from drunkirk.api.models import GameState, Player
from drunkirk.core.tracked import drop_for_player


def normalize_name(name: str) -> str:
    """Trim and collapse internal whitespace."""

    return " ".join(name.split())


def add_player(state: GameState, name: str) -> GameState:
    clean = normalize_name(name)
    if not clean:
        return state

    key = clean.casefold()
    if any(p.name.casefold() == key for p in state.players):
        return state

    player = Player(id=uuid4().hex, name=clean)
    return state.model_copy(
        update={
            "players": (*state.players, player),
            "scores": {**state.scores, player.id: 0},
            "current_player_index": 0 if not state.players else state.current_player_index,
        }
    )


def remove_player(state: GameState, player_id: str) -> GameState:
    if state.player_by_id(player_id) is None:
        return state

    players = tuple(p for p in state.players if p.id != player_id)
    scores = {pid: s for pid, s in state.scores.items() if pid != player_id}
    index = 0 if not players else min(state.current_player_index, len(players) - 1)

    return state.model_copy(
        update={
            "players": players,
            "scores": scores,
            "current_player_index": index,
            "active_tracked": drop_for_player(state.active_tracked, player_id),
        }
    )


def set_total_rounds(state: GameState, total_rounds: int) -> GameState:
    return state.model_copy(update={"total_rounds": max(1, int(total_rounds))})
