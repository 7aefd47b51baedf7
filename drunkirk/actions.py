from __future__ import annotations

from typing import Annotated, Literal, assert_never

from pydantic import BaseModel, ConfigDict, Field

from drunkirk import advanced_settings, players
from drunkirk.api.models import (
    DEFAULT_TOTAL_ROUNDS,
    AdvancedSettings,
    Difficulty,
    GameState,
    Player,
    SimpleChallenge,
)
from drunkirk.turn_processing.turns import TurnContext, next_turn, reset_game, skip_turn, start_game


class _Action(BaseModel):
    model_config = ConfigDict(frozen=True)


class AddPlayer(_Action):
    type: Literal["add_player"] = "add_player"
    name: str


class RemovePlayer(_Action):
    type: Literal["remove_player"] = "remove_player"
    player_id: str


class SetTotalRounds(_Action):
    type: Literal["set_total_rounds"] = "set_total_rounds"
    total_rounds: int


class StartGame(_Action):
    type: Literal["start_game"] = "start_game"


class NextTurn(_Action):
    type: Literal["next_turn"] = "next_turn"


class SkipTurn(_Action):
    type: Literal["skip_turn"] = "skip_turn"


class ResetGame(_Action):
    type: Literal["reset_game"] = "reset_game"


class ToggleCategory(_Action):
    type: Literal["toggle_category"] = "toggle_category"
    category: str


class ToggleFavorite(_Action):
    type: Literal["toggle_favorite"] = "toggle_favorite"
    challenge_id: str


class ToggleChallengeEnabled(_Action):
    type: Literal["toggle_challenge_enabled"] = "toggle_challenge_enabled"
    challenge_id: str


class AddCustomChallenge(_Action):
    type: Literal["add_custom_challenge"] = "add_custom_challenge"
    text: str
    difficulty: Difficulty


class EditCustomChallenge(_Action):
    type: Literal["edit_custom_challenge"] = "edit_custom_challenge"
    id: str
    text: str
    difficulty: Difficulty


class DeleteCustomChallenge(_Action):
    type: Literal["delete_custom_challenge"] = "delete_custom_challenge"
    id: str


class Hydrate(_Action):
    """Merge a loaded persisted document into the (default) state."""

    type: Literal["hydrate"] = "hydrate"
    players: tuple[Player, ...] = ()
    total_rounds: int = DEFAULT_TOTAL_ROUNDS
    advanced: AdvancedSettings = Field(default_factory=AdvancedSettings)
    custom_challenges: tuple[SimpleChallenge, ...] = ()


class ResetAllSaved(_Action):
    type: Literal["reset_all_saved"] = "reset_all_saved"


UserAction = Annotated[
    AddPlayer
    | RemovePlayer
    | SetTotalRounds
    | StartGame
    | NextTurn
    | SkipTurn
    | ResetGame
    | ToggleCategory
    | ToggleFavorite
    | ToggleChallengeEnabled
    | AddCustomChallenge
    | EditCustomChallenge
    | DeleteCustomChallenge,
    Field(discriminator="type"),
]

Action = (
    AddPlayer
    | RemovePlayer
    | SetTotalRounds
    | StartGame
    | NextTurn
    | SkipTurn
    | ResetGame
    | ToggleCategory
    | ToggleFavorite
    | ToggleChallengeEnabled
    | AddCustomChallenge
    | EditCustomChallenge
    | DeleteCustomChallenge
    | Hydrate
    | ResetAllSaved
)

def _hydrate(state: GameState, action: Hydrate) -> GameState:
    return state.model_copy(
        update={
            "players": action.players,
            "total_rounds": max(1, action.total_rounds),
            "advanced": action.advanced,
            "custom_challenges": action.custom_challenges,
            "scores": {p.id: state.scores.get(p.id, 0) for p in action.players},
            "current_player_index": 0,
        }
    )


def reduce(state: GameState, action: Action, ctx: TurnContext) -> GameState:
    """Apply one action to a snapshot and return the next snapshot.

    Actions whose preconditions do not hold return `state` itself.
    """

    if isinstance(action, AddPlayer):
        return players.add_player(state, action.name)
    if isinstance(action, RemovePlayer):
        return players.remove_player(state, action.player_id)
    if isinstance(action, SetTotalRounds):
        return players.set_total_rounds(state, action.total_rounds)
    if isinstance(action, StartGame):
        return start_game(state)
    if isinstance(action, NextTurn):
        return next_turn(state, ctx)
    if isinstance(action, SkipTurn):
        return skip_turn(state, ctx)
    if isinstance(action, ResetGame):
        return reset_game(state)
    if isinstance(action, ToggleCategory):
        return advanced_settings.toggle_category(state, action.category)
    if isinstance(action, ToggleFavorite):
        return advanced_settings.toggle_favorite(state, action.challenge_id)
    if isinstance(action, ToggleChallengeEnabled):
        return advanced_settings.toggle_challenge_enabled(state, action.challenge_id)
    if isinstance(action, AddCustomChallenge):
        return advanced_settings.add_custom_challenge(state, action.text, action.difficulty)
    if isinstance(action, EditCustomChallenge):
        return advanced_settings.edit_custom_challenge(state, action.id, action.text, action.difficulty)
    if isinstance(action, DeleteCustomChallenge):
        return advanced_settings.delete_custom_challenge(state, action.id)
    if isinstance(action, Hydrate):
        return _hydrate(state, action)
    if isinstance(action, ResetAllSaved):
        return GameState()
    assert_never(action)
