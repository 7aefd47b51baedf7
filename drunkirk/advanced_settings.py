"""Custom challenge CRUD and the advanced-settings toggles.

Each function is a pure transformation of the `advanced` and
`custom_challenges` parts of a GameState. Round/turn state is never touched.
"""

from __future__ import annotations

from uuid import uuid4

from drunkirk.api.models import (
    CUSTOM_CATEGORY,
    CUSTOM_ID_PREFIX,
    AdvancedSettings,
    Difficulty,
    GameState,
    SimpleChallenge,
)


def _with_advanced(state: GameState, **changes: dict[str, bool]) -> GameState:
    return state.model_copy(update={"advanced": state.advanced.model_copy(update=changes)})


def toggle_category(state: GameState, category: str) -> GameState:
    # Absent means enabled, so the first toggle disables.
    current = state.advanced.enabled_categories.get(category)
    enabled = {**state.advanced.enabled_categories, category: current is False}
    return _with_advanced(state, enabled_categories=enabled)


def toggle_favorite(state: GameState, challenge_id: str) -> GameState:
    favorites = {
        **state.advanced.favorite_challenges,
        challenge_id: not state.advanced.is_favorite(challenge_id),
    }
    return _with_advanced(state, favorite_challenges=favorites)


def toggle_challenge_enabled(state: GameState, challenge_id: str) -> GameState:
    disabled = {
        **state.advanced.disabled_challenges,
        challenge_id: not state.advanced.is_disabled(challenge_id),
    }
    return _with_advanced(state, disabled_challenges=disabled)


def make_custom_challenge(text: str, difficulty: Difficulty) -> SimpleChallenge:
    return SimpleChallenge(
        id=f"{CUSTOM_ID_PREFIX}{uuid4().hex}",
        text=text,
        difficulty=difficulty,
        categories=(CUSTOM_CATEGORY,),
    )


def add_custom_challenge(state: GameState, text: str, difficulty: Difficulty) -> GameState:
    clean = text.strip()
    if not clean:
        return state

    item = make_custom_challenge(clean, Difficulty(difficulty))
    # Newest first.
    return state.model_copy(update={"custom_challenges": (item, *state.custom_challenges)})


def edit_custom_challenge(state: GameState, challenge_id: str, text: str, difficulty: Difficulty) -> GameState:
    clean = text.strip()
    if not clean:
        return state

    items = tuple(
        c.model_copy(update={"text": clean, "difficulty": Difficulty(difficulty)}) if c.id == challenge_id else c
        for c in state.custom_challenges
    )
    return state.model_copy(update={"custom_challenges": items})


def delete_custom_challenge(state: GameState, challenge_id: str) -> GameState:
    advanced: AdvancedSettings = state.advanced
    favorites = {k: v for k, v in advanced.favorite_challenges.items() if k != challenge_id}
    disabled = {k: v for k, v in advanced.disabled_challenges.items() if k != challenge_id}

    return state.model_copy(
        update={
            "custom_challenges": tuple(c for c in state.custom_challenges if c.id != challenge_id),
            "advanced": advanced.model_copy(
                update={"favorite_challenges": favorites, "disabled_challenges": disabled}
            ),
        }
    )
