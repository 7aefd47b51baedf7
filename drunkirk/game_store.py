"""Durable storage for the settings part of a game.

Only the setup data survives a restart (players, round count, advanced
settings and custom challenges); round/turn progress is session-only.
Storage problems never reach the engine: loading degrades to "nothing
saved" and writes are best-effort.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import Literal, Protocol

import redis
from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

from drunkirk.actions import Hydrate
from drunkirk.api.models import DEFAULT_TOTAL_ROUNDS, AdvancedSettings, GameState, Player, SimpleChallenge


logger = logging.getLogger(__name__)

PERSIST_KEY = "drunkirk:persist:v1"
PERSIST_VERSION = 1


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class PersistedAdvanced(_CamelModel):
    enabled_categories: dict[str, bool] = Field(default_factory=dict)
    favorite_challenges: dict[str, bool] = Field(default_factory=dict)
    disabled_challenges: dict[str, bool] = Field(default_factory=dict)


class PersistedDocument(_CamelModel):
    version: Literal[1] = PERSIST_VERSION
    # Epoch milliseconds.
    saved_at: int
    players: list[Player] = Field(default_factory=list)
    total_rounds: int = DEFAULT_TOTAL_ROUNDS
    advanced: PersistedAdvanced = Field(default_factory=PersistedAdvanced)
    custom_challenges: list[SimpleChallenge] = Field(default_factory=list)

    @classmethod
    def from_state(cls, state: GameState) -> "PersistedDocument":
        return cls(
            saved_at=int(datetime.now(tz=UTC).timestamp() * 1000),
            players=list(state.players),
            total_rounds=state.total_rounds,
            advanced=PersistedAdvanced(**state.advanced.model_dump()),
            custom_challenges=list(state.custom_challenges),
        )

    def to_hydrate(self) -> Hydrate:
        return Hydrate(
            players=tuple(self.players),
            total_rounds=self.total_rounds,
            advanced=AdvancedSettings(**self.advanced.model_dump()),
            custom_challenges=tuple(self.custom_challenges),
        )

    def to_json(self) -> str:
        return self.model_dump_json(
            by_alias=True,
            include={
                "version": True,
                "saved_at": True,
                "players": True,
                "total_rounds": True,
                "advanced": True,
                "custom_challenges": {"__all__": {"kind", "id", "text", "difficulty", "categories"}},
            },
        )


def persisted_slice(state: GameState) -> tuple[object, ...]:
    """The parts of a state that a save would write."""

    return (state.players, state.total_rounds, state.advanced, state.custom_challenges)


class SettingsStore(Protocol):
    def load(self) -> PersistedDocument | None: ...

    def save(self, doc: PersistedDocument) -> None: ...

    def clear(self) -> None: ...


class RedisSettingsStore:
    """SettingsStore backed by a single Redis string key."""

    def __init__(self, r: redis.Redis, *, key: str = PERSIST_KEY):
        self.r = r
        self.key = key

    def load(self) -> PersistedDocument | None:
        try:
            raw = self.r.get(self.key)
        except redis.RedisError:
            logger.warning("could not read saved settings from %s", self.key, exc_info=True)
            return None

        if not raw:
            return None

        # Bad JSON and a version mismatch both fail validation; treat them as absent.
        try:
            return PersistedDocument.model_validate_json(raw)
        except ValidationError:
            logger.info("ignoring unreadable saved settings under %s", self.key)
            return None

    def save(self, doc: PersistedDocument) -> None:
        try:
            self.r.set(self.key, doc.to_json())
        except redis.RedisError:
            logger.warning("could not save settings to %s", self.key, exc_info=True)

    def clear(self) -> None:
        try:
            self.r.delete(self.key)
        except redis.RedisError:
            logger.warning("could not clear saved settings under %s", self.key, exc_info=True)
