from __future__ import annotations

import json
import logging

import fakeredis
import redis

from drunkirk.actions import Hydrate
from drunkirk.advanced_settings import add_custom_challenge, toggle_category, toggle_favorite
from drunkirk.api.models import Difficulty, GameState
from drunkirk.game_store import PERSIST_KEY, PersistedDocument, RedisSettingsStore, persisted_slice
from drunkirk.players import add_player, set_total_rounds


def _configured_state() -> GameState:
    state = add_player(GameState(), "Alice")
    state = add_player(state, "Bob")
    state = set_total_rounds(state, 3)
    state = toggle_category(state, "drinks")
    state = toggle_favorite(state, "sip")
    return add_custom_challenge(state, "Sing a song", Difficulty.normal)


def test_load_returns_none_when_nothing_saved() -> None:
    store = RedisSettingsStore(fakeredis.FakeRedis(decode_responses=True))
    assert store.load() is None


def test_save_then_load_restores_settings() -> None:
    r = fakeredis.FakeRedis(decode_responses=True)
    store = RedisSettingsStore(r)
    state = _configured_state()

    store.save(PersistedDocument.from_state(state))
    doc = store.load()

    assert doc is not None
    action = doc.to_hydrate()
    assert isinstance(action, Hydrate)
    assert action.players == state.players
    assert action.total_rounds == 3
    assert action.advanced == state.advanced
    assert action.custom_challenges == state.custom_challenges


def test_saved_document_uses_camel_case_keys() -> None:
    r = fakeredis.FakeRedis(decode_responses=True)
    RedisSettingsStore(r).save(PersistedDocument.from_state(_configured_state()))

    raw = json.loads(r.get(PERSIST_KEY))

    assert set(raw) == {"version", "savedAt", "players", "totalRounds", "advanced", "customChallenges"}
    assert raw["version"] == 1
    assert isinstance(raw["savedAt"], int)
    assert raw["totalRounds"] == 3
    assert set(raw["advanced"]) == {"enabledCategories", "favoriteChallenges", "disabledChallenges"}
    assert raw["advanced"]["enabledCategories"] == {"drinks": False}
    assert [set(p) for p in raw["players"]] == [{"id", "name"}, {"id", "name"}]

    (custom,) = raw["customChallenges"]
    assert set(custom) == {"kind", "id", "text", "difficulty", "categories"}
    assert custom["kind"] == "simple"
    assert custom["categories"] == ["custom"]


def test_runtime_progress_is_not_persisted() -> None:
    state = _configured_state()
    progressed = state.model_copy(update={"round": 4, "scores": {p.id: 9 for p in state.players}})

    assert persisted_slice(progressed) == persisted_slice(state)


def test_unreadable_or_foreign_documents_load_as_absent() -> None:
    r = fakeredis.FakeRedis(decode_responses=True)
    store = RedisSettingsStore(r)

    r.set(PERSIST_KEY, "{not json")
    assert store.load() is None

    r.set(PERSIST_KEY, json.dumps({"version": 2, "savedAt": 0, "players": []}))
    assert store.load() is None

    r.set(PERSIST_KEY, json.dumps({"version": 1, "savedAt": 0, "totalRounds": 2}))
    doc = store.load()
    assert doc is not None
    assert doc.total_rounds == 2
    assert doc.players == []


def test_clear_removes_saved_document() -> None:
    r = fakeredis.FakeRedis(decode_responses=True)
    store = RedisSettingsStore(r)
    store.save(PersistedDocument.from_state(_configured_state()))

    store.clear()

    assert r.get(PERSIST_KEY) is None
    assert store.load() is None


def test_custom_key_is_honored() -> None:
    r = fakeredis.FakeRedis(decode_responses=True)
    RedisSettingsStore(r, key="other:key").save(PersistedDocument.from_state(GameState()))

    assert r.get(PERSIST_KEY) is None
    assert r.get("other:key") is not None


class _BrokenRedis:
    def get(self, key: str) -> str:
        raise redis.ConnectionError("down")

    def set(self, key: str, value: str) -> None:
        raise redis.ConnectionError("down")

    def delete(self, key: str) -> None:
        raise redis.ConnectionError("down")


def test_storage_failures_are_logged_not_raised(caplog) -> None:
    store = RedisSettingsStore(_BrokenRedis())  # type: ignore[arg-type]

    with caplog.at_level(logging.WARNING, logger="drunkirk.game_store"):
        assert store.load() is None
        store.save(PersistedDocument.from_state(GameState()))
        store.clear()

    assert len([rec for rec in caplog.records if rec.levelno == logging.WARNING]) == 3
