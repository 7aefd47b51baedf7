from __future__ import annotations

import random

import redis

from drunkirk.assets.registry import ChallengeCatalog
from drunkirk.config import EngineSettings
from drunkirk.controller import GameController
from drunkirk.game_store import RedisSettingsStore


_CONTROLLER: GameController | None = None


def create_controller(*, r: redis.Redis, catalog: ChallengeCatalog, settings: EngineSettings) -> GameController:
    rng = random.Random(settings.seed) if settings.seed is not None else None
    return GameController(
        builtin_challenges=catalog.challenges,
        store=RedisSettingsStore(r),
        rng=rng,
        favorite_boost=settings.favorite_boost,
        save_debounce_s=settings.save_debounce_s,
    )


def set_controller(controller: GameController) -> GameController:
    global _CONTROLLER
    _CONTROLLER = controller
    return controller


def has_controller() -> bool:
    return _CONTROLLER is not None


def reset_controller_for_tests() -> None:
    global _CONTROLLER
    _CONTROLLER = None


def get_controller() -> GameController:
    if _CONTROLLER is None:
        raise RuntimeError("Game controller not initialized. Call set_controller() at startup.")
    return _CONTROLLER
