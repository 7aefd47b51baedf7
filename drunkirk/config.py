from __future__ import annotations

import os
from dataclasses import dataclass


DEFAULT_REDIS_URL = "redis://localhost:6379/0"


@dataclass(frozen=True, slots=True)
class EngineSettings:
    favorite_boost: float = 2.0
    save_debounce_s: float = 0.3
    # None => seed from system entropy.
    seed: int | None = None
    log_level: str = "INFO"
    redis_url: str = DEFAULT_REDIS_URL


def settings_from_env() -> EngineSettings:
    seed = os.environ.get("DRUNKIRK_SEED")
    return EngineSettings(
        favorite_boost=float(os.environ.get("DRUNKIRK_FAVORITE_BOOST", "2.0")),
        save_debounce_s=int(os.environ.get("DRUNKIRK_SAVE_DEBOUNCE_MS", "300")) / 1000,
        seed=int(seed) if seed else None,
        log_level=os.environ.get("DRUNKIRK_LOG_LEVEL", "INFO").upper(),
        redis_url=os.environ.get("REDIS_URL", DEFAULT_REDIS_URL),
    )
