from __future__ import annotations

import os
import random
from collections.abc import Generator
from pathlib import Path

import fakeredis
import pytest
from fastapi.testclient import TestClient


@pytest.fixture(scope="session", autouse=True)
def _init_catalog_from_test_fixtures() -> None:
    """Initialize the built-in catalog from `tests/assets` and forbid the fallback catalog.

    This keeps tests hermetic and prevents coupling to the repo's real challenge list.
    """

    os.environ["DRUNKIRK_STRICT_ASSETS"] = "1"

    from drunkirk.assets.singleton import init_catalog, reset_catalog_for_tests

    reset_catalog_for_tests()

    # Point the loader at a fake project root: tests/ contains an assets/ dir.
    test_root = Path(__file__).resolve().parent
    init_catalog(project_root=test_root)


@pytest.fixture()
def rng() -> random.Random:
    return random.Random(1234)


@pytest.fixture()
def client_and_redis() -> Generator[tuple[TestClient, fakeredis.FakeRedis], None, None]:
    """FastAPI TestClient wired to a seeded controller persisting into fakeredis."""

    from drunkirk.api.deps import create_controller, reset_controller_for_tests, set_controller
    from drunkirk.assets.singleton import get_catalog
    from drunkirk.config import EngineSettings
    from drunkirk.main import app

    r = fakeredis.FakeRedis(decode_responses=True)
    settings = EngineSettings(save_debounce_s=60.0, seed=99)
    set_controller(create_controller(r=r, catalog=get_catalog(), settings=settings))

    with TestClient(app) as c:
        yield c, r
    reset_controller_for_tests()
