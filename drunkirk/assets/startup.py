from __future__ import annotations

from pathlib import Path

from drunkirk.assets.registry import ChallengeCatalog
from drunkirk.assets.singleton import init_catalog


def project_root() -> Path:
    # two levels up from this file: drunkirk/assets/startup.py
    return Path(__file__).resolve().parents[2]


def init_catalog_for_app() -> ChallengeCatalog:
    return init_catalog(project_root=project_root())
