from __future__ import annotations

from pathlib import Path

from drunkirk.assets.registry import ChallengeCatalog, load_challenge_catalog


_CATALOG: ChallengeCatalog | None = None


def init_catalog(*, project_root: Path) -> ChallengeCatalog:
    """Load the built-in challenges once and cache them.

    Safe to call multiple times; subsequent calls return the already loaded instance.
    """

    global _CATALOG
    if _CATALOG is None:
        _CATALOG = load_challenge_catalog(root=project_root)
    return _CATALOG


def reset_catalog_for_tests() -> None:
    global _CATALOG
    _CATALOG = None


def get_catalog() -> ChallengeCatalog:
    if _CATALOG is None:
        raise RuntimeError("Challenge catalog not initialized. Call init_catalog() at startup.")
    return _CATALOG
