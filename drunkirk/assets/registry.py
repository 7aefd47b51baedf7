from __future__ import annotations

import csv
import os
import re
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

from pydantic import ValidationError

from drunkirk.api.models import Challenge, SimpleChallenge, TrackedChallenge


UNCATEGORIZED = "uncategorized"
CATEGORY_SEPARATOR = "|"
CSV_HEADER = ["id", "kind", "difficulty", "categories", "text", "min", "max", "weight"]


def _norm_key(s: str) -> str:
    return re.sub(r"\s+", " ", s).strip().casefold()


class ChallengeCatalogError(RuntimeError):
    pass


@dataclass(frozen=True, slots=True)
class ChallengeCatalog:
    """Built-in challenges, immutable for the lifetime of the process."""

    challenges: tuple[Challenge, ...]
    _by_id: dict[str, Challenge]

    @staticmethod
    def from_challenges(rows: Iterable[Challenge]) -> "ChallengeCatalog":
        by_id: dict[str, Challenge] = {}
        for c in rows:
            if c.id in by_id:
                raise ChallengeCatalogError(f"Duplicate challenge id: {c.id}")
            by_id[c.id] = c
        if not by_id:
            raise ChallengeCatalogError("Challenge catalog is empty")
        return ChallengeCatalog(challenges=tuple(by_id.values()), _by_id=by_id)

    def get(self, id: str) -> Challenge | None:
        return self._by_id.get(id)

    def __contains__(self, item: object) -> bool:
        return isinstance(item, str) and item in self._by_id

    def __len__(self) -> int:
        return len(self.challenges)

    @property
    def categories(self) -> tuple[str, ...]:
        return tuple(sorted({cat for c in self.challenges for cat in c.categories}, key=_norm_key))


def challenge_title(challenge: Challenge) -> str:
    if isinstance(challenge, TrackedChallenge):
        return f"Tracked: {challenge.action}"
    return challenge.text


def catalog_sections(challenges: Iterable[Challenge]) -> list[tuple[str, list[Challenge]]]:
    """Group challenges by category for the settings screen.

    A challenge appears once under each of its categories; challenges without
    one go under "uncategorized". Categories and titles are sorted.
    """

    by_cat: dict[str, list[Challenge]] = {}
    for c in challenges:
        for cat in c.categories or (UNCATEGORIZED,):
            by_cat.setdefault(cat, []).append(c)

    return [
        (cat, sorted(by_cat[cat], key=lambda c: _norm_key(challenge_title(c))))
        for cat in sorted(by_cat, key=_norm_key)
    ]


def _read_csv_rows(path: Path) -> list[list[str]]:
    try:
        with path.open(encoding="utf-8-sig", newline="") as f:
            rows = [[c.strip() for c in row] for row in csv.reader(f)]
    except FileNotFoundError as e:
        raise ChallengeCatalogError(f"Catalog file not found: {path}") from e

    return [row for row in rows if any(row) and not row[0].startswith("#")]


def _optional_number(value: str, cast: type[int] | type[float]) -> int | float | None:
    return cast(value) if value else None


def _challenge_from_row(row: dict[str, str]) -> Challenge:
    categories = tuple(c.strip() for c in row["categories"].split(CATEGORY_SEPARATOR) if c.strip())
    lo = _optional_number(row["min"], int)
    hi = _optional_number(row["max"], int)
    common = {
        "id": row["id"],
        "difficulty": row["difficulty"],
        "categories": categories,
        "weight": _optional_number(row["weight"], float),
    }

    kind = row["kind"].casefold()
    if kind == "simple":
        quantity = {"min": lo, "max": hi} if lo is not None or hi is not None else None
        return SimpleChallenge(**common, text=row["text"], quantity=quantity)
    if kind == "tracked":
        return TrackedChallenge(**common, action=row["text"], rounds={"min": lo, "max": hi})
    raise ChallengeCatalogError(f"Unknown challenge kind {row['kind']!r} for {row['id']!r}")


def load_challenge_csv(path: Path) -> ChallengeCatalog:
    rows = _read_csv_rows(path)
    if not rows:
        raise ChallengeCatalogError(f"Empty catalog CSV: {path}")

    header = [c.casefold() for c in rows[0]]
    if header[: len(CSV_HEADER)] != CSV_HEADER:
        raise ChallengeCatalogError(f"Unexpected header in {path}: {rows[0]}")

    out: list[Challenge] = []
    for lineno, row in enumerate(rows[1:], start=2):
        padded = row + [""] * (len(CSV_HEADER) - len(row))
        record = dict(zip(CSV_HEADER, padded))
        if not record["id"]:
            raise ChallengeCatalogError(f"{path}:{lineno}: missing id")
        try:
            out.append(_challenge_from_row(record))
        except (ValidationError, ValueError) as e:
            raise ChallengeCatalogError(f"{path}:{lineno}: invalid challenge {record['id']!r}: {e}") from e

    return ChallengeCatalog.from_challenges(out)


def _fallback_catalog() -> ChallengeCatalog:
    """Small catalog used when the CSV is missing (tests/CI)."""

    return ChallengeCatalog.from_challenges(
        [
            SimpleChallenge(id="take_sips", text="Take {n} sips", difficulty="easy", quantity={"min": 1, "max": 3}),
            SimpleChallenge(id="give_sips", text="Give {n} sips", difficulty="easy", quantity={"min": 1, "max": 3}),
            SimpleChallenge(
                id="take_big_sips", text="Take {n} sips", difficulty="normal", quantity={"min": 3, "max": 6}
            ),
            SimpleChallenge(
                id="everyone_drinks",
                text="Everyone drinks {n} sips",
                difficulty="normal",
                quantity={"min": 1, "max": 2},
            ),
            SimpleChallenge(id="finish_drink", text="Finish your drink", difficulty="hard"),
        ]
    )


def load_challenge_catalog(*, root: Path) -> ChallengeCatalog:
    path = root / "assets" / "challenges.csv"

    # A missing file falls back to the tiny catalog; DRUNKIRK_STRICT_ASSETS=1 makes it fatal.
    # Malformed data is always fatal.
    strict = os.getenv("DRUNKIRK_STRICT_ASSETS", "").strip().lower() in {"1", "true", "yes"}

    if not path.exists() and not strict:
        return _fallback_catalog()
    return load_challenge_csv(path)
