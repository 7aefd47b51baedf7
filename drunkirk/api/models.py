from __future__ import annotations

from datetime import datetime
from enum import StrEnum
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, computed_field, model_validator


DEFAULT_TOTAL_ROUNDS = 6
CUSTOM_CATEGORY = "custom"
CUSTOM_ID_PREFIX = "custom_"


class Difficulty(StrEnum):
    easy = "easy"
    normal = "normal"
    hard = "hard"
    brutal = "brutal"


class Repeatability(StrEnum):
    # Declared on challenges but not read by the picker yet.
    repeatable = "repeatable"
    once_per_game = "once_per_game"


class GamePhase(StrEnum):
    setup = "setup"
    in_progress = "in_progress"
    complete = "complete"


class NumberRange(BaseModel):
    model_config = ConfigDict(frozen=True)

    min: int = Field(..., ge=0)
    max: int = Field(..., ge=0)

    @model_validator(mode="after")
    def _check_bounds(self) -> "NumberRange":
        if self.min > self.max:
            raise ValueError(f"range min ({self.min}) must not exceed max ({self.max})")
        return self


class Player(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str


class _ChallengeBase(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    difficulty: Difficulty
    categories: tuple[str, ...] = ()

    # Multiplies the difficulty base weight when present.
    weight: float | None = Field(None, ge=0, allow_inf_nan=False)

    # Reserved anti-repetition hints.
    repeatability: Repeatability | None = None
    cooldown_turns: int | None = None


class SimpleChallenge(_ChallengeBase):
    kind: Literal["simple"] = "simple"

    # Template text, e.g. "Take {n} sips".
    text: str
    quantity: NumberRange | None = None


class TrackedChallenge(_ChallengeBase):
    kind: Literal["tracked"] = "tracked"

    action: str
    rounds: NumberRange

    @model_validator(mode="after")
    def _check_rounds(self) -> "TrackedChallenge":
        if self.rounds.min < 1:
            raise ValueError(f"tracked challenge must last at least 1 round (min is {self.rounds.min})")
        return self


Challenge = Annotated[SimpleChallenge | TrackedChallenge, Field(discriminator="kind")]


class ActiveTracked(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    challenge_id: str
    target_player_id: str
    action: str
    remaining_rounds: int = Field(..., gt=0)
    started_round: int
    difficulty: Difficulty


class TurnEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    round: int
    # 1..len(players)
    turn_in_round: int
    player_id: str

    challenge_id: str
    challenge_text: str
    difficulty: Difficulty
    categories: tuple[str, ...] = ()

    quantity: int | None = None
    points_awarded: int = 0

    timestamp: datetime
    is_skip: bool = False


class AdvancedSettings(BaseModel):
    model_config = ConfigDict(frozen=True)

    # Categories default to enabled unless explicitly False.
    enabled_categories: dict[str, bool] = Field(default_factory=dict)
    favorite_challenges: dict[str, bool] = Field(default_factory=dict)
    # True = disabled.
    disabled_challenges: dict[str, bool] = Field(default_factory=dict)

    def is_category_enabled(self, category: str) -> bool:
        return self.enabled_categories.get(category) is not False

    def is_favorite(self, challenge_id: str) -> bool:
        return self.favorite_challenges.get(challenge_id) is True

    def is_disabled(self, challenge_id: str) -> bool:
        return self.disabled_challenges.get(challenge_id) is True


class GameState(BaseModel):
    """Root aggregate. Every transition returns a new instance."""

    model_config = ConfigDict(frozen=True)

    # Setup.
    players: tuple[Player, ...] = ()
    total_rounds: int = Field(DEFAULT_TOTAL_ROUNDS, ge=1)

    advanced: AdvancedSettings = Field(default_factory=AdvancedSettings)
    custom_challenges: tuple[SimpleChallenge, ...] = ()

    # Runtime.
    current_player_index: int = 0
    round: int = 1
    # 0 before the first turn of a round, then 1..len(players).
    turn_in_round: int = 0

    current_turn: TurnEntry | None = None
    scores: dict[str, int] = Field(default_factory=dict)
    history: tuple[TurnEntry, ...] = ()
    active_tracked: tuple[ActiveTracked, ...] = ()

    @property
    def is_game_over(self) -> bool:
        # Finishing the last round rolls into round + 1 with turn_in_round == 0.
        return self.turn_in_round == 0 and self.round > self.total_rounds

    @computed_field  # type: ignore[prop-decorator]
    @property
    def phase(self) -> GamePhase:
        if len(self.players) < 2:
            return GamePhase.setup
        if self.is_game_over:
            return GamePhase.complete
        return GamePhase.in_progress

    def player_by_id(self, player_id: str) -> Player | None:
        return next((p for p in self.players if p.id == player_id), None)


# Request bodies.


class AddPlayerRequest(BaseModel):
    name: str = Field(..., max_length=200)


class TotalRoundsRequest(BaseModel):
    total_rounds: int


class StandingRow(BaseModel):
    player_id: str
    name: str
    score: int


class StandingsResponse(BaseModel):
    rows: list[StandingRow]
    winner_label: str
    game_over: bool


class CatalogItem(BaseModel):
    id: str
    title: str
    favorite: bool = False
    disabled: bool = False


class CatalogSection(BaseModel):
    title: str
    enabled: bool = True
    data: list[CatalogItem]


class CatalogResponse(BaseModel):
    sections: list[CatalogSection]
