from __future__ import annotations

import logging
import random
import threading
from collections.abc import Callable, Iterable

from drunkirk.actions import (
    Action,
    AddCustomChallenge,
    AddPlayer,
    DeleteCustomChallenge,
    EditCustomChallenge,
    NextTurn,
    RemovePlayer,
    ResetAllSaved,
    ResetGame,
    SetTotalRounds,
    SkipTurn,
    StartGame,
    ToggleCategory,
    ToggleChallengeEnabled,
    ToggleFavorite,
    reduce,
)
from drunkirk.api.models import Challenge, Difficulty, GameState
from drunkirk.autosave import DebouncedSaver
from drunkirk.core.picker import DEFAULT_FAVORITE_BOOST
from drunkirk.fsm import phase_event
from drunkirk.game_store import PersistedDocument, SettingsStore, persisted_slice
from drunkirk.turn_processing.turns import TurnContext


logger = logging.getLogger(__name__)

Listener = Callable[[GameState, GameState], None]


class GameController:
    """Single owner of the current GameState.

    Transitions are applied one at a time under a lock; each produces a new
    snapshot which is then handed to the subscribers as (before, after).
    Persistence is one such subscriber: it debounces saves of the settings
    part of the state once hydration has completed.
    """

    def __init__(
        self,
        *,
        builtin_challenges: Iterable[Challenge],
        store: SettingsStore | None = None,
        rng: random.Random | None = None,
        favorite_boost: float = DEFAULT_FAVORITE_BOOST,
        save_debounce_s: float = 0.3,
        state: GameState | None = None,
    ):
        if rng is None:
            seed = random.SystemRandom().randint(1, 2**31 - 1)
            logger.debug("seeding game rng with %d", seed)
            rng = random.Random(seed)

        self._ctx = TurnContext(
            builtin_challenges=tuple(builtin_challenges),
            rng=rng,
            favorite_boost=favorite_boost,
        )
        self._state = state if state is not None else GameState()
        self._lock = threading.RLock()
        self._listeners: list[Listener] = []
        self._hydrated = False

        self._store = store
        self._saver = DebouncedSaver(store, delay_s=save_debounce_s) if store is not None else None
        if self._saver is not None:
            self.subscribe(self._autosave)

    @property
    def state(self) -> GameState:
        return self._state

    @property
    def hydrated(self) -> bool:
        return self._hydrated

    @property
    def builtin_challenges(self) -> tuple[Challenge, ...]:
        return self._ctx.builtin_challenges

    @property
    def saver(self) -> DebouncedSaver | None:
        return self._saver

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        with self._lock:
            self._listeners.append(listener)

        def _unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return _unsubscribe

    def dispatch(self, action: Action) -> GameState:
        with self._lock:
            before = self._state
            after = reduce(before, action, self._ctx)
            if after is before:
                return before

            event = phase_event(before, after)
            if event is not None:
                logger.info("game phase %s -> %s (%s)", before.phase.value, after.phase.value, event)

            self._state = after
            listeners = list(self._listeners)

            for listener in listeners:
                listener(before, after)

        return after

    def hydrate(self) -> GameState:
        """Merge the saved settings into the state, once.

        Must run before user actions are accepted; the app calls it from its
        startup hook. Saves stay disabled until this has happened, so the
        default empty state can never overwrite a saved document.
        """

        with self._lock:
            if self._hydrated:
                return self._state

            doc = self._store.load() if self._store is not None else None
            if doc is not None:
                self.dispatch(doc.to_hydrate())
                logger.info("hydrated %d players and %d custom challenges", len(doc.players), len(doc.custom_challenges))

            self._hydrated = True
            return self._state

    def reset_all_saved(self) -> GameState:
        """Forget everything: the saved document and the in-memory state."""

        with self._lock:
            if self._saver is not None:
                self._saver.cancel()
            if self._store is not None:
                self._store.clear()
            # Cleared storage stays cleared until the next settings change.
            self._hydrated = False
            try:
                return self.dispatch(ResetAllSaved())
            finally:
                self._hydrated = True

    def close(self) -> None:
        if self._saver is not None:
            self._saver.flush()

    def _autosave(self, before: GameState, after: GameState) -> None:
        if not self._hydrated or self._saver is None:
            return
        if persisted_slice(before) == persisted_slice(after):
            return
        self._saver.schedule(PersistedDocument.from_state(after))

    # One method per transition.

    def add_player(self, name: str) -> GameState:
        return self.dispatch(AddPlayer(name=name))

    def remove_player(self, player_id: str) -> GameState:
        return self.dispatch(RemovePlayer(player_id=player_id))

    def set_total_rounds(self, total_rounds: int) -> GameState:
        return self.dispatch(SetTotalRounds(total_rounds=total_rounds))

    def start_game(self) -> GameState:
        return self.dispatch(StartGame())

    def next_turn(self) -> GameState:
        return self.dispatch(NextTurn())

    def skip_turn(self) -> GameState:
        return self.dispatch(SkipTurn())

    def reset_game(self) -> GameState:
        return self.dispatch(ResetGame())

    def toggle_category(self, category: str) -> GameState:
        return self.dispatch(ToggleCategory(category=category))

    def toggle_favorite(self, challenge_id: str) -> GameState:
        return self.dispatch(ToggleFavorite(challenge_id=challenge_id))

    def toggle_challenge_enabled(self, challenge_id: str) -> GameState:
        return self.dispatch(ToggleChallengeEnabled(challenge_id=challenge_id))

    def add_custom_challenge(self, text: str, difficulty: Difficulty) -> GameState:
        return self.dispatch(AddCustomChallenge(text=text, difficulty=difficulty))

    def edit_custom_challenge(self, challenge_id: str, text: str, difficulty: Difficulty) -> GameState:
        return self.dispatch(EditCustomChallenge(id=challenge_id, text=text, difficulty=difficulty))

    def delete_custom_challenge(self, challenge_id: str) -> GameState:
        return self.dispatch(DeleteCustomChallenge(id=challenge_id))
