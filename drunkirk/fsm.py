from __future__ import annotations

from statemachine import State, StateMachine
from statemachine.exceptions import TransitionNotAllowed

from drunkirk.api.models import GameState


class GameFSM(StateMachine):
    """FSM view over an immutable GameState snapshot.

    The phase is derived from the snapshot (player count and round counters);
    the machine only guards which phase changes are legal:
    setup -> in_progress -> complete, plus resets and player removal.
    """

    setup = State("setup", value="setup", initial=True)
    in_progress = State("in_progress", value="in_progress")
    complete = State("complete", value="complete")

    players_ready = setup.to(in_progress)
    players_left = in_progress.to(setup) | complete.to(setup)
    finish = in_progress.to(complete)
    restart = complete.to(in_progress)
    # A finished game that dropped below two players and got one back.
    players_back = setup.to(complete)

    def __init__(self, game: GameState):
        self.game = game
        super().__init__(start_value=game.phase.value)

    @property
    def accepts_turns(self) -> bool:
        return self.current_state == self.in_progress


PHASE_EVENTS = ("players_ready", "players_left", "finish", "restart", "players_back")


def phase_event(before: GameState, after: GameState) -> str | None:
    """Name of the FSM event that moves `before` into the phase of `after`.

    Returns None when the phase did not change. Raises ValueError for a jump
    the machine does not allow, which would mean a reducer bug.
    """

    if before.phase == after.phase:
        return None

    for event in PHASE_EVENTS:
        fsm = GameFSM(before)
        try:
            fsm.send(event)
        except TransitionNotAllowed:
            continue
        if fsm.current_state.value == after.phase.value:
            return event

    raise ValueError(f"Illegal phase change: {before.phase.value} -> {after.phase.value}")
