from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from statemachine import State, StateMachine

from app.api.models import GameState, GameStatus


class RejectReason(StrEnum):
    wrong_status = "wrong_status"
    not_your_turn = "not_your_turn"
    cell_out_of_range = "cell_out_of_range"
    cell_occupied = "cell_occupied"
    store_unavailable = "store_unavailable"


@dataclass(frozen=True, slots=True)
class ActionOutcome:
    """Result of applying a user action.

    - `applied`: whether a new state was produced (and, in a session, written).
    - `state`: the new state when applied, otherwise the untouched input state.
    - `reason`: why the action was rejected; None when applied.
    """

    applied: bool
    state: GameState
    reason: RejectReason | None = None

    @staticmethod
    def rejected(state: GameState, reason: RejectReason) -> ActionOutcome:
        return ActionOutcome(applied=False, state=state, reason=reason)


class GameFSM(StateMachine):
    """FSM wrapper around GameState.

    - statuses: needFlip -> ready -> playing -> over -> playing (next match)
    - playing -> ready aborts the current match
    - actions mutate the board; the FSM only guards status transitions.
    """

    need_flip = State(GameStatus.need_flip.value, value=GameStatus.need_flip.value, initial=True)
    ready = State(GameStatus.ready.value, value=GameStatus.ready.value)
    playing = State(GameStatus.playing.value, value=GameStatus.playing.value)
    over = State(GameStatus.over.value, value=GameStatus.over.value)

    flip = need_flip.to(ready)
    abort = playing.to(ready)
    begin = ready.to(playing) | over.to(playing)
    mark = playing.to.itself()
    finish = playing.to(over)

    def __init__(self, game: GameState):
        self.game = game
        super().__init__(start_value=game.status.value)

    def sync_status_to_model(self) -> None:
        self.game.status = GameStatus(str(self.current_state.value))
