from __future__ import annotations

import logging
import random
from typing import cast

from app.api.models import BOARD_SIZE, GameState, GameStatus, Identity, Symbol, empty_board
from app.core.win import detect_win, is_full
from app.fsm import ActionOutcome, GameFSM, RejectReason

logger = logging.getLogger(__name__)


def holds_next(*, state: GameState, identity: Identity) -> bool:
    """True when `next` is set and equals the identity's declared symbol."""

    return state.next is not None and identity.user == state.next.value


def is_my_turn(*, state: GameState, identity: Identity) -> bool:
    """Turn ownership: only the identity whose symbol equals `next` may move, and only while playing.

    Evaluated locally against the last fetched state; nothing server-side enforces it.
    """

    return state.status == GameStatus.playing and holds_next(state=state, identity=identity)


def _reject(state: GameState, reason: RejectReason, *, action: str, identity: Identity) -> ActionOutcome:
    logger.debug("Rejected %s by %r in status %s: %s", action, identity.user, state.status.value, reason.value)
    return ActionOutcome.rejected(state, reason)


def control_action(*, state: GameState, identity: Identity, rng: random.Random | None = None) -> ActionOutcome:
    """Apply the single shared control button (Flip / Clear / Start).

    The input state is never mutated; an applied outcome carries a fresh copy.
    """

    game = state.model_copy(deep=True)
    fsm = GameFSM(game)

    if fsm.current_state == fsm.need_flip:
        game.start = (rng or random).choice((Symbol.O, Symbol.X))
        game.next = game.start
        game.board = empty_board()
        fsm.flip()

    elif fsm.current_state == fsm.playing:
        # Abort: start/next are kept so the same player opens the restarted match.
        game.board = empty_board()
        game.winner = None
        game.stripe = []
        fsm.abort()

    else:
        # ready / over: only the holder of `next` may start the match.
        if not holds_next(state=state, identity=identity):
            return _reject(state, RejectReason.not_your_turn, action="control", identity=identity)
        game.board = empty_board()
        game.next = game.start
        game.winner = None
        game.stripe = []
        fsm.begin()

    fsm.sync_status_to_model()
    return ActionOutcome(applied=True, state=game)


def cell_click_action(*, state: GameState, identity: Identity, idx: int) -> ActionOutcome:
    """Place the current player's symbol at `idx`, then settle win / draw / next turn.

    Illegal clicks are returned as rejected outcomes, never raised.
    """

    if state.status != GameStatus.playing:
        return _reject(state, RejectReason.wrong_status, action="click", identity=identity)
    if not is_my_turn(state=state, identity=identity):
        return _reject(state, RejectReason.not_your_turn, action="click", identity=identity)
    if not 0 <= idx < BOARD_SIZE:
        return _reject(state, RejectReason.cell_out_of_range, action="click", identity=identity)
    if state.board[idx]:
        return _reject(state, RejectReason.cell_occupied, action="click", identity=identity)

    game = state.model_copy(deep=True)
    fsm = GameFSM(game)

    # is_my_turn above rejects a missing `next`.
    mover = cast(Symbol, game.next)
    game.board[idx] = mover.value

    win = detect_win(game.board)
    if win is not None:
        game.winner = win.winner
        game.stripe = list(win.stripe)
        # The winner opens the next match.
        game.start = win.winner
        fsm.finish()
    elif is_full(game.board):
        game.winner = None
        game.stripe = []
        fsm.finish()
    else:
        game.next = mover.other
        fsm.mark()

    fsm.sync_status_to_model()
    return ActionOutcome(applied=True, state=game)
