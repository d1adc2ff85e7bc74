from __future__ import annotations

import random
from collections.abc import Callable

import pytest

from app.actions import cell_click_action, control_action, holds_next, is_my_turn
from app.api.models import GameState, GameStatus, Identity, Symbol
from app.fsm import GameFSM, RejectReason

MakeState = Callable[..., GameState]


def test_flip_picks_start_and_readies_board(make_state: MakeState, player_x: Identity) -> None:
    state = make_state(cells="OX..............", status="needFlip")

    outcome = control_action(state=state, identity=player_x, rng=random.Random(7))

    assert outcome.applied
    new = outcome.state
    assert new.status == GameStatus.ready
    assert new.start in {Symbol.O, Symbol.X}
    assert new.start == new.next
    assert new.board == [""] * 16
    # Input state untouched.
    assert state.status == GameStatus.need_flip
    assert state.board[0] == "O"


def test_flip_is_allowed_for_any_identity(make_state: MakeState) -> None:
    stranger = Identity(user="Z", browser="unknown", timestamp=0)
    outcome = control_action(state=make_state(), identity=stranger, rng=random.Random(1))
    assert outcome.applied
    assert outcome.state.status == GameStatus.ready


def test_flip_uses_both_symbols() -> None:
    rng = random.Random(42)
    starts = {
        control_action(state=GameState(), identity=Identity(user="O", browser="", timestamp=0), rng=rng).state.start
        for _ in range(50)
    }
    assert starts == {Symbol.O, Symbol.X}


def test_clear_while_playing_aborts_to_ready(make_state: MakeState, player_x: Identity) -> None:
    state = make_state(cells="OX.O............", status="playing", start="O", next="X")

    outcome = control_action(state=state, identity=player_x)

    assert outcome.applied
    assert outcome.state.status == GameStatus.ready
    assert outcome.state.board == [""] * 16
    # start/next are not reset by an abort.
    assert outcome.state.start == Symbol.O
    assert outcome.state.next == Symbol.X


def test_start_from_ready_by_next_holder(make_state: MakeState, player_o: Identity) -> None:
    state = make_state(status="ready", start="O", next="O")

    outcome = control_action(state=state, identity=player_o)

    assert outcome.applied
    assert outcome.state.status == GameStatus.playing
    assert outcome.state.next == Symbol.O
    assert outcome.state.winner is None
    assert outcome.state.stripe == []


def test_start_from_ready_by_other_player_is_noop(make_state: MakeState, player_x: Identity) -> None:
    state = make_state(status="ready", start="O", next="O")

    outcome = control_action(state=state, identity=player_x)

    assert not outcome.applied
    assert outcome.reason == RejectReason.not_your_turn
    assert outcome.state is state


def test_start_after_win_resets_match(make_state: MakeState, player_o: Identity) -> None:
    state = make_state(
        cells="OOOOXXX.........",
        status="over",
        start="O",
        next="O",
        winner="O",
        stripe=[0, 1, 2, 3],
    )

    outcome = control_action(state=state, identity=player_o)

    assert outcome.applied
    new = outcome.state
    assert new.status == GameStatus.playing
    assert new.board == [""] * 16
    assert new.winner is None
    assert new.stripe == []
    assert new.next == Symbol.O


def test_start_after_game_over_by_loser_is_noop(make_state: MakeState, player_x: Identity) -> None:
    state = make_state(cells="OOOOXXX.........", status="over", start="O", next="O", winner="O", stripe=[0, 1, 2, 3])
    outcome = control_action(state=state, identity=player_x)
    assert not outcome.applied
    assert outcome.state == state


@pytest.mark.parametrize("status", ["needFlip", "ready", "over"])
def test_click_outside_playing_is_noop(make_state: MakeState, player_o: Identity, status: str) -> None:
    state = make_state(status=status, start="O", next="O")

    outcome = cell_click_action(state=state, identity=player_o, idx=5)

    assert not outcome.applied
    assert outcome.reason == RejectReason.wrong_status
    assert outcome.state == state


def test_click_by_non_owner_is_noop(make_state: MakeState, player_x: Identity) -> None:
    state = make_state(status="playing", start="O", next="O")

    outcome = cell_click_action(state=state, identity=player_x, idx=5)

    assert not outcome.applied
    assert outcome.reason == RejectReason.not_your_turn
    assert outcome.state.board == [""] * 16


def test_click_while_playing_without_next_is_noop(make_state: MakeState, player_o: Identity) -> None:
    # A hand-edited store document can say "playing" with no one to move.
    state = make_state(status="playing", start="O", next=None)

    outcome = cell_click_action(state=state, identity=player_o, idx=0)

    assert not outcome.applied
    assert outcome.reason == RejectReason.not_your_turn
    assert outcome.state.board == [""] * 16


def test_click_on_occupied_cell_is_noop(make_state: MakeState, player_o: Identity) -> None:
    state = make_state(cells=".....X..........", status="playing", start="X", next="O")
    outcome = cell_click_action(state=state, identity=player_o, idx=5)
    assert not outcome.applied
    assert outcome.reason == RejectReason.cell_occupied


@pytest.mark.parametrize("idx", [-1, 16, 99])
def test_click_out_of_range_is_noop(make_state: MakeState, player_o: Identity, idx: int) -> None:
    state = make_state(status="playing", start="O", next="O")
    outcome = cell_click_action(state=state, identity=player_o, idx=idx)
    assert not outcome.applied
    assert outcome.reason == RejectReason.cell_out_of_range


def test_click_places_symbol_and_passes_turn(make_state: MakeState, player_o: Identity) -> None:
    state = make_state(status="playing", start="O", next="O")

    outcome = cell_click_action(state=state, identity=player_o, idx=6)

    assert outcome.applied
    assert outcome.state.board[6] == "O"
    assert outcome.state.next == Symbol.X
    assert outcome.state.status == GameStatus.playing
    assert state.board[6] == ""


def test_row_win_scenario(make_state: MakeState, player_o: Identity) -> None:
    state = make_state(cells="OOO.............", status="playing", start="X", next="O")

    outcome = cell_click_action(state=state, identity=player_o, idx=3)

    assert outcome.applied
    new = outcome.state
    assert new.board[:4] == ["O", "O", "O", "O"]
    assert new.status == GameStatus.over
    assert new.winner == Symbol.O
    assert new.stripe == [0, 1, 2, 3]
    # The winner opens the next match.
    assert new.start == Symbol.O


def test_last_cell_without_line_is_a_draw(make_state: MakeState, player_x: Identity) -> None:
    # Filling index 15 with X completes OOXX/XXOO/OOXX/XXOX: no uniform line.
    state = make_state(cells="OOXXXXOOOOXXXXO.", status="playing", start="O", next="X")

    outcome = cell_click_action(state=state, identity=player_x, idx=15)

    assert outcome.applied
    new = outcome.state
    assert new.status == GameStatus.over
    assert new.winner is None
    assert new.stripe == []
    assert new.start == Symbol.O


def test_turn_ownership_rule(make_state: MakeState, player_o: Identity, player_x: Identity) -> None:
    playing = make_state(status="playing", start="O", next="O")
    assert is_my_turn(state=playing, identity=player_o)
    assert not is_my_turn(state=playing, identity=player_x)

    # Holding `next` is not enough outside of play.
    ready = make_state(status="ready", start="O", next="O")
    assert holds_next(state=ready, identity=player_o)
    assert not is_my_turn(state=ready, identity=player_o)

    unset = make_state(status="needFlip")
    assert not holds_next(state=unset, identity=player_o)


def test_fsm_tracks_model_status(make_state: MakeState) -> None:
    game = make_state(status="ready", start="O", next="O")
    fsm = GameFSM(game)
    assert fsm.current_state == fsm.ready

    fsm.begin()
    fsm.sync_status_to_model()
    assert game.status == GameStatus.playing

    fsm.finish()
    fsm.sync_status_to_model()
    assert game.status == GameStatus.over


def test_fsm_refuses_illegal_transition(make_state: MakeState) -> None:
    from statemachine.exceptions import TransitionNotAllowed

    fsm = GameFSM(make_state(status="needFlip"))
    with pytest.raises(TransitionNotAllowed):
        fsm.finish()
