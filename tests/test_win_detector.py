from __future__ import annotations

import pytest

from app.api.models import Symbol
from app.core.win import WINNING_LINES, detect_win, is_full


def _board(cells: str) -> list[str]:
    return ["" if ch == "." else ch for ch in cells]


def test_there_are_ten_lines_of_four() -> None:
    assert len(WINNING_LINES) == 10
    assert all(len(line) == 4 for line in WINNING_LINES)
    assert len(set(WINNING_LINES)) == 10


@pytest.mark.parametrize("line", WINNING_LINES)
@pytest.mark.parametrize("symbol", ["O", "X"])
def test_every_line_is_detected(line: tuple[int, int, int, int], symbol: str) -> None:
    board = [""] * 16
    for i in line:
        board[i] = symbol

    win = detect_win(board)

    assert win is not None
    assert win.winner == Symbol(symbol)
    assert win.stripe == line


def test_empty_board_has_no_winner() -> None:
    assert detect_win([""] * 16) is None


def test_three_in_a_row_is_not_a_win() -> None:
    assert detect_win(_board("OOO.............")) is None


def test_mixed_line_is_not_a_win() -> None:
    assert detect_win(_board("OOOX............")) is None


def test_full_board_without_line_has_no_winner() -> None:
    # Rows alternate OOXX / XXOO so no row, column or diagonal is uniform.
    board = _board("OOXXXXOOOOXXXXOO")
    assert is_full(board)
    assert detect_win(board) is None


def test_rows_are_checked_before_columns() -> None:
    # Row 0 and column 0 both complete for O; the row comes first in priority order.
    board = _board("OOOOO...O...O...")
    win = detect_win(board)
    assert win is not None
    assert win.stripe == (0, 1, 2, 3)


def test_anti_diagonal() -> None:
    win = detect_win(_board("...X..X..X..X..."))
    assert win is not None
    assert win.winner == Symbol.X
    assert win.stripe == (3, 6, 9, 12)


def test_wrong_board_size_is_rejected() -> None:
    with pytest.raises(ValueError):
        detect_win([""] * 9)
    with pytest.raises(ValueError):
        is_full([""] * 17)


def test_is_full() -> None:
    assert not is_full([""] * 16)
    assert not is_full(_board("OXOXOXOXOXOXOXO."))
    assert is_full(_board("OXOXOXOXOXOXOXOX"))
