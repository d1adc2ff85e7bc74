from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from app.api.models import BOARD_SIZE, Symbol

Line = tuple[int, int, int, int]

# Evaluation order is fixed: rows, columns, main diagonal, anti-diagonal.
WINNING_LINES: tuple[Line, ...] = (
    (0, 1, 2, 3),
    (4, 5, 6, 7),
    (8, 9, 10, 11),
    (12, 13, 14, 15),
    (0, 4, 8, 12),
    (1, 5, 9, 13),
    (2, 6, 10, 14),
    (3, 7, 11, 15),
    (0, 5, 10, 15),
    (3, 6, 9, 12),
)


@dataclass(frozen=True, slots=True)
class Win:
    winner: Symbol
    stripe: Line


def _check_board(board: Sequence[str]) -> None:
    if len(board) != BOARD_SIZE:
        raise ValueError(f"board must have {BOARD_SIZE} cells (got {len(board)})")


def detect_win(board: Sequence[str]) -> Win | None:
    """Return the first completed line on `board`, or None.

    A line counts only when all four cells are non-empty and identical.
    """

    _check_board(board)
    for line in WINNING_LINES:
        a, b, c, d = (board[i] for i in line)
        if a and a == b == c == d:
            return Win(winner=Symbol(a), stripe=line)
    return None


def is_full(board: Sequence[str]) -> bool:
    _check_board(board)
    return all(board)
