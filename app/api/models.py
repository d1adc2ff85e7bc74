from __future__ import annotations

from enum import StrEnum
from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator, model_validator

BOARD_SIZE = 16

Cell = Literal["", "O", "X"]


class Symbol(StrEnum):
    O = "O"
    X = "X"

    @property
    def other(self) -> Symbol:
        return Symbol.X if self is Symbol.O else Symbol.O


class GameStatus(StrEnum):
    need_flip = "needFlip"
    ready = "ready"
    playing = "playing"
    over = "over"


def empty_board() -> list[str]:
    return [""] * BOARD_SIZE


class GameState(BaseModel):
    """The single shared game document.

    Replaced wholesale on every write; `timestamp` (epoch milliseconds) is the only
    ordering token between clients.
    """

    board: list[Cell] = Field(default_factory=empty_board, min_length=BOARD_SIZE, max_length=BOARD_SIZE)
    start: Symbol | None = None
    next: Symbol | None = None
    status: GameStatus = GameStatus.need_flip

    # Unset on draw and while no match has finished.
    winner: Symbol | None = None
    stripe: list[int] = Field(default_factory=list)

    timestamp: int = 0

    @field_validator("start", "next", "winner", mode="before")
    @classmethod
    def _blank_symbol_is_unset(cls, value: Any) -> Any:
        # Other clients may write "" instead of null for an unset symbol.
        if value == "":
            return None
        return value

    @field_validator("stripe", mode="before")
    @classmethod
    def _null_stripe_is_empty(cls, value: Any) -> Any:
        return [] if value is None else value

    @model_validator(mode="after")
    def _check_stripe(self) -> GameState:
        if not self.stripe:
            return self
        if len(self.stripe) != 4:
            raise ValueError("stripe must hold exactly 4 indices")
        if any(i < 0 or i >= BOARD_SIZE for i in self.stripe):
            raise ValueError("stripe index out of range")
        if self.winner is None or any(self.board[i] != self.winner.value for i in self.stripe):
            raise ValueError("stripe cells must all hold the winner")
        return self


class Identity(BaseModel):
    # Self-declared; not guaranteed to be a valid Symbol.
    user: str
    browser: str
    timestamp: int


def default_game_state(*, timestamp: int) -> GameState:
    return GameState(timestamp=timestamp)


class StoreAck(BaseModel):
    status: str = "ok"
