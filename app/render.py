from __future__ import annotations

from app.api.models import GameState, GameStatus, Identity

CONTROL_LABELS: dict[GameStatus, str] = {
    GameStatus.need_flip: "Flip",
    GameStatus.playing: "Clear",
    GameStatus.ready: "Start",
    GameStatus.over: "Start",
}


def control_label(status: GameStatus) -> str:
    return CONTROL_LABELS[status]


def _cell_text(state: GameState, idx: int) -> str:
    value = state.board[idx]
    if not value:
        return f"{idx:^4}"
    if idx in state.stripe:
        return f"[{value}]".center(4)
    return value.center(4)


def board_to_text(state: GameState) -> str:
    """4x4 text grid. Empty cells show their index, winning cells are bracketed."""

    rows = []
    for r in range(4):
        rows.append("|".join(_cell_text(state, r * 4 + c) for c in range(4)))
    return "\n".join(rows)


def status_line(state: GameState, identity: Identity | None = None) -> str:
    if state.status == GameStatus.need_flip:
        line = "Nobody has flipped yet."
    elif state.status == GameStatus.ready:
        line = f"{state.next.value if state.next else '?'} starts; press Start."
    elif state.status == GameStatus.playing:
        line = f"{state.next.value if state.next else '?'} to move."
    elif state.winner is not None:
        line = f"{state.winner.value} wins."
    else:
        line = "Draw."

    if identity is not None:
        line += f" You are {identity.user}."
    return f"{line} [{control_label(state.status)}]"


def render(state: GameState, identity: Identity | None = None) -> str:
    return f"{board_to_text(state)}\n{status_line(state, identity)}"
