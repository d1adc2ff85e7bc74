from __future__ import annotations

import time
from collections.abc import Callable

Clock = Callable[[], int]


def now_ms() -> int:
    """Wall-clock time in epoch milliseconds; the ordering token written into GameState."""

    return time.time_ns() // 1_000_000
