from __future__ import annotations

import asyncio
import logging
import random
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TypeVar

from app.actions import cell_click_action, control_action, is_my_turn
from app.api.models import GameState, Identity, default_game_state
from app.core.clock import Clock, now_ms
from app.errors import StoreUnavailableError
from app.fsm import ActionOutcome, RejectReason
from app.identity import register_identity
from app.remote import RemoteStore

logger = logging.getLogger(__name__)

T = TypeVar("T")

ChangeListener = Callable[[GameState], None]


@dataclass(frozen=True, slots=True)
class SyncConfig:
    # Seconds between polls of the store.
    interval_s: float = 1.0
    # Upper bound for any single store round-trip.
    timeout_s: float = 5.0


class GameSession:
    """One participant's view of the shared game.

    Consistency is last-write-wins on `timestamp`: a poll adopts the remote state
    wholesale whenever its timestamp differs from the local one. There is no
    compare-and-swap, so two clients acting inside one polling window can overwrite
    each other (the later write silently wins). Timestamps come from each client's
    own clock, so clock skew can also pick the "wrong" newest state.

    Poll ticks and user actions are serialized by a per-session lock: one store
    round-trip in flight at a time.
    """

    def __init__(
        self,
        *,
        store: RemoteStore,
        identity: Identity,
        config: SyncConfig | None = None,
        clock: Clock = now_ms,
        rng: random.Random | None = None,
        on_change: ChangeListener | None = None,
    ) -> None:
        self._store = store
        self.identity = identity
        self._config = config or SyncConfig()
        self._clock = clock
        self._rng = rng or random.Random()
        self._on_change = on_change
        self._state: GameState | None = None
        self._lock = asyncio.Lock()

    @property
    def state(self) -> GameState:
        if self._state is None:
            raise RuntimeError("Session not started. Call start() first.")
        return self._state

    @property
    def is_my_turn(self) -> bool:
        return self._state is not None and is_my_turn(state=self._state, identity=self.identity)

    async def _call(self, op: Awaitable[T]) -> T:
        try:
            return await asyncio.wait_for(op, timeout=self._config.timeout_s)
        except TimeoutError as e:
            raise StoreUnavailableError(f"Store call timed out after {self._config.timeout_s}s") from e

    def _notify(self) -> None:
        if self._on_change is not None and self._state is not None:
            self._on_change(self._state)

    async def start(self) -> GameState:
        """Register the identity and load the shared state, creating a default one if the store is empty.

        Store failures here are not fatal: the session starts from a default state and
        the first successful poll replaces it.
        """

        async with self._lock:
            try:
                await self._call(register_identity(store=self._store, identity=self.identity))
            except StoreUnavailableError as e:
                logger.warning("Identity registration skipped: %s", e)

            remote: GameState | None = None
            try:
                remote = await self._call(self._store.read_game_state())
            except StoreUnavailableError as e:
                logger.warning("Initial state load failed, starting from defaults: %s", e)

            self._state = remote if remote is not None else default_game_state(timestamp=self._clock())
            self._notify()
            return self._state

    def reconcile(self, remote: GameState | None) -> bool:
        """Adopt `remote` if its timestamp differs from the local one. Returns True on adoption."""

        if remote is None:
            return False
        if self._state is not None and remote.timestamp == self._state.timestamp:
            return False
        logger.debug("Adopting remote state ts=%s status=%s", remote.timestamp, remote.status.value)
        self._state = remote
        self._notify()
        return True

    async def poll_once(self) -> bool:
        """One sync tick. A failed read skips the tick and leaves local state alone."""

        async with self._lock:
            try:
                remote = await self._call(self._store.read_game_state())
            except StoreUnavailableError as e:
                logger.warning("Poll tick skipped: %s", e)
                return False
            return self.reconcile(remote)

    async def run(self, *, stop: asyncio.Event | None = None) -> None:
        """Poll every `interval_s` until `stop` is set (forever if no event is given)."""

        stop = stop or asyncio.Event()
        while not stop.is_set():
            try:
                await self.poll_once()
            except Exception:
                # A broken listener must not end syncing for the rest of the session.
                logger.exception("Poll tick failed; continuing")
            try:
                await asyncio.wait_for(stop.wait(), timeout=self._config.interval_s)
            except TimeoutError:
                continue

    async def control(self) -> ActionOutcome:
        async with self._lock:
            outcome = control_action(state=self.state, identity=self.identity, rng=self._rng)
            return await self._commit(outcome)

    async def click(self, idx: int) -> ActionOutcome:
        async with self._lock:
            outcome = cell_click_action(state=self.state, identity=self.identity, idx=idx)
            return await self._commit(outcome)

    async def _commit(self, outcome: ActionOutcome) -> ActionOutcome:
        if not outcome.applied:
            return outcome

        current = self.state
        # Never reuse the timestamp we just read, or peers would not notice the write.
        stamp = max(self._clock(), current.timestamp + 1)
        stamped = outcome.state.model_copy(update={"timestamp": stamp})

        try:
            ok = await self._call(self._store.write_game_state(stamped))
        except StoreUnavailableError as e:
            logger.warning("Action not applied, store write failed: %s", e)
            return ActionOutcome.rejected(current, RejectReason.store_unavailable)
        if not ok:
            logger.warning("Action not applied, store rejected the write")
            return ActionOutcome.rejected(current, RejectReason.store_unavailable)

        self._state = stamped
        self._notify()
        return ActionOutcome(applied=True, state=stamped)
