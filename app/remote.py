"""Client-side views of the blob store.

`RemoteStore` is the seam the session talks to. Any implementation with the same
whole-document get/put contract (for example one backed by compare-and-swap) can be
swapped in without touching the game rules.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Protocol

import httpx
import redis
from pydantic import ValidationError

from app import game_store
from app.api.models import GameState, Identity
from app.errors import StoreUnavailableError

logger = logging.getLogger(__name__)


class RemoteStore(Protocol):
    async def read_game_state(self) -> GameState | None:  # pragma: no cover
        ...

    async def write_game_state(self, state: GameState) -> bool:  # pragma: no cover
        ...

    async def read_identity(self) -> Identity | None:  # pragma: no cover
        ...

    async def write_identity(self, identity: Identity) -> bool:  # pragma: no cover
        ...


class HttpRemoteStore:
    """Talks to the blob store server over HTTP (`/state`, `/token`)."""

    def __init__(self, *, client: httpx.AsyncClient) -> None:
        self._client = client

    @classmethod
    def from_url(cls, base_url: str, *, timeout_s: float = 5.0) -> HttpRemoteStore:
        return cls(client=httpx.AsyncClient(base_url=base_url, timeout=timeout_s))

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _get(self, path: str) -> Any:
        try:
            resp = await self._client.get(path)
            resp.raise_for_status()
            return resp.json()
        except (httpx.HTTPError, ValueError) as e:
            raise StoreUnavailableError(f"GET {path} failed: {e}") from e

    async def _post(self, path: str, payload: dict[str, Any]) -> bool:
        try:
            resp = await self._client.post(path, json=payload)
        except httpx.HTTPError as e:
            raise StoreUnavailableError(f"POST {path} failed: {e}") from e
        if not resp.is_success:
            logger.warning("POST %s returned HTTP %s", path, resp.status_code)
        return resp.is_success

    async def read_game_state(self) -> GameState | None:
        data = await self._get("/state")
        if data is None:
            return None
        try:
            return GameState.model_validate(data)
        except ValidationError as e:
            raise StoreUnavailableError(f"Malformed game state in store: {e}") from e

    async def write_game_state(self, state: GameState) -> bool:
        return await self._post("/state", state.model_dump(mode="json"))

    async def read_identity(self) -> Identity | None:
        data = await self._get("/token")
        if data is None:
            return None
        try:
            return Identity.model_validate(data)
        except ValidationError as e:
            raise StoreUnavailableError(f"Malformed identity in store: {e}") from e

    async def write_identity(self, identity: Identity) -> bool:
        return await self._post("/token", identity.model_dump(mode="json"))


class RedisRemoteStore:
    """In-process adapter straight onto Redis, for same-host sessions and tests.

    redis-py is synchronous, so each call runs in a worker thread; the event loop
    stays free and a caller-side timeout can abandon a wedged call.
    """

    def __init__(self, *, r: redis.Redis) -> None:
        self._r = r

    async def read_game_state(self) -> GameState | None:
        try:
            return await asyncio.to_thread(game_store.read_game_state, r=self._r)
        except redis.RedisError as e:
            raise StoreUnavailableError(f"Redis read failed: {e}") from e
        except ValidationError as e:
            raise StoreUnavailableError(f"Malformed game state in store: {e}") from e

    async def write_game_state(self, state: GameState) -> bool:
        try:
            await asyncio.to_thread(game_store.write_game_state, r=self._r, state=state)
        except redis.RedisError as e:
            raise StoreUnavailableError(f"Redis write failed: {e}") from e
        return True

    async def read_identity(self) -> Identity | None:
        try:
            return await asyncio.to_thread(game_store.read_identity, r=self._r)
        except redis.RedisError as e:
            raise StoreUnavailableError(f"Redis read failed: {e}") from e
        except ValidationError as e:
            raise StoreUnavailableError(f"Malformed identity in store: {e}") from e

    async def write_identity(self, identity: Identity) -> bool:
        try:
            await asyncio.to_thread(game_store.write_identity, r=self._r, identity=identity)
        except redis.RedisError as e:
            raise StoreUnavailableError(f"Redis write failed: {e}") from e
        return True
