from __future__ import annotations

from collections.abc import Callable, Generator
from typing import Any

import fakeredis
import pytest
from fastapi.testclient import TestClient

from app.api.models import GameState, Identity


@pytest.fixture()
def fake_redis() -> fakeredis.FakeRedis:
    return fakeredis.FakeRedis(decode_responses=True)


@pytest.fixture()
def client_and_redis(fake_redis: fakeredis.FakeRedis) -> Generator[tuple[TestClient, fakeredis.FakeRedis], None, None]:
    """FastAPI TestClient wired to a fakeredis instance."""

    from app.api.deps import get_redis
    from app.main import app

    def _override() -> Generator[fakeredis.FakeRedis, None, None]:
        yield fake_redis

    app.dependency_overrides[get_redis] = _override
    with TestClient(app) as c:
        yield c, fake_redis
    app.dependency_overrides.clear()


def _board(cells: str) -> list[str]:
    """16-char shorthand: '.' is empty, 'O'/'X' are symbols."""

    assert len(cells) == 16
    return ["" if ch == "." else ch for ch in cells]


@pytest.fixture()
def make_state() -> Callable[..., GameState]:
    def _make(**overrides: Any) -> GameState:
        data: dict[str, Any] = {"timestamp": 1_000}
        if "cells" in overrides:
            data["board"] = _board(overrides.pop("cells"))
        data.update(overrides)
        return GameState.model_validate(data)

    return _make


@pytest.fixture()
def player_o() -> Identity:
    return Identity(user="O", browser="Chrome", timestamp=1)


@pytest.fixture()
def player_x() -> Identity:
    return Identity(user="X", browser="Firefox", timestamp=2)
