from __future__ import annotations

import json
import logging
from typing import Any

import redis

from app.api.models import GameState, Identity

logger = logging.getLogger(__name__)

# One key per document; each write replaces the whole value.
STATE_KEY = "fourinrow:state"
IDENTITY_KEY = "fourinrow:token"


def put_blob(*, r: redis.Redis, key: str, value: Any) -> None:
    """Store `value` as an opaque JSON document. No schema validation."""

    r.set(key, json.dumps(value))
    logger.debug("Stored %s", key)


def get_blob(*, r: redis.Redis, key: str) -> Any | None:
    raw = r.get(key)
    if not raw:
        return None
    return json.loads(raw)


def write_game_state(*, r: redis.Redis, state: GameState) -> None:
    r.set(STATE_KEY, state.model_dump_json())


def read_game_state(*, r: redis.Redis) -> GameState | None:
    raw = r.get(STATE_KEY)
    if not raw:
        return None
    return GameState.model_validate_json(raw)


def write_identity(*, r: redis.Redis, identity: Identity) -> None:
    r.set(IDENTITY_KEY, identity.model_dump_json())


def read_identity(*, r: redis.Redis) -> Identity | None:
    raw = r.get(IDENTITY_KEY)
    if not raw:
        return None
    return Identity.model_validate_json(raw)
