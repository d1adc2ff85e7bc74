from __future__ import annotations

import logging
from typing import Any

import redis
from fastapi import APIRouter, Body, Depends, HTTPException, status

from app.api.deps import get_redis
from app.api.models import StoreAck
from app.game_store import IDENTITY_KEY, STATE_KEY, get_blob, put_blob

logger = logging.getLogger(__name__)

router = APIRouter()

APP_NAME = "four-in-a-row"
APP_VERSION = "0.1.0"


def _read(r: redis.Redis, key: str) -> Any | None:
    try:
        return get_blob(r=r, key=key)
    except redis.RedisError as e:
        logger.warning("Blob read failed for %s: %s", key, e)
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Store unavailable") from e


def _write(r: redis.Redis, key: str, body: dict[str, Any]) -> StoreAck:
    try:
        put_blob(r=r, key=key, value=body)
    except redis.RedisError as e:
        logger.warning("Blob write failed for %s: %s", key, e)
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Store unavailable") from e
    return StoreAck()


@router.get("/healthcheck")
async def healthcheck() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/info")
async def info() -> dict[str, str]:
    return {"name": APP_NAME, "version": APP_VERSION}


# The server is a passive blob store: bodies are stored verbatim, no game rules applied.


@router.get("/state")
def get_state_route(r: redis.Redis = Depends(get_redis)) -> Any:
    return _read(r, STATE_KEY)


@router.post("/state", response_model=StoreAck)
def put_state_route(body: dict[str, Any] = Body(...), r: redis.Redis = Depends(get_redis)) -> StoreAck:
    return _write(r, STATE_KEY, body)


@router.get("/token")
def get_token_route(r: redis.Redis = Depends(get_redis)) -> Any:
    return _read(r, IDENTITY_KEY)


@router.post("/token", response_model=StoreAck)
def put_token_route(body: dict[str, Any] = Body(...), r: redis.Redis = Depends(get_redis)) -> StoreAck:
    return _write(r, IDENTITY_KEY, body)
