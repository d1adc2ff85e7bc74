from __future__ import annotations

import logging
from collections.abc import Generator

import redis

from app.config import settings_from_env
from app.infra.redis_client import create_redis

logger = logging.getLogger(__name__)


def get_redis() -> Generator[redis.Redis, None, None]:
    client = create_redis(timeout_s=settings_from_env().store_timeout_s)
    try:
        yield client
    finally:
        try:
            client.close()
        except redis.RedisError as e:
            logger.debug("Ignoring error while closing redis client: %s", e)
