from __future__ import annotations

import os

import redis


def get_redis_url() -> str:
    return os.environ.get("REDIS_URL", "redis://localhost:6379/0")


def create_redis(url: str | None = None, *, timeout_s: float | None = None) -> redis.Redis:
    # decode_responses=True => JSON strings in/out instead of bytes
    # timeout_s bounds connect and every command so a wedged server raises instead of hanging
    return redis.Redis.from_url(
        url or get_redis_url(),
        decode_responses=True,
        socket_timeout=timeout_s,
        socket_connect_timeout=timeout_s,
    )
