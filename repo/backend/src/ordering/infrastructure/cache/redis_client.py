from __future__ import annotations

from functools import lru_cache

import redis


@lru_cache(maxsize=8)
def _build_client(redis_url: str, timeout_seconds: float) -> redis.Redis:
    return redis.Redis.from_url(
        redis_url,
        socket_connect_timeout=timeout_seconds,
        socket_timeout=timeout_seconds,
    )


def get_redis_client(redis_url: str, timeout_seconds: float = 2.0) -> redis.Redis:
    return _build_client(redis_url, timeout_seconds)


def ping_redis(client: redis.Redis) -> bool:
    try:
        return bool(client.ping())
    except Exception:
        return False
