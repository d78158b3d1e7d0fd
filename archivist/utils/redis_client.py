from __future__ import annotations

import socket
from typing import Optional

from redis import Redis
from redis.exceptions import ConnectionError as RedisConnectionError

from archivist.core.config import settings


_redis_client: Optional[Redis] = None


def _create_redis_client() -> Redis:
    """
    Connects using REDIS_URL and falls back to localhost:6379 on a
    DNS/connect failure, so the same config works inside docker-compose
    (host=redis) and when uvicorn runs on the host.
    """
    primary_url = settings.redis_url

    try:
        client = Redis.from_url(primary_url, decode_responses=True)
        client.ping()
        return client
    except (RedisConnectionError, socket.gaierror):
        pass

    fallback_url = "redis://localhost:6379/0"
    client = Redis.from_url(fallback_url, decode_responses=True)
    # No Redis at all: let the error reach the caller.
    client.ping()
    return client


def get_redis() -> Redis:
    global _redis_client
    if _redis_client is None:
        _redis_client = _create_redis_client()
    return _redis_client


__all__ = ["get_redis"]
