from __future__ import annotations

import json
import logging
from typing import Any, Optional

from fastapi.encoders import jsonable_encoder

from archivist.utils.redis_client import get_redis


logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)


def cache_get_json(key: str) -> Optional[Any]:
    """
    Returns the decoded value stored under `key`, or None on a miss.
    Redis being unavailable counts as a miss.
    """
    try:
        redis = get_redis()
        cached = redis.get(key)
    except Exception as exc:
        logger.warning("cache get error (key=%s): %r", key, exc)
        return None

    if cached is None:
        logger.info("cache miss (key=%s)", key)
        return None

    logger.info("cache hit (key=%s)", key)
    return json.loads(cached)


def cache_set_json(key: str, value: Any, ttl_seconds: int) -> None:
    try:
        redis = get_redis()
        redis.setex(key, ttl_seconds, json.dumps(jsonable_encoder(value)))
        logger.info("cache set (key=%s, ttl=%s)", key, ttl_seconds)
    except Exception as exc:
        logger.warning("cache set error (key=%s): %r", key, exc)


def cache_delete(*keys: str) -> None:
    if not keys:
        return
    try:
        redis = get_redis()
        redis.delete(*keys)
        logger.info("cache invalidated (keys=%s)", ", ".join(keys))
    except Exception as exc:
        logger.warning("cache invalidation error: %r", exc)


__all__ = ["cache_get_json", "cache_set_json", "cache_delete"]
