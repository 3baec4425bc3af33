import json
import logging
from typing import Optional

import redis.exceptions
from app.core.config import settings
from app.db.Connection import database

logger = logging.getLogger(__name__)


def _key(short_code: str) -> str:
    return f"link:{short_code}"


def get(short_code: str) -> Optional[dict]:
    if database.redis_client is None:
        return None
    try:
        cached = database.redis_client.get(_key(short_code))
    except redis.exceptions.RedisError:
        logger.warning(f"Redis lookup failed for {short_code}")
        return None

    if not cached:
        return None
    try:
        entry = json.loads(cached)
    except ValueError:
        logger.warning(f"Discarding unreadable cache entry for {short_code}")
        return None
    logger.info(f"Redirect cache HIT for {short_code}")
    return entry


def put(short_code: str, entry: dict) -> None:
    if database.redis_client is None:
        return
    try:
        database.redis_client.setex(_key(short_code), settings.CACHE_TTL, json.dumps(entry))
        logger.debug(f"Cached {short_code} -> {str(entry.get('original_url'))[:50]}")
    except redis.exceptions.RedisError:
        logger.warning(f"Failed to cache {short_code}, Redis unavailable")


def invalidate(short_code: str) -> None:
    if database.redis_client is None:
        return
    try:
        database.redis_client.delete(_key(short_code))
    except redis.exceptions.RedisError:
        logger.warning(f"Failed to invalidate cache for {short_code}, Redis unavailable")
