from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Optional

import redis

if TYPE_CHECKING:
    from workout_ai.ai.types import AILogEntry


logger = logging.getLogger(__name__)


def create_redis_client(redis_url: Optional[str]) -> Optional[redis.Redis]:
    """Connect to Redis if configured, otherwise return None."""
    if not redis_url or redis_url.lower() in ("none", "disabled"):
        logger.info("Redis is not configured. AI logs will be kept in memory only.")
        return None

    try:
        client = redis.Redis.from_url(
            redis_url,
            decode_responses=True,
            socket_connect_timeout=2,  # Fast timeout
            socket_timeout=2,
            retry_on_timeout=False,
        )
        client.ping()
    except redis.RedisError as e:
        logger.warning(f"Redis not available: {e}. AI logs will be kept in memory only.")
        return None

    logger.info("Redis connection established successfully")
    return client


class RedisLogSink:
    """Mirrors AI log entries into a capped Redis list (newest first)."""

    def __init__(self, client: redis.Redis, key: str, capacity: int) -> None:
        self.client = client
        self.key = key
        self.capacity = capacity

    def write(self, entry: "AILogEntry") -> None:
        pipe = self.client.pipeline(transaction=True)
        pipe.lpush(self.key, json.dumps(entry.to_dict(), ensure_ascii=False))
        pipe.ltrim(self.key, 0, self.capacity - 1)
        pipe.execute()

    def clear(self) -> None:
        self.client.delete(self.key)
