"""
Snapshot storage for the theme editor.

The editor keeps the latest effective theme as a JSON snapshot so a reload
resumes where the user left off, even before they hit save. Snapshots are
a cache: losing one costs an edit session, never persisted data.

Two backends share the same two-method interface:

- RedisSnapshotCache: shared across workers, entries expire after
  THEME_CACHE_TTL_SECONDS
- InMemorySnapshotCache: per process; tests and single-worker development
"""

from typing import Optional, Protocol

from redis import Redis
from redis.exceptions import RedisError

from app.core.config import settings
from app.core.logging import get_logger
from app.db.redis import get_redis_client

logger = get_logger(__name__)


class SnapshotCache(Protocol):
    def load(self, key: str) -> Optional[str]:
        ...

    def store(self, key: str, payload: str) -> None:
        ...


class RedisSnapshotCache:
    """Snapshots under ``theme_settings:<key>`` in Redis."""

    KEY_PREFIX = "theme_settings:"

    def __init__(self, redis: Optional[Redis] = None, ttl_seconds: Optional[int] = None):
        self._redis = redis
        self.ttl_seconds = ttl_seconds or settings.THEME_CACHE_TTL_SECONDS

    @property
    def redis(self) -> Redis:
        if self._redis is None:
            self._redis = get_redis_client()
        return self._redis

    def _key(self, key: str) -> str:
        return f"{self.KEY_PREFIX}{key}"

    def load(self, key: str) -> Optional[str]:
        # an unreachable cache reads as "no snapshot"
        try:
            return self.redis.get(self._key(key))
        except RedisError as e:
            logger.warning("theme_snapshot_load_failed", key=key, error=str(e))
            return None

    def store(self, key: str, payload: str) -> None:
        try:
            self.redis.set(self._key(key), payload, ex=self.ttl_seconds)
        except RedisError as e:
            logger.warning("theme_snapshot_store_failed", key=key, error=str(e))


class InMemorySnapshotCache:
    """Dictionary-backed cache."""

    def __init__(self):
        self._entries: dict[str, str] = {}

    def load(self, key: str) -> Optional[str]:
        return self._entries.get(key)

    def store(self, key: str, payload: str) -> None:
        self._entries[key] = payload

    def clear(self) -> None:
        self._entries.clear()


_memory_cache = InMemorySnapshotCache()


def get_snapshot_cache() -> SnapshotCache:
    """Cache backend selected by THEME_CACHE_BACKEND."""
    if settings.THEME_CACHE_BACKEND == "memory":
        return _memory_cache
    return RedisSnapshotCache()
