"""
Redis connection management.

Redis holds the editor's theme snapshots (see app.services.theme.cache):
small JSON documents read and written synchronously on every edit, so a
single shared synchronous client is enough.
"""

import logging
from typing import Optional

from redis import Redis
from redis.exceptions import RedisError

from app.core.config import settings

logger = logging.getLogger(__name__)

_redis_client: Optional[Redis] = None


def get_redis_client() -> Redis:
    """
    Get the shared synchronous Redis client, creating it on first use.

    Returns:
        Synchronous Redis client instance
    """
    global _redis_client

    if _redis_client is None:
        logger.info("Initializing Redis client")
        _redis_client = Redis.from_url(
            settings.REDIS_URL,
            decode_responses=True,
            socket_connect_timeout=5,
            socket_keepalive=True
        )

        try:
            _redis_client.ping()
            logger.info("Redis connection successful")
        except RedisError as e:
            logger.error(f"Redis connection failed: {e}")
            _redis_client = None
            raise

    return _redis_client


def close_redis() -> None:
    """
    Close the Redis client.

    Called during application shutdown.
    """
    global _redis_client

    if _redis_client is not None:
        logger.info("Closing Redis connection")
        _redis_client.close()
        _redis_client = None


# ========================================
# Health Check
# ========================================

def check_redis_health() -> bool:
    """
    Check if Redis is healthy and responsive.

    Returns:
        bool: True if Redis is healthy, False otherwise
    """
    try:
        return get_redis_client().ping() is True
    except RedisError as e:
        logger.error(f"Redis health check failed: {e}")
        return False
