"""
Redis caching utilities for dashboard counters
Fail-open: a missing or unreachable Redis only means a cache miss
"""
import json
import logging
from typing import Any, Optional

import redis

from .config import CACHE_ENABLED, REDIS_URL

logger = logging.getLogger(__name__)

redis_client: Optional[redis.Redis] = None


def get_redis_client() -> Optional[redis.Redis]:
    """Get or create the Redis client, None when caching is disabled or Redis is down"""
    global redis_client

    if not CACHE_ENABLED:
        return None

    if redis_client is None:
        masked_url = REDIS_URL.split("@")[-1] if "@" in REDIS_URL else REDIS_URL
        logger.info(f"🔄 Initializing Redis connection: {masked_url}")
        try:
            client = redis.from_url(
                REDIS_URL,
                decode_responses=True,
                socket_connect_timeout=5,
                socket_timeout=5,
                retry_on_timeout=True,
            )
            client.ping()
            redis_client = client
            logger.info("✅ Redis connected successfully")
        except redis.RedisError as e:
            logger.warning(f"⚠️ Redis cache unavailable, serving uncached: {e}")
            return None

    return redis_client


class Cache:
    """Redis cache wrapper with JSON serialization"""

    def __init__(self, client_factory=get_redis_client):
        self._client_factory = client_factory

    def get(self, key: str) -> Optional[Any]:
        client = self._client_factory()
        if not client:
            return None

        try:
            value = client.get(key)
            if value:
                logger.debug(f"✅ Cache HIT: {key}")
                return json.loads(value)
            logger.debug(f"❌ Cache MISS: {key}")
            return None
        except redis.RedisError as e:
            logger.error(f"❌ Cache get error for {key}: {e}")
            return None

    def set(self, key: str, value: Any, ttl: int = 60) -> bool:
        client = self._client_factory()
        if not client:
            return False

        try:
            client.setex(key, ttl, json.dumps(value))
            logger.debug(f"✅ Cache SET: {key} (TTL: {ttl}s)")
            return True
        except redis.RedisError as e:
            logger.error(f"❌ Cache set error for {key}: {e}")
            return False

    def delete_pattern(self, pattern: str) -> int:
        """Delete all keys matching pattern (e.g. 'dashboard:org-id:*')"""
        client = self._client_factory()
        if not client:
            return 0

        try:
            keys = list(client.scan_iter(match=pattern))
            if keys:
                deleted = client.delete(*keys)
                logger.debug(f"✅ Cache DELETE pattern: {pattern} ({deleted} keys)")
                return deleted
            return 0
        except redis.RedisError as e:
            logger.error(f"❌ Cache delete pattern error for {pattern}: {e}")
            return 0


# Global cache instance
cache = Cache()


def dashboard_key(organization_id: str, unit_id: Optional[str], day: str) -> str:
    return f"dashboard:{organization_id}:{unit_id or 'none'}:{day}"


def invalidate_dashboard(organization_id: str) -> int:
    return cache.delete_pattern(f"dashboard:{organization_id}:*")
