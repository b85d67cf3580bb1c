"""
Redis caching utilities for dashboard aggregates
Reduces database load for the analytics views
"""
import json
import logging
from typing import Any, Optional

import redis
from fastapi import Request

logger = logging.getLogger(__name__)


class Cache:
    """Redis cache wrapper with automatic serialization"""

    def __init__(self, redis_url: Optional[str] = None, client: Optional[Any] = None):
        self.redis_url = redis_url
        self.redis_client = client

    @property
    def enabled(self) -> bool:
        return self.redis_client is not None or bool(self.redis_url)

    def _get_client(self):
        """Lazy load Redis client"""
        if self.redis_client is None:
            if not self.redis_url:
                return None
            try:
                self.redis_client = redis.from_url(
                    self.redis_url,
                    decode_responses=True,
                    socket_connect_timeout=5,
                    socket_timeout=5,
                    retry_on_timeout=True,
                    health_check_interval=30,
                )
            except Exception as e:
                logger.warning(f"⚠️ Redis cache unavailable: {e}")
                return None
        return self.redis_client

    def get(self, key: str) -> Optional[Any]:
        """Get value from cache"""
        client = self._get_client()
        if not client:
            return None

        try:
            value = client.get(key)
            if value:
                logger.debug(f"✅ Cache HIT: {key}")
                return json.loads(value)
            logger.debug(f"❌ Cache MISS: {key}")
            return None
        except Exception as e:
            logger.error(f"❌ Cache get error for {key}: {e}")
            return None

    def set(self, key: str, value: Any, ttl: int = 60) -> bool:
        """Set value in cache with TTL"""
        client = self._get_client()
        if not client:
            return False

        try:
            serialized = json.dumps(value)
            client.setex(key, ttl, serialized)
            logger.debug(f"✅ Cache SET: {key} (TTL: {ttl}s)")
            return True
        except Exception as e:
            logger.error(f"❌ Cache set error for {key}: {e}")
            return False

    def delete_pattern(self, pattern: str) -> int:
        """Delete all keys matching pattern (e.g., 'dashboard:*')"""
        client = self._get_client()
        if not client:
            return 0

        try:
            keys = list(client.scan_iter(match=pattern))
            if keys:
                deleted = client.delete(*keys)
                logger.debug(f"✅ Cache DELETE pattern: {pattern} ({deleted} keys)")
                return deleted
            return 0
        except Exception as e:
            logger.error(f"❌ Cache delete pattern error for {pattern}: {e}")
            return 0


def invalidate_dashboard_cache(cache: Optional[Cache]) -> int:
    """Drop cached dashboard stats after bookings or payments change"""
    if cache is None:
        return 0
    return cache.delete_pattern("dashboard:*")


def get_cache(request: Request) -> Optional[Cache]:
    """Cache the app was built with, if any"""
    return getattr(request.app.state, "cache", None)
