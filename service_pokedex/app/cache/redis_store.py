"""
Redis-backed TTL store for upstream responses.
"""

from typing import Optional

import redis.asyncio as redis
from redis.exceptions import RedisError

from shared.config import CACHE_TTL_SECONDS
from shared.errors import CacheUnavailable
from shared.logging import get_logger


class RedisCacheStore:
    """Redis caching layer keyed by the exact upstream URL."""

    def __init__(self, redis_url: str, client: Optional[redis.Redis] = None):
        self.redis_url = redis_url
        self.logger = get_logger("pokedex.cache.redis")
        self._redis: Optional[redis.Redis] = client

    def _get_redis(self) -> redis.Redis:
        """Get Redis connection."""
        if self._redis is None:
            self._redis = redis.from_url(
                self.redis_url,
                socket_connect_timeout=5,
                socket_timeout=5,
                health_check_interval=30
            )
        return self._redis

    async def get(self, key: str) -> Optional[bytes]:
        """Return the cached bytes for ``key``; Redis expires entries itself."""
        try:
            cached = await self._get_redis().get(key)
        except (RedisError, OSError) as exc:
            self.logger.error("Cache get error", key=key, error=str(exc))
            raise CacheUnavailable(details={"operation": "get", "error": str(exc)}) from exc

        if cached is None:
            return None
        return cached.encode("utf-8") if isinstance(cached, str) else cached

    async def set(self, key: str, value: bytes, ttl: int = CACHE_TTL_SECONDS) -> None:
        try:
            await self._get_redis().setex(key, ttl, value)
        except (RedisError, OSError) as exc:
            self.logger.error("Cache set error", key=key, error=str(exc))
            raise CacheUnavailable(details={"operation": "set", "error": str(exc)}) from exc

        self.logger.debug("Cached value", key=key, ttl=ttl)

    async def ping(self) -> bool:
        """Check Redis health."""
        try:
            await self._get_redis().ping()
            return True
        except (RedisError, OSError):
            return False

    async def close(self):
        if self._redis is not None:
            await self._redis.aclose()
            self._redis = None
            self.logger.info("Redis cache closed")
