"""Redis cache for role and business read paths."""

import json
import logging
from typing import Optional, Any
import redis

from saas_backend.core.config import settings


class CacheService:
    """Redis-backed caching service. Cache failures are never fatal."""

    def __init__(
        self,
        url: str,
        default_ttl: int = 60,
        logger: Optional[logging.Logger] = None,
    ):
        self.url = url
        self.default_ttl = default_ttl
        self.logger = logger or logging.getLogger(__name__)
        self._client: Optional[redis.Redis] = None

    @property
    def client(self) -> redis.Redis:
        if self._client is None:
            self._client = redis.from_url(
                self.url,
                decode_responses=True,
                max_connections=100,
            )
        return self._client

    def get(self, key: str) -> Optional[str]:
        """Get a cached value by key."""
        try:
            return self.client.get(key)
        except redis.RedisError as e:
            self.logger.debug("cache get %s failed: %s", key, e)
            return None

    def set(self, key: str, value: str, ttl_seconds: Optional[int] = None) -> None:
        """Set a cached value with TTL."""
        try:
            self.client.setex(key, ttl_seconds or self.default_ttl, value)
        except redis.RedisError as e:
            self.logger.debug("cache set %s failed: %s", key, e)

    def get_json(self, key: str) -> Optional[Any]:
        """Get and parse a JSON cached value."""
        raw = self.get(key)
        if raw:
            return json.loads(raw)
        return None

    def set_json(self, key: str, value: Any, ttl_seconds: Optional[int] = None) -> None:
        """Serialize and cache a JSON value."""
        self.set(key, json.dumps(value, default=str), ttl_seconds)

    def invalidate_pattern(self, pattern: str) -> None:
        """Delete all keys matching a pattern."""
        try:
            keys = list(self.client.scan_iter(match=pattern))
            if keys:
                self.client.delete(*keys)
        except redis.RedisError as e:
            self.logger.debug("cache invalidate %s failed: %s", pattern, e)

    def health_check(self) -> bool:
        """Check if Redis is reachable."""
        try:
            return bool(self.client.ping())
        except redis.RedisError:
            return False


cache_service = CacheService(settings.REDIS_URL, default_ttl=settings.CACHE_TTL_SECONDS)


def get_cache() -> CacheService:
    """FastAPI dependency returning the shared cache."""
    return cache_service
