"""
Shared TTL cache for style listings, stored in Redis.
Owned by the app (app.state) and injected into StyleService.
"""

from typing import Any

import structlog
from pydantic import TypeAdapter

from ..database.redis import RedisCache

logger = structlog.get_logger()

KEY_PREFIX = "styles"
LISTING_KEYS = ("summary", "full")

_JSON: TypeAdapter[Any] = TypeAdapter(Any)


class StyleCache:
    """
    Keyed cache of style listings ("summary" / "full").

    Entries expire after ttl_seconds (Redis EX) and are dropped together on
    invalidate(), which every style mutation must call.
    """

    def __init__(self, redis_cache: RedisCache, ttl_seconds: int = 60):
        """
        Args:
            redis_cache: Connected Redis cache
            ttl_seconds: Entry lifetime
        """
        self.redis = redis_cache
        self.ttl_seconds = ttl_seconds

    @staticmethod
    def _redis_key(key: str) -> str:
        return f"{KEY_PREFIX}:{key}"

    async def get(self, key: str) -> Any | None:
        """Cached listing, or None if missing or expired."""
        return await self.redis.get(self._redis_key(key))

    async def set(self, key: str, value: Any) -> Any:
        """
        Store a listing and return it in its cached (JSON) form.

        Datetimes become ISO strings so hits and misses serialize alike.
        """
        encoded = _JSON.dump_python(value, mode="json")
        await self.redis.set(self._redis_key(key), encoded, ttl_seconds=self.ttl_seconds)
        return encoded

    async def invalidate(self) -> None:
        """Drop every listing key."""
        await self.redis.delete(*(self._redis_key(key) for key in LISTING_KEYS))
        logger.info("Style cache invalidated")
