"""
Redis cache connection and operations.
Backs the shared listing caches so every worker sees the same entries.
"""

import json
from typing import Any

import redis.asyncio as redis
import structlog

logger = structlog.get_logger()


class RedisCache:
    """Redis connection manager with async support."""

    def __init__(self) -> None:
        self.client: redis.Redis | None = None

    async def connect(self, redis_url: str) -> None:
        """Establish connection to Redis."""
        try:
            self.client = redis.from_url(redis_url, decode_responses=True)

            # Test connection
            await self.client.ping()

            logger.info("Redis connection established", url=redis_url)

        except Exception as e:
            logger.error("Failed to connect to Redis", error=str(e))
            raise

    async def disconnect(self) -> None:
        """Close Redis connection."""
        if self.client:
            await self.client.aclose()
            logger.info("Redis connection closed")

    async def health_check(self) -> dict[str, bool | str]:
        """Check Redis connection health."""
        if not self.client:
            return {"connected": False, "error": "No client connection"}

        try:
            await self.client.ping()
        except Exception as e:
            logger.error("Redis health check failed", error=str(e))
            return {"connected": False, "error": str(e)}

        return {"connected": True}

    async def get(self, key: str) -> Any | None:
        """
        Get a JSON value from the cache.

        A failed read is logged and treated as a miss.
        """
        if not self.client:
            raise RuntimeError("Redis connection not established")

        try:
            value = await self.client.get(key)
        except Exception as e:
            logger.error("Redis get operation failed", key=key, error=str(e))
            return None

        if value is None:
            logger.debug("Cache MISS", cache_key=key)
            return None

        logger.debug("Cache HIT", cache_key=key)
        try:
            return json.loads(value)
        except json.JSONDecodeError:
            logger.warning("Discarding undecodable cache entry", cache_key=key)
            return None

    async def set(self, key: str, value: Any, ttl_seconds: int | None = None) -> bool:
        """Set a JSON value with optional TTL."""
        if not self.client:
            raise RuntimeError("Redis connection not established")

        try:
            await self.client.set(key, json.dumps(value, default=str), ex=ttl_seconds)
            return True
        except Exception as e:
            logger.error("Redis set operation failed", key=key, error=str(e))
            return False

    async def delete(self, *keys: str) -> int:
        """Delete keys; returns how many existed."""
        if not self.client:
            raise RuntimeError("Redis connection not established")

        try:
            deleted: int = await self.client.delete(*keys)
            return deleted
        except Exception as e:
            logger.error("Redis delete operation failed", keys=list(keys), error=str(e))
            return 0
