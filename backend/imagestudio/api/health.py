"""
Health check endpoint for monitoring and connectivity verification.
"""

from typing import Any

import structlog
from fastapi import APIRouter, Depends, Request, Response

from ..core.config import Settings, get_settings
from ..core.utils.date_utils import utcnow
from ..database.mongodb import MongoDB
from ..database.redis import RedisCache
from .dependencies.auth import get_mongodb

logger = structlog.get_logger()

router = APIRouter()


def get_redis(request: Request) -> RedisCache:
    """Get Redis instance from app state."""
    redis_cache: RedisCache = request.app.state.redis
    return redis_cache


@router.get("/health")
async def health_check(
    response: Response,
    mongodb: MongoDB = Depends(get_mongodb),
    redis_cache: RedisCache = Depends(get_redis),
    settings: Settings = Depends(get_settings),
) -> dict[str, Any]:
    """
    Check connectivity to MongoDB and Redis.

    Returns 503 with status "degraded" when either is unreachable.
    """
    mongodb_status = await mongodb.health_check()
    redis_status = await redis_cache.health_check()
    healthy = bool(
        mongodb_status.get("connected", False) and redis_status.get("connected", False)
    )

    if healthy:
        logger.info("Health check passed", status="healthy")
    else:
        logger.warning("Health check failed", mongodb=mongodb_status, redis=redis_status)
        response.status_code = 503

    return {
        "status": "ok" if healthy else "degraded",
        "environment": settings.environment,
        "version": "0.1.0",
        "timestamp": utcnow().isoformat(),
        "dependencies": {"mongodb": mongodb_status, "redis": redis_status},
    }
