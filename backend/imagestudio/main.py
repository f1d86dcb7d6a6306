"""
FastAPI application entry point for the Image Studio backend.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.trustedhost import TrustedHostMiddleware
from slowapi.middleware import SlowAPIMiddleware

from .api.billing import router as billing_router
from .api.enhance_styles import router as enhance_styles_router
from .api.dependencies.rate_limit import limiter
from .api.error_handlers import register_exception_handlers
from .api.health import router as health_router
from .api.images import router as images_router
from .api.styles import router as styles_router
from .api.user import router as user_router
from .core.config import get_settings
from .database.mongodb import (
    ENHANCE_STYLES_COLLECTION,
    GENERATED_IMAGES_COLLECTION,
    STYLES_COLLECTION,
    TRANSACTIONS_COLLECTION,
    USERS_COLLECTION,
    MongoDB,
)
from .database.redis import RedisCache
from .database.repositories import (
    AccountRepository,
    EnhanceStyleRepository,
    GeneratedImageRepository,
    StyleRepository,
    TransactionRepository,
)
from .services.gateway import AIBackendClient, GenerationGateway, ModelRunClient
from .services.paystack_client import PaystackClient
from .services.style_cache import StyleCache

# Set the root logger level to INFO so we can see detailed logs
logging.basicConfig(level=logging.INFO)

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan management for connections and shared clients."""
    settings = get_settings()

    logger.info("Starting Image Studio Backend", environment=settings.environment)

    mongodb = MongoDB()
    redis_cache = RedisCache()
    gateway = GenerationGateway(
        backend=AIBackendClient(settings),
        model_runs=ModelRunClient(settings),
    )
    paystack = PaystackClient(settings)

    try:
        await mongodb.connect(settings.mongodb_url)
        await redis_cache.connect(settings.redis_url)

        # Create database indexes for optimal query performance
        await AccountRepository(mongodb.get_collection(USERS_COLLECTION)).ensure_indexes()
        await TransactionRepository(
            mongodb.get_collection(TRANSACTIONS_COLLECTION)
        ).ensure_indexes()
        await StyleRepository(mongodb.get_collection(STYLES_COLLECTION)).ensure_indexes()
        await EnhanceStyleRepository(
            mongodb.get_collection(ENHANCE_STYLES_COLLECTION)
        ).ensure_indexes()
        await GeneratedImageRepository(
            mongodb.get_collection(GENERATED_IMAGES_COLLECTION)
        ).ensure_indexes()

        # Store in app state for dependency injection
        app.state.mongodb = mongodb
        app.state.gateway = gateway
        app.state.paystack = paystack
        app.state.redis = redis_cache
        app.state.style_cache = StyleCache(
            redis_cache, ttl_seconds=settings.styles_cache_ttl_seconds
        )

        logger.info(
            "Backend services started",
            ai_backend_url=settings.ai_backend_url,
            ai_auto_upscale=settings.ai_auto_upscale,
            replicate_configured=bool(settings.replicate_api_token),
            paystack_configured=bool(settings.paystack_secret_key),
        )

        yield

    finally:
        await gateway.close()
        await paystack.close()
        await redis_cache.disconnect()
        await mongodb.disconnect()
        logger.info("Backend services stopped")


def create_app() -> FastAPI:
    """Create and configure FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title="Image Studio API",
        description="Credit-metered AI image enhancement, generation and style transfer",
        version="0.1.0",
        docs_url="/docs" if settings.is_development else None,
        redoc_url="/redoc" if settings.is_development else None,
        lifespan=lifespan,
    )

    # Security middleware - only in production
    if settings.is_production:
        app.add_middleware(
            TrustedHostMiddleware,
            allowed_hosts=settings.allowed_hosts,
        )

    # CORS middleware for frontend communication (token cookie needs credentials)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=["*"],
    )

    # Rate limiting - SlowAPI integration
    app.state.limiter = limiter
    # Only add middleware in non-test environments (middleware breaks FastAPI TestClient)
    if settings.environment != "test":
        app.add_middleware(SlowAPIMiddleware)

    register_exception_handlers(app)

    # Include routers
    app.include_router(health_router, prefix="/api", tags=["health"])
    app.include_router(images_router)  # Credit-metered generation
    app.include_router(user_router)  # Profile, history, transactions
    app.include_router(styles_router)  # Style templates
    app.include_router(enhance_styles_router)  # Enhance presets
    app.include_router(billing_router)  # Credit purchases

    @app.get("/")
    async def root() -> dict[str, str]:
        """Root endpoint for basic connectivity check."""
        return {
            "message": "Image Studio API",
            "version": "0.1.0",
            "environment": settings.environment,
        }

    return app


# Create app instance
app = create_app()

if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "imagestudio.main:app",
        host="0.0.0.0",  # nosec B104 - Required for Docker container
        port=8000,
        reload=settings.is_development,
        log_config=None,  # Use structlog configuration
    )
