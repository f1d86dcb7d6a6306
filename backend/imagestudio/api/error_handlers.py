"""
Global exception handlers rendering every failure as an error envelope.
"""

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException

from ..core.config import get_settings
from ..core.exceptions import AppError
from .schemas.envelope import error

logger = structlog.get_logger()

GENERIC_ERROR_MESSAGE = "Internal server error"


def _validation_message(exc: RequestValidationError) -> str:
    """First validation problem as "field: reason"."""
    errors = exc.errors()
    if not errors:
        return "Invalid request"

    first = errors[0]
    location = [str(part) for part in first.get("loc", ()) if part not in ("body", "query")]
    reason = first.get("msg", "Invalid value")
    return f"{'.'.join(location)}: {reason}" if location else reason


def register_exception_handlers(app: FastAPI) -> None:
    """Attach the envelope-producing handlers to an app."""

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
        """Render AppError subclasses with their own status code."""
        error_dict = exc.to_dict()

        if exc.status_code >= 500:
            logger.error(
                "Application error occurred",
                path=request.url.path,
                method=request.method,
                **error_dict,
            )
        else:
            logger.warning(
                "Request rejected",
                path=request.url.path,
                method=request.method,
                **error_dict,
            )

        return JSONResponse(status_code=exc.status_code, content=error(exc.message))

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        message = _validation_message(exc)
        logger.warning("Invalid request", path=request.url.path, detail=message)
        return JSONResponse(status_code=400, content=error(message))

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content=error(str(exc.detail)),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RateLimitExceeded)
    async def rate_limit_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
        return JSONResponse(
            status_code=429,
            content=error(f"Rate limit exceeded: {exc.detail}"),
            headers={"Retry-After": str(60)},
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        """Last resort: never leak internals in production."""
        logger.error(
            "Unhandled exception",
            path=request.url.path,
            method=request.method,
            error=str(exc),
            error_type=type(exc).__name__,
        )
        message = (
            GENERIC_ERROR_MESSAGE
            if get_settings().is_production
            else str(exc) or GENERIC_ERROR_MESSAGE
        )
        return JSONResponse(status_code=500, content=error(message))
