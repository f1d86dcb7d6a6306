"""
Rate limiting for API endpoints.

Uses slowapi keyed by client address; the default limit applies to every
route through SlowAPIMiddleware.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

from ...core.config import Settings, get_settings


def build_limiter(settings: Settings) -> Limiter:
    """Create the limiter from settings (storage defaults to in-process memory)."""
    return Limiter(
        key_func=get_remote_address,
        default_limits=[settings.rate_limit_default],
        storage_uri=settings.rate_limit_storage_uri,
    )


limiter = build_limiter(get_settings())
