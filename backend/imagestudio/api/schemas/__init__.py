"""API request/response schemas."""

from .billing_schemas import CheckoutRequest
from .envelope import camelize, error, success

__all__ = [
    "CheckoutRequest",
    "camelize",
    "error",
    "success",
]
