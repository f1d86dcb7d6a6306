"""
Custom exception hierarchy for proper error categorization and HTTP status mapping.

Maps internal errors to the status codes returned by the image endpoints:
- User errors (400-level): bad input, missing auth, not enough credits
- Server errors (500-level): our infrastructure/configuration failed
- External errors (502): AI backend or model provider failed

Usage:
    from imagestudio.core.exceptions import GatewayError, InsufficientCreditsError

    # Reservation rejected -> 402 Payment Required
    raise InsufficientCreditsError("Insufficient credits", account_id=account_id)

    # AI backend answered with success=false -> 502 Bad Gateway
    raise GatewayError("Enhancement failed", service="ai_backend")
"""

from typing import Any


class AppError(Exception):
    """
    Base application error with HTTP status mapping.

    All custom exceptions inherit from this to enable consistent error handling.
    """

    # Default status code (subclasses override)
    status_code: int = 500
    error_type: str = "internal_error"

    def __init__(self, message: str, **context: Any):
        """
        Initialize error with message and optional context.

        Args:
            message: Human-readable error description
            **context: Additional key-value pairs for logging (e.g., account_id, operation)
        """
        super().__init__(message)
        self.message = message
        self.context = context

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for JSON response and structured logging."""
        return {
            "error_type": self.error_type,
            "message": self.message,
            "status_code": self.status_code,
            **self.context,
        }


# ===== 400-level: Client Errors =====


class ValidationError(AppError):
    """User provided invalid input (e.g., missing image, unknown aspect ratio)."""

    status_code = 400
    error_type = "validation_error"


class InvalidResolutionError(ValidationError):
    """Requested resolution tier is not one of standard/2k/4k."""

    error_type = "invalid_resolution"


class AuthenticationError(AppError):
    """Authentication failed (e.g., missing, invalid or expired token)."""

    status_code = 401
    error_type = "authentication_error"


class InsufficientCreditsError(AppError):
    """Conditional decrement rejected: balance below the operation price."""

    status_code = 402
    error_type = "insufficient_credits"


class AuthorizationError(AppError):
    """User lacks permission for requested resource."""

    status_code = 403
    error_type = "authorization_error"


class NotFoundError(AppError):
    """Requested resource does not exist."""

    status_code = 404
    error_type = "not_found_error"


# ===== 500-level: Server Errors =====


class DatabaseError(AppError):
    """
    Database operation failed (connection, query, schema issues).

    Maps to 500 Internal Server Error (our infrastructure problem).
    """

    status_code = 500
    error_type = "database_error"


class ConfigurationError(AppError):
    """
    Application misconfigured (e.g., missing API token for a provider).

    Raised at call time for optional integrations so the service still boots.
    """

    status_code = 500
    error_type = "configuration_error"


class RefundFailure(AppError):
    """
    Compensating credit increment failed after a failed generation.

    Secondary error: logged only, never replaces the error reported to the caller.
    """

    status_code = 500
    error_type = "refund_failure"


class PersistenceFailure(AppError):
    """
    Side-effect write failed after the generation already succeeded.

    Secondary error: logged only, the request is still reported as successful.
    """

    status_code = 500
    error_type = "persistence_failure"


# ===== 502: External Service Errors =====


class GatewayError(AppError):
    """
    External image service failed or returned an unusable response.

    Examples:
        - AI backend returned non-JSON or a non-2xx status
        - success=false or missing image field
        - Model run failed, was canceled or timed out
        - No URL could be extracted from the model output

    Maps to 502 Bad Gateway. Triggers a refund of the reservation.
    """

    status_code = 502
    error_type = "gateway_error"

    def __init__(self, message: str, service: str, **context: Any):
        """
        Initialize with service name for easier debugging.

        Args:
            message: Error description (safe to show to the user)
            service: Service identifier (e.g., "ai_backend", "replicate", "paystack")
            **context: Additional context (e.g., operation, status_code)
        """
        super().__init__(message, service=service, **context)
