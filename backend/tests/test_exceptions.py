"""
Unit tests for custom exception hierarchy.

Tests status code mapping and error serialization.
"""

import pytest

from imagestudio.core.exceptions import (
    AppError,
    AuthenticationError,
    AuthorizationError,
    ConfigurationError,
    DatabaseError,
    GatewayError,
    InsufficientCreditsError,
    InvalidResolutionError,
    NotFoundError,
    PersistenceFailure,
    RefundFailure,
    ValidationError,
)


class TestAppError:
    """Test base AppError functionality"""

    def test_create_app_error(self):
        """Test creating basic AppError"""
        error = AppError("Something went wrong")

        assert str(error) == "Something went wrong"
        assert error.message == "Something went wrong"
        assert error.status_code == 500
        assert error.error_type == "internal_error"

    def test_app_error_to_dict(self):
        """Test AppError serialization includes context"""
        error = AppError("Error occurred", account_id="user_1", price=500)

        assert error.to_dict() == {
            "error_type": "internal_error",
            "message": "Error occurred",
            "status_code": 500,
            "account_id": "user_1",
            "price": 500,
        }


class TestStatusMapping:
    """Test every error maps to its HTTP status"""

    @pytest.mark.parametrize(
        ("error_class", "status_code"),
        [
            (ValidationError, 400),
            (InvalidResolutionError, 400),
            (AuthenticationError, 401),
            (InsufficientCreditsError, 402),
            (AuthorizationError, 403),
            (NotFoundError, 404),
            (DatabaseError, 500),
            (ConfigurationError, 500),
            (RefundFailure, 500),
            (PersistenceFailure, 500),
        ],
    )
    def test_status_codes(self, error_class, status_code):
        """Test status code per error class"""
        assert error_class("boom").status_code == status_code

    def test_invalid_resolution_is_validation_error(self):
        """Test InvalidResolutionError is caught as ValidationError"""
        assert issubclass(InvalidResolutionError, ValidationError)


class TestGatewayError:
    """Test GatewayError service context"""

    def test_gateway_error_carries_service(self):
        """Test service name lands in context"""
        error = GatewayError("Enhancement failed", service="ai_backend", upstream_status=500)

        assert error.status_code == 502
        assert error.error_type == "gateway_error"
        assert error.context["service"] == "ai_backend"
        assert error.to_dict()["upstream_status"] == 500
