"""
Unit tests for billing endpoints.
"""

from unittest.mock import AsyncMock, Mock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from imagestudio.api.billing import router
from imagestudio.api.dependencies.auth import get_current_user, get_current_user_id
from imagestudio.api.dependencies.services import get_billing_service
from imagestudio.api.error_handlers import register_exception_handlers
from imagestudio.core.exceptions import ValidationError
from imagestudio.models.account import Account
from imagestudio.services.billing_service import CheckoutSession, VerificationResult


@pytest.fixture
def mock_account():
    return Account(user_id="user_123", email="test@example.com", credits=100)


@pytest.fixture
def mock_billing_service():
    service = Mock()
    service.checkout = AsyncMock(
        return_value=CheckoutSession(
            authorization_url="https://checkout.paystack.com/abc",
            reference="cred_user_123_1700",
        )
    )
    service.verify = AsyncMock(return_value=VerificationResult(credits=1100, added=1000))
    return service


@pytest.fixture
def client(mock_account, mock_billing_service):
    app = FastAPI()
    app.include_router(router)
    register_exception_handlers(app)
    app.dependency_overrides[get_current_user] = lambda: mock_account
    app.dependency_overrides[get_current_user_id] = lambda: mock_account.user_id
    app.dependency_overrides[get_billing_service] = lambda: mock_billing_service
    return TestClient(app)


class TestCheckout:
    """Test POST /api/billing/checkout."""

    def test_checkout(self, client, mock_billing_service, mock_account):
        response = client.post("/api/billing/checkout", json={"planId": "pack_1000"})

        assert response.status_code == 200
        assert response.json()["data"] == {
            "authorizationUrl": "https://checkout.paystack.com/abc",
            "reference": "cred_user_123_1700",
        }
        args = mock_billing_service.checkout.call_args
        assert args[0] == (mock_account, "pack_1000")

    def test_checkout_uses_forwarded_host(self, client, mock_billing_service):
        """Test callback base URL follows reverse-proxy headers."""
        client.post(
            "/api/billing/checkout",
            json={"planId": "pack_500"},
            headers={"x-forwarded-host": "studio.example.com", "x-forwarded-proto": "https"},
        )

        assert mock_billing_service.checkout.call_args.kwargs["app_url"] == "https://studio.example.com"

    def test_invalid_plan(self, client, mock_billing_service):
        mock_billing_service.checkout.side_effect = ValidationError("Invalid plan")

        response = client.post("/api/billing/checkout", json={})

        assert response.status_code == 400
        assert response.json()["message"] == "Invalid plan"


class TestVerify:
    """Test GET /api/billing/verify."""

    def test_verify_credits(self, client, mock_billing_service):
        response = client.get("/api/billing/verify", params={"reference": "cred_user_123_1700"})

        assert response.status_code == 200
        assert response.json()["data"] == {"credits": 1100, "added": 1000}
        mock_billing_service.verify.assert_awaited_once_with("user_123", "cred_user_123_1700")

    def test_verify_replay(self, client, mock_billing_service):
        mock_billing_service.verify.return_value = VerificationResult(
            credits=1100, already_credited=True
        )

        response = client.get("/api/billing/verify", params={"reference": "cred_user_123_1700"})

        assert response.json()["data"] == {"credits": 1100, "alreadyCredited": True}

    def test_missing_reference(self, client, mock_billing_service):
        mock_billing_service.verify.side_effect = ValidationError("Missing reference")

        response = client.get("/api/billing/verify")

        assert response.status_code == 400
        mock_billing_service.verify.assert_awaited_once_with("user_123", "")
