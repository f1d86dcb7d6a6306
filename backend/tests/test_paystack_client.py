"""
Unit tests for PaystackClient.
"""

import json

import httpx
import pytest

from imagestudio.core.config import Settings
from imagestudio.core.exceptions import ConfigurationError, GatewayError
from imagestudio.services.paystack_client import PaystackClient


def make_client(handler, secret_key="sk_test_123") -> PaystackClient:
    settings = Settings(paystack_secret_key=secret_key, paystack_base_url="http://paystack.test")
    return PaystackClient(
        settings, client=httpx.AsyncClient(transport=httpx.MockTransport(handler))
    )


@pytest.mark.asyncio
class TestPaystackClient:
    """Test transaction initialize and verify calls."""

    async def test_initialize_transaction(self):
        """Test checkout body and bearer auth."""
        requests = []

        def handler(request):
            requests.append(request)
            return httpx.Response(
                200,
                json={"status": True, "data": {"authorization_url": "https://checkout/abc"}},
            )

        client = make_client(handler)

        data = await client.initialize_transaction(
            email="ada@example.com",
            amount_kobo=100000,
            reference="cred_user_1_1",
            callback_url="https://app/billing/success",
            metadata={"userId": "user_1"},
        )

        assert data == {"authorization_url": "https://checkout/abc"}
        assert requests[0].url.path == "/transaction/initialize"
        assert requests[0].headers["Authorization"] == "Bearer sk_test_123"
        body = json.loads(requests[0].content)
        assert body["currency"] == "NGN"
        assert body["amount"] == 100000

    async def test_verify_transaction(self):
        """Test reference is path-encoded and data returned."""
        seen = []

        def handler(request):
            seen.append(request.url.raw_path)
            return httpx.Response(200, json={"status": True, "data": {"status": "success"}})

        client = make_client(handler)

        assert await client.verify_transaction("cred/1") == {"status": "success"}
        assert seen == [b"/transaction/verify/cred%2F1"]

    async def test_rejected_request(self):
        """Test status false surfaces the Paystack message."""
        client = make_client(
            lambda request: httpx.Response(
                400, json={"status": False, "message": "Transaction reference not found"}
            )
        )

        with pytest.raises(GatewayError, match="reference not found"):
            await client.verify_transaction("missing")

    async def test_non_json_response(self):
        client = make_client(lambda request: httpx.Response(502, text="Bad Gateway"))

        with pytest.raises(GatewayError, match="Failed to verify payment"):
            await client.verify_transaction("ref")

    async def test_missing_secret_key(self):
        client = make_client(lambda request: httpx.Response(200), secret_key="")

        with pytest.raises(ConfigurationError):
            await client.verify_transaction("ref")
