"""
Paystack payment gateway client.
Initializes checkout transactions and verifies completed payments.
"""

from typing import Any
from urllib.parse import quote

import httpx
import structlog

from ..core.config import Settings
from ..core.exceptions import ConfigurationError, GatewayError

logger = structlog.get_logger()

SERVICE_NAME = "paystack"


class PaystackClient:
    """Thin async client for the Paystack transaction API."""

    def __init__(self, settings: Settings, client: httpx.AsyncClient | None = None):
        """
        Initialize Paystack client.

        Args:
            settings: Application settings with the Paystack secret key
            client: Optional httpx AsyncClient
        """
        self.settings = settings
        self.base_url = settings.paystack_base_url.rstrip("/")
        self._client = client
        self._owns_client = client is None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=30.0)
        return self._client

    async def close(self) -> None:
        """Close HTTP client if we own it."""
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None

    async def _request(
        self, method: str, path: str, failure_message: str, **kwargs: Any
    ) -> dict[str, Any]:
        secret_key = self.settings.paystack_secret_key
        if not secret_key:
            raise ConfigurationError("PAYSTACK_SECRET_KEY is not configured")

        client = await self._get_client()
        try:
            response = await client.request(
                method,
                f"{self.base_url}{path}",
                headers={"Authorization": f"Bearer {secret_key}"},
                **kwargs,
            )
        except httpx.HTTPError as e:
            logger.error(
                "Paystack request failed",
                path=path,
                error=str(e),
                error_type=type(e).__name__,
            )
            raise GatewayError(failure_message, service=SERVICE_NAME) from e

        try:
            body = response.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {}

        if not response.is_success or not body.get("status"):
            logger.warning(
                "Paystack rejected request",
                path=path,
                status_code=response.status_code,
                paystack_message=body.get("message"),
            )
            raise GatewayError(
                body.get("message") or failure_message,
                service=SERVICE_NAME,
                upstream_status=response.status_code,
            )

        data = body.get("data")
        return data if isinstance(data, dict) else {}

    async def initialize_transaction(
        self,
        email: str,
        amount_kobo: int,
        reference: str,
        callback_url: str,
        metadata: dict[str, Any],
    ) -> dict[str, Any]:
        """
        Start a hosted checkout.

        Returns:
            Paystack "data" object (authorization_url, access_code, reference)
        """
        return await self._request(
            "POST",
            "/transaction/initialize",
            "Failed to initialize payment",
            json={
                "email": email,
                "amount": amount_kobo,
                "currency": "NGN",
                "reference": reference,
                "callback_url": callback_url,
                "metadata": metadata,
            },
        )

    async def verify_transaction(self, reference: str) -> dict[str, Any]:
        """
        Look up a transaction by reference.

        Returns:
            Paystack "data" object (status, amount in kobo, metadata)
        """
        return await self._request(
            "GET",
            f"/transaction/verify/{quote(reference, safe='')}",
            "Failed to verify payment",
        )
