"""
Model-run provider client (Replicate HTTP API).

Creates a prediction with "Prefer: wait" so short runs finish in one round
trip, then polls the prediction until it reaches a terminal status.
"""

import asyncio
import time
from typing import Any

import httpx
import structlog

from ...core.config import Settings
from ...core.exceptions import ConfigurationError, GatewayError, ValidationError

logger = structlog.get_logger()

SERVICE_NAME = "replicate"

TERMINAL_STATUSES = frozenset({"succeeded", "failed", "canceled"})

# Upper bound the provider holds a "Prefer: wait" request open
PREFER_WAIT_SECONDS = 60.0


def ensure_image_input(value: Any, field_name: str = "image") -> str:
    """
    Check an image input before it is sent to the provider.

    URLs pass through; data URLs must carry a payload after the comma.

    Raises:
        ValidationError: If the value is not a usable image reference
    """
    if not isinstance(value, str) or not value:
        raise ValidationError(f"{field_name} must be a URL or data URL string")
    if value.startswith("data:") and "," not in value:
        raise ValidationError("Invalid data URL", field=field_name)
    return value


class ModelRunClient:
    """Client for running hosted image models."""

    def __init__(self, settings: Settings, client: httpx.AsyncClient | None = None):
        """
        Initialize model-run client.

        Args:
            settings: Application settings (API token, models, timeouts)
            client: Optional httpx AsyncClient
        """
        self.settings = settings
        self.base_url = settings.replicate_base_url.rstrip("/")
        self._client = client
        self._owns_client = client is None

    def request_timeout(self) -> httpx.Timeout:
        """Read timeout longer than the provider's synchronous wait window."""
        read = max(self.settings.replicate_timeout_seconds, PREFER_WAIT_SECONDS + 30.0)
        return httpx.Timeout(read, connect=10.0)

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.request_timeout())
        return self._client

    async def close(self) -> None:
        """Close HTTP client if we own it."""
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None

    def model_for(self, model_choice: str) -> str:
        """Provider model identifier for model1 / model2."""
        if model_choice == "model2":
            return self.settings.replicate_model_pro
        return self.settings.replicate_model_standard

    def _headers(self) -> dict[str, str]:
        token = self.settings.replicate_api_token
        if not token:
            raise ConfigurationError("REPLICATE_API_TOKEN is not configured")
        return {
            "Authorization": f"Bearer {token}",
            "Content-Type": "application/json",
        }

    async def _request(self, method: str, url: str, **kwargs: Any) -> dict[str, Any]:
        client = await self._get_client()

        try:
            response = await client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            logger.error(
                "Model run request failed",
                url=url,
                error=str(e),
                error_type=type(e).__name__,
            )
            raise GatewayError("Model run request failed", service=SERVICE_NAME) from e

        try:
            data = response.json()
        except ValueError as e:
            raise GatewayError(
                "Model provider returned invalid response",
                service=SERVICE_NAME,
                upstream_status=response.status_code,
            ) from e

        if not response.is_success or not isinstance(data, dict):
            detail = data.get("detail") if isinstance(data, dict) else None
            logger.error(
                "Model provider returned error",
                status_code=response.status_code,
                detail=detail,
            )
            raise GatewayError(
                detail or "Model run failed",
                service=SERVICE_NAME,
                upstream_status=response.status_code,
            )

        return data

    async def run(self, model: str, model_input: dict[str, Any]) -> Any:
        """
        Run a model to completion and return its raw output.

        Args:
            model: "owner/name" model identifier
            model_input: Model input object

        Returns:
            The prediction's output value (shape varies by model)

        Raises:
            ConfigurationError: If no API token is configured
            GatewayError: On failure, cancellation or timeout
        """
        headers = self._headers()
        deadline = time.monotonic() + self.settings.replicate_timeout_seconds

        prediction = await self._request(
            "POST",
            f"{self.base_url}/models/{model}/predictions",
            json={"input": model_input},
            headers={**headers, "Prefer": "wait"},
        )

        logger.info(
            "Model run started",
            model=model,
            prediction_id=prediction.get("id"),
            status=prediction.get("status"),
        )

        while prediction.get("status") not in TERMINAL_STATUSES:
            if time.monotonic() >= deadline:
                logger.error(
                    "Model run timed out",
                    model=model,
                    prediction_id=prediction.get("id"),
                )
                raise GatewayError("Model run timed out", service=SERVICE_NAME)

            poll_url = (prediction.get("urls") or {}).get("get")
            if not poll_url:
                raise GatewayError(
                    "Model provider returned no status URL", service=SERVICE_NAME
                )

            await asyncio.sleep(self.settings.replicate_poll_interval_seconds)
            prediction = await self._request("GET", poll_url, headers=headers)

        status = prediction.get("status")
        if status != "succeeded":
            logger.error(
                "Model run did not succeed",
                model=model,
                prediction_id=prediction.get("id"),
                status=status,
                error=prediction.get("error"),
            )
            raise GatewayError(
                f"Model run {status}",
                service=SERVICE_NAME,
                provider_error=prediction.get("error"),
            )

        logger.info("Model run succeeded", model=model, prediction_id=prediction.get("id"))
        return prediction.get("output")
