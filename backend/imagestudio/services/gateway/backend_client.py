"""
HTTP client for the AI image backend (enhance, generate, upscale).

Every non-2xx, non-JSON, success=false or image-less response is reported
as a GatewayError; callers never see raw transport errors.
"""

from typing import Any

import httpx
import structlog

from ...core.config import Settings
from ...core.exceptions import GatewayError
from ...core.utils.image_probe import get_approx_bytes, get_image_dimensions
from ...models.generation import EnhancePayload, GeneratePayload, UpscalePayload

logger = structlog.get_logger()

SERVICE_NAME = "ai_backend"
SECRET_HEADER = "X-AI-Backend-Secret"


class AIBackendClient:
    """
    Client for the AI backend's JSON endpoints.

    Uses a persistent httpx client; pass one in to share a connection pool
    or to inject a mock transport.
    """

    def __init__(self, settings: Settings, client: httpx.AsyncClient | None = None):
        """
        Initialize AI backend client.

        Args:
            settings: Application settings (backend URL, secret, timeouts)
            client: Optional httpx AsyncClient
        """
        self.settings = settings
        self.base_url = settings.ai_backend_url.rstrip("/")
        self._client = client
        self._owns_client = client is None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self.settings.ai_backend_timeout_seconds
            )
        return self._client

    async def close(self) -> None:
        """Close HTTP client if we own it."""
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.settings.ai_backend_secret:
            headers[SECRET_HEADER] = self.settings.ai_backend_secret
        return headers

    async def _post(
        self,
        path: str,
        body: dict[str, Any],
        image_field: str,
        failure_message: str,
    ) -> str:
        """
        POST a JSON body and return the image field of a successful reply.

        Args:
            path: Endpoint path, e.g. "/api/enhance"
            body: JSON request body
            image_field: Response field carrying the image
            failure_message: Message used when the backend gives none

        Raises:
            GatewayError: On transport failure or any unusable response
        """
        client = await self._get_client()

        try:
            response = await client.post(
                f"{self.base_url}{path}", json=body, headers=self._headers()
            )
        except httpx.HTTPError as e:
            logger.error(
                "AI backend request failed",
                path=path,
                error=str(e),
                error_type=type(e).__name__,
            )
            raise GatewayError(
                failure_message, service=SERVICE_NAME, endpoint=path
            ) from e

        try:
            data = response.json()
        except ValueError as e:
            logger.error(
                "AI backend returned non-JSON response",
                path=path,
                status_code=response.status_code,
            )
            raise GatewayError(
                "AI backend returned invalid response",
                service=SERVICE_NAME,
                endpoint=path,
                upstream_status=response.status_code,
            ) from e

        if not isinstance(data, dict):
            data = {}

        image = data.get(image_field)
        if response.is_success and data.get("success") and isinstance(image, str) and image:
            return image

        message = data.get("message")
        logger.warning(
            "AI backend reported failure",
            path=path,
            status_code=response.status_code,
            backend_message=message,
        )
        raise GatewayError(
            message if isinstance(message, str) and message else failure_message,
            service=SERVICE_NAME,
            endpoint=path,
            upstream_status=response.status_code,
        )

    async def enhance(self, payload: EnhancePayload) -> str:
        """Run enhancement, then the auto-upscale loop when enabled."""
        image = await self._post(
            "/api/enhance",
            {
                "image": payload.image,
                "prompt": payload.prompt or "",
                "styleName": payload.style_name or "Enhance",
                "sliders": payload.sliders or None,
                "highRes": bool(payload.high_res),
            },
            image_field="enhancedImage",
            failure_message="Enhancement failed",
        )

        if self.settings.ai_auto_upscale and payload.high_res:
            image = await self.auto_upscale(image)

        return image

    async def generate(self, payload: GeneratePayload) -> str:
        width, height = payload.dimensions
        return await self._post(
            "/api/generate",
            {
                "prompt": payload.prompt,
                "style": payload.style or "Studio",
                "sliders": payload.sliders or None,
                "width": width,
                "height": height,
                "high_resolution": payload.high_res,
                "aspect_ratio": payload.aspect_ratio,
            },
            image_field="image",
            failure_message="Generation failed",
        )

    async def upscale(self, payload: UpscalePayload) -> str:
        return await self._post(
            "/api/upscale",
            {"image": payload.image, "scale": payload.scale or 2},
            image_field="image",
            failure_message="Upscale failed",
        )

    async def auto_upscale(self, image: str) -> str:
        """
        Grow an image with follow-up upscale calls until it is large enough.

        Stops when the shortest side and payload size meet their minimums,
        when the shortest side reaches the maximum, when a follow-up fails or
        returns the same image, or after the configured number of attempts.
        A follow-up failure never fails the parent operation.

        Args:
            image: Data URL produced by the primary operation

        Returns:
            Best image obtained (the input if no follow-up helped)
        """
        settings = self.settings
        rerendered_for_bytes = False

        for attempt in range(settings.upscale_max_attempts):
            dims = get_image_dimensions(image)
            min_dim = dims.shortest_side if dims else None
            approx_bytes = get_approx_bytes(image)

            enough_pixels = min_dim is not None and min_dim >= settings.upscale_min_dimension
            enough_bytes = (
                approx_bytes is not None and approx_bytes >= settings.upscale_min_bytes
            )

            if enough_pixels and enough_bytes:
                break
            if enough_pixels and rerendered_for_bytes:
                break
            if min_dim is not None and min_dim >= settings.upscale_max_dimension:
                break

            # Large enough already: re-render at scale 1 to recover detail/bytes
            scale = 1 if enough_pixels else 2
            if scale == 1:
                rerendered_for_bytes = True

            try:
                upscaled = await self.upscale(UpscalePayload(image=image, scale=scale))
            except GatewayError as e:
                logger.warning(
                    "Auto-upscale step failed, keeping current image",
                    attempt=attempt,
                    scale=scale,
                    error=e.message,
                )
                break

            if upscaled == image:
                logger.info("Auto-upscale returned identical image", attempt=attempt)
                break

            logger.info(
                "Auto-upscale step applied",
                attempt=attempt,
                scale=scale,
                min_dimension=min_dim,
                approx_bytes=approx_bytes,
            )
            image = upscaled

        return image
