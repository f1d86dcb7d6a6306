"""
External generation gateway.
One entry point for every image operation, whichever service runs it.
"""

from typing import Any

import structlog

from ...core.exceptions import GatewayError
from ...core.pricing import provider_resolution
from ...models.generation import (
    EnhancePayload,
    GeneratedAsset,
    GeneratePayload,
    GenerationPayload,
    StyleTransferPayload,
    UpscalePayload,
)
from .backend_client import AIBackendClient
from .model_run_client import ModelRunClient
from .outputs import extract_url, parse_output
from .prompts import build_prompt

logger = structlog.get_logger()


class GenerationGateway:
    """Routes payloads to the AI backend or the model-run provider."""

    def __init__(self, backend: AIBackendClient, model_runs: ModelRunClient):
        self.backend = backend
        self.model_runs = model_runs

    async def close(self) -> None:
        await self.backend.close()
        await self.model_runs.close()

    async def invoke(self, payload: GenerationPayload) -> GeneratedAsset:
        """
        Run one image operation. A failed call is not retried.

        Args:
            payload: Operation-specific payload

        Returns:
            Normalized successful result

        Raises:
            GatewayError: If the external service fails or returns no image
            ConfigurationError: If the required service is not configured
        """
        match payload:
            case EnhancePayload():
                image = await self.backend.enhance(payload)
            case GeneratePayload():
                image = await self.backend.generate(payload)
            case UpscalePayload():
                image = await self.backend.upscale(payload)
            case StyleTransferPayload():
                image = await self._style_transfer(payload)
            case _:
                raise TypeError(f"Unsupported payload: {type(payload).__name__}")

        return GeneratedAsset(image=image, operation=payload.kind)

    @staticmethod
    def build_model_input(payload: StyleTransferPayload) -> dict[str, Any]:
        """Model input: assembled prompt, ordered images and output options."""
        style = payload.style
        model_choice = payload.model_choice

        # Order matters: the prompt templates refer to images by position
        images = [style.reference_image, payload.main_image]
        if style.style_type == "fabric-mockup" and payload.logo_image:
            images.append(payload.logo_image)

        model_input: dict[str, Any] = {
            "prompt": build_prompt(
                style.style_type,
                style.base_prompt_for(model_choice),
                payload.user_prompt,
            ),
            "image_input": images,
            "output_format": "png",
        }

        resolution = provider_resolution(payload.resolution)
        if resolution:
            model_input["resolution"] = resolution

        return model_input

    async def _style_transfer(self, payload: StyleTransferPayload) -> str:
        model = self.model_runs.model_for(payload.model_choice)
        raw_output = await self.model_runs.run(model, self.build_model_input(payload))

        url = extract_url(parse_output(raw_output))
        if not url:
            logger.error(
                "Model output carried no image URL",
                model=model,
                output_type=type(raw_output).__name__,
            )
            raise GatewayError(
                "Model provider did not return an image URL", service="replicate"
            )

        return url
