"""
Image generation endpoints.

Each call is priced, reserved, run and then committed or refunded by the
GenerationOrchestrator. Error statuses: 400 invalid input, 401 not signed in,
402 insufficient credits, 404 unknown style, 502 generation failed.
"""

from typing import Any

import structlog
from fastapi import APIRouter, Depends

from ..models.account import Account
from ..models.generation import (
    EnhanceRequest,
    GenerateRequest,
    GenerationAttempt,
    StyleTransferRequest,
    UpscaleRequest,
)
from ..services.generation_orchestrator import GenerationOrchestrator
from .dependencies.auth import get_current_user
from .dependencies.services import get_generation_orchestrator
from .schemas.envelope import success

logger = structlog.get_logger()

router = APIRouter(prefix="/api/image", tags=["image"])


def _result(attempt: GenerationAttempt, image_field: str = "image") -> dict[str, Any]:
    return success({image_field: attempt.asset.image, "credits": attempt.balance})


@router.post("/enhance")
async def enhance_image(
    body: EnhanceRequest,
    account: Account = Depends(get_current_user),
    orchestrator: GenerationOrchestrator = Depends(get_generation_orchestrator),
) -> dict[str, Any]:
    """
    Enhance an uploaded image (1 credit).

    **Request Body:**
    ```json
    {"image": "data:image/png;base64,...", "prompt": "", "styleName": "Enhance", "highRes": true}
    ```

    **Response:** `{"status": "success", "data": {"enhancedImage": "...", "credits": 4}}`
    """
    attempt = await orchestrator.enhance(account.user_id, body)
    return _result(attempt, image_field="enhancedImage")


@router.post("/generate")
async def generate_image(
    body: GenerateRequest,
    account: Account = Depends(get_current_user),
    orchestrator: GenerationOrchestrator = Depends(get_generation_orchestrator),
) -> dict[str, Any]:
    """Generate an image from a text prompt (1 credit)."""
    attempt = await orchestrator.generate(account.user_id, body)
    return _result(attempt)


@router.post("/upscale")
async def upscale_image(
    body: UpscaleRequest,
    account: Account = Depends(get_current_user),
    orchestrator: GenerationOrchestrator = Depends(get_generation_orchestrator),
) -> dict[str, Any]:
    """Upscale an image (1 credit)."""
    attempt = await orchestrator.upscale(account.user_id, body)
    return _result(attempt)


@router.post("/style-transfer")
async def style_transfer(
    body: StyleTransferRequest,
    account: Account = Depends(get_current_user),
    orchestrator: GenerationOrchestrator = Depends(get_generation_orchestrator),
) -> dict[str, Any]:
    """
    Apply a style template to an image.

    Price depends on `resolutionChoice`: standard/1k 100, 2k 300, 4k 500 credits.
    Fabric mockup styles also take a `logoImage`.
    """
    attempt = await orchestrator.style_transfer(account.user_id, body)
    return _result(attempt)
