"""
Public enhance style catalog.
"""

from typing import Any

import structlog
from fastapi import APIRouter, Depends

from ..database.repositories.enhance_style_repository import EnhanceStyleRepository
from .dependencies.services import get_enhance_style_repository
from .schemas.envelope import success

logger = structlog.get_logger()

router = APIRouter(prefix="/api/enhance-styles", tags=["styles"])


@router.get("")
async def list_enhance_styles(
    enhance_style_repo: EnhanceStyleRepository = Depends(get_enhance_style_repository),
) -> dict[str, Any]:
    """
    Enhance presets, newest first.

    **Response:** `{"status": "success", "data": [{"id", "name", "description", "coverImage", "prompt", "createdAt", "updatedAt"}]}`
    """
    styles = await enhance_style_repo.list_all()
    return success([style.to_public() for style in styles])
