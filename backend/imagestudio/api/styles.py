"""
Style template endpoints.
Listing and lookup are public; create, update and delete are admin-only.
"""

from typing import Any

import structlog
from fastapi import APIRouter, Depends, Query, Response

from ..models.style import StyleCreate, StyleUpdate
from ..services.style_service import StyleService
from .dependencies.auth import require_admin
from .dependencies.services import get_style_service
from .schemas.envelope import camelize, success

logger = structlog.get_logger()

router = APIRouter(prefix="/api/styles", tags=["styles"])

LISTING_CACHE_CONTROL = "public, s-maxage=60, stale-while-revalidate=300"


@router.get("")
async def list_styles(
    response: Response,
    full: str | None = Query(None, description="'1' for complete records"),
    style_service: StyleService = Depends(get_style_service),
) -> dict[str, Any]:
    """
    List styles, newest first.

    Summary fields by default; `?full=1` returns complete records with
    data-URL cover images blanked. Served from a 60 second cache
    (`X-Cache: HIT|MISS`).
    """
    styles, cache_hit = await style_service.list_styles(full=full == "1")

    response.headers["Cache-Control"] = LISTING_CACHE_CONTROL
    response.headers["X-Cache"] = "HIT" if cache_hit else "MISS"

    return success([camelize(style) for style in styles])


@router.get("/{style_id}")
async def get_style(
    style_id: str,
    style_service: StyleService = Depends(get_style_service),
) -> dict[str, Any]:
    style = await style_service.get_style(style_id)
    return success(style.model_dump(mode="json", by_alias=True))


@router.post("", status_code=201)
async def create_style(
    body: StyleCreate,
    _: None = Depends(require_admin),
    style_service: StyleService = Depends(get_style_service),
) -> dict[str, Any]:
    """Create a style (admin only). name, coverImage, referenceImage and prompt are required."""
    style = await style_service.create_style(body)
    return success(style.model_dump(mode="json", by_alias=True))


@router.put("/{style_id}")
async def update_style(
    style_id: str,
    body: StyleUpdate,
    _: None = Depends(require_admin),
    style_service: StyleService = Depends(get_style_service),
) -> dict[str, Any]:
    """Partially update a style (admin only); omitted fields are kept."""
    style = await style_service.update_style(style_id, body)
    return success(style.model_dump(mode="json", by_alias=True))


@router.delete("/{style_id}")
async def delete_style(
    style_id: str,
    _: None = Depends(require_admin),
    style_service: StyleService = Depends(get_style_service),
) -> dict[str, Any]:
    await style_service.delete_style(style_id)
    return success(message="Style deleted")
