"""
Style template service: cached listings and admin CRUD.
"""

from typing import Any

import structlog

from ..core.exceptions import NotFoundError
from ..core.utils.image_probe import is_data_url
from ..database.repositories.style_repository import StyleRepository
from ..models.style import StyleCreate, StyleTemplate, StyleUpdate
from .style_cache import StyleCache

logger = structlog.get_logger()

SUMMARY_KEY = "summary"
FULL_KEY = "full"

# Image fields that never belong in a summary listing
_HEAVY_FIELDS = ("reference_image", "example_before_image", "example_after_image")


class StyleService:
    """Read-through style listings plus mutations that invalidate the cache."""

    def __init__(self, style_repo: StyleRepository, cache: StyleCache):
        self.style_repo = style_repo
        self.cache = cache

    async def list_styles(self, full: bool = False) -> tuple[list[dict[str, Any]], bool]:
        """
        List styles, newest first.

        Full listings blank data-URL cover images to keep the payload small.

        Args:
            full: Return complete records instead of the summary projection

        Returns:
            Tuple of (styles, cache_hit)
        """
        key = FULL_KEY if full else SUMMARY_KEY

        cached = await self.cache.get(key)
        if cached is not None:
            if full or not self._looks_heavy(cached):
                logger.debug("Style cache hit", key=key)
                return cached, True
            # A summary entry carrying full image fields is stale
            await self.cache.invalidate()

        logger.debug("Style cache miss", key=key)
        styles = await self.style_repo.list_all(summary=not full)

        if full:
            styles = [
                {**style, "cover_image": ""} if is_data_url(style.get("cover_image")) else style
                for style in styles
            ]

        return await self.cache.set(key, styles), False

    @staticmethod
    def _looks_heavy(styles: list[dict[str, Any]]) -> bool:
        return any(
            isinstance(style.get(field), str)
            for style in styles
            for field in _HEAVY_FIELDS
        )

    async def get_style(self, style_id: str) -> StyleTemplate:
        style = await self.style_repo.get_by_id(style_id)
        if style is None:
            raise NotFoundError("Style not found", style_id=style_id)
        return style

    async def create_style(self, style_create: StyleCreate) -> StyleTemplate:
        style = await self.style_repo.create(style_create)
        await self.cache.invalidate()
        return style

    async def update_style(self, style_id: str, style_update: StyleUpdate) -> StyleTemplate:
        style = await self.style_repo.update(style_id, style_update)
        if style is None:
            raise NotFoundError("Style not found", style_id=style_id)
        await self.cache.invalidate()
        return style

    async def delete_style(self, style_id: str) -> None:
        deleted = await self.style_repo.delete(style_id)
        if not deleted:
            raise NotFoundError("Style not found", style_id=style_id)
        await self.cache.invalidate()
