"""
Style template repository.
Handles CRUD operations for the styles collection.
"""

import uuid
from typing import Any

import structlog
from motor.motor_asyncio import AsyncIOMotorCollection
from pymongo import ReturnDocument

from ...core.utils.date_utils import utcnow
from ...models.style import SUMMARY_FIELDS, StyleCreate, StyleTemplate, StyleUpdate

logger = structlog.get_logger()


class StyleRepository:
    """Repository for style template data access operations."""

    def __init__(self, collection: AsyncIOMotorCollection):
        """
        Initialize style repository.

        Args:
            collection: MongoDB collection for styles
        """
        self.collection = collection

    async def ensure_indexes(self) -> None:
        """Create indexes for listing and lookup."""
        await self.collection.create_index("style_id", unique=True)
        await self.collection.create_index([("created_at", -1)])

        logger.info("Style indexes created")

    async def list_all(self, summary: bool = True) -> list[dict[str, Any]]:
        """
        List styles, newest first.

        Args:
            summary: Project only the lightweight listing fields

        Returns:
            Raw style documents without the MongoDB _id
        """
        projection: dict[str, int] = {"_id": 0}
        if summary:
            projection.update({name: 1 for name in SUMMARY_FIELDS})

        cursor = self.collection.find({}, projection).sort("created_at", -1)

        styles = []
        async for style_dict in cursor:
            styles.append(style_dict)

        return styles

    async def get_by_id(self, style_id: str) -> StyleTemplate | None:
        """
        Get style by ID.

        Returns:
            Style if found, None otherwise
        """
        style_dict = await self.collection.find_one({"style_id": style_id})

        if not style_dict:
            return None

        style_dict.pop("_id", None)

        return StyleTemplate(**style_dict)

    async def create(self, style_create: StyleCreate) -> StyleTemplate:
        """
        Create a new style template.

        Args:
            style_create: Style creation data

        Returns:
            Created style with generated ID
        """
        now = utcnow()
        style = StyleTemplate(
            style_id=f"style_{uuid.uuid4().hex[:12]}",
            example_before_image=style_create.reference_image,
            example_after_image=style_create.reference_image,
            created_at=now,
            updated_at=now,
            **style_create.model_dump(),
        )

        await self.collection.insert_one(style.model_dump())

        logger.info("Style created", style_id=style.style_id, name=style.name)

        return style

    async def update(self, style_id: str, style_update: StyleUpdate) -> StyleTemplate | None:
        """
        Apply a partial update.

        Args:
            style_id: Style identifier
            style_update: Fields to change (unset fields are left alone)

        Returns:
            Updated style if found, None otherwise
        """
        changes = style_update.model_dump(exclude_unset=True, exclude_none=True)
        changes["updated_at"] = utcnow()

        result = await self.collection.find_one_and_update(
            {"style_id": style_id},
            {"$set": changes},
            return_document=ReturnDocument.AFTER,
        )

        if not result:
            return None

        result.pop("_id", None)

        logger.info("Style updated", style_id=style_id, fields=sorted(changes))

        return StyleTemplate(**result)

    async def delete(self, style_id: str) -> bool:
        """
        Delete a style.

        Returns:
            True if a style was deleted
        """
        result = await self.collection.delete_one({"style_id": style_id})

        if result.deleted_count == 0:
            return False

        logger.info("Style deleted", style_id=style_id)
        return True
