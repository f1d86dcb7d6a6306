"""
Enhance style repository.
Read access to the enhance preset catalog.
"""

import structlog
from motor.motor_asyncio import AsyncIOMotorCollection

from ...models.enhance_style import EnhanceStyle

logger = structlog.get_logger()


class EnhanceStyleRepository:
    """Repository for enhance style presets."""

    def __init__(self, collection: AsyncIOMotorCollection):
        self.collection = collection

    async def ensure_indexes(self) -> None:
        await self.collection.create_index("enhance_style_id", unique=True)
        await self.collection.create_index([("created_at", -1)])

    async def list_all(self) -> list[EnhanceStyle]:
        """List presets, newest first."""
        cursor = self.collection.find({}, {"_id": 0}).sort("created_at", -1)

        styles = []
        async for style_dict in cursor:
            styles.append(EnhanceStyle(**style_dict))

        logger.debug("Enhance styles listed", count=len(styles))
        return styles
