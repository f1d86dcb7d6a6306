"""
Generated image repository: audit trail of paid style-transfer results.
"""

import uuid

import structlog
from motor.motor_asyncio import AsyncIOMotorCollection

from ...core.utils.date_utils import utcnow
from ...models.generation import GeneratedImageRecord

logger = structlog.get_logger()


class GeneratedImageRepository:
    """Append-only store of generated image records."""

    def __init__(self, collection: AsyncIOMotorCollection):
        self.collection = collection

    async def ensure_indexes(self) -> None:
        await self.collection.create_index([("user_id", 1), ("created_at", -1)])

    async def create(
        self,
        user_id: str,
        style_id: str,
        original_image_url: str,
        generated_image_url: str,
    ) -> GeneratedImageRecord:
        """Insert one audit record for a generated image."""
        record = GeneratedImageRecord(
            record_id=f"gen_{uuid.uuid4().hex[:12]}",
            user_id=user_id,
            style_id=style_id,
            original_image_url=original_image_url,
            generated_image_url=generated_image_url,
            created_at=utcnow(),
        )

        await self.collection.insert_one(record.model_dump())

        logger.info(
            "Generated image recorded",
            record_id=record.record_id,
            user_id=user_id,
            style_id=style_id,
        )

        return record
