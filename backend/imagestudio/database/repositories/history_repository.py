"""
Usage history store: the account's two most recent generated images.
"""

import structlog
from motor.motor_asyncio import AsyncIOMotorCollection

from ...models.account import USAGE_HISTORY_LIMIT, HistoryEntry

logger = structlog.get_logger()


class HistoryRepository:
    """Bounded, newest-first usage history embedded in the account document."""

    def __init__(self, collection: AsyncIOMotorCollection):
        """
        Initialize history repository.

        Args:
            collection: MongoDB collection for users
        """
        self.collection = collection

    async def prepend(self, user_id: str, entry: HistoryEntry) -> bool:
        """
        Insert entry at the front and truncate to the newest entries.

        Push, position and slice run as one update; concurrent prepends
        for one account are resolved by the store in arrival order.

        Args:
            user_id: Account identifier
            entry: New history entry

        Returns:
            True if the account was found and updated
        """
        result = await self.collection.update_one(
            {"user_id": user_id},
            {
                "$push": {
                    "usage_history": {
                        "$each": [entry.model_dump()],
                        "$position": 0,
                        "$slice": USAGE_HISTORY_LIMIT,
                    }
                }
            },
        )

        if result.matched_count == 0:
            logger.warning("Failed to prepend history - account not found", user_id=user_id)
            return False

        return True

    async def read(self, user_id: str) -> list[HistoryEntry]:
        """
        Get the account's recent history, newest first.

        Returns:
            Up to USAGE_HISTORY_LIMIT entries (empty if account not found)
        """
        account_dict = await self.collection.find_one(
            {"user_id": user_id},
            {"usage_history": 1},
        )

        if not account_dict:
            return []

        entries = []
        for raw in account_dict.get("usage_history") or []:
            # Skip malformed legacy entries instead of failing the whole read
            if isinstance(raw, dict) and raw.get("url"):
                entries.append(HistoryEntry(**raw))

        return entries[:USAGE_HISTORY_LIMIT]
