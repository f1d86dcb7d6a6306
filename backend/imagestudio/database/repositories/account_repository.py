"""
Account repository: balance and lifetime counters on the users collection.
All balance mutations are single-document atomic updates.
"""

from typing import Any

import structlog
from motor.motor_asyncio import AsyncIOMotorCollection
from pymongo import ReturnDocument

from ...models.account import Account

logger = structlog.get_logger()


class AccountRepository:
    """Repository for account data access and credit balance updates."""

    def __init__(self, collection: AsyncIOMotorCollection):
        """
        Initialize account repository.

        Args:
            collection: MongoDB collection for users
        """
        self.collection = collection

    async def ensure_indexes(self) -> None:
        """Create indexes used by account lookups."""
        await self.collection.create_index("user_id", unique=True)
        await self.collection.create_index("email", unique=True, sparse=True)

        logger.info("Account indexes created")

    async def get_by_id(self, user_id: str) -> Account | None:
        """
        Get account by ID.

        Args:
            user_id: Account identifier

        Returns:
            Account if found, None otherwise
        """
        account_dict = await self.collection.find_one({"user_id": user_id})

        if not account_dict:
            return None

        # Remove MongoDB _id field
        account_dict.pop("_id", None)

        return Account(**account_dict)

    async def try_reserve(
        self, user_id: str, amount: int, session: Any = None
    ) -> int | None:
        """
        Decrement the balance by amount only if it is at least amount.

        The balance condition lives in the update filter, so two concurrent
        reservations can never both pass on the same credits.

        Args:
            user_id: Account identifier
            amount: Credits to reserve
            session: Optional MongoDB session for transactions

        Returns:
            Balance after the decrement, or None if the account is missing
            or its balance is below amount
        """
        result = await self.collection.find_one_and_update(
            {"user_id": user_id, "credits": {"$gte": amount}},
            {"$inc": {"credits": -amount}},
            projection={"credits": 1},
            return_document=ReturnDocument.AFTER,
            session=session,
        )

        if not result:
            return None

        return int(result["credits"])

    async def increment_credits(
        self, user_id: str, amount: int, session: Any = None
    ) -> int | None:
        """
        Unconditionally add amount to the balance.

        Args:
            user_id: Account identifier
            amount: Credits to add
            session: Optional MongoDB session for transactions

        Returns:
            Balance after the increment, or None if the account is missing
        """
        result = await self.collection.find_one_and_update(
            {"user_id": user_id},
            {"$inc": {"credits": amount}},
            projection={"credits": 1},
            return_document=ReturnDocument.AFTER,
            session=session,
        )

        if not result:
            logger.warning("Failed to increment credits - account not found", user_id=user_id)
            return None

        return int(result["credits"])

    async def get_balance(self, user_id: str) -> int | None:
        """Current balance, or None if the account is missing."""
        result = await self.collection.find_one({"user_id": user_id}, {"credits": 1})
        if not result:
            return None
        return int(result.get("credits", 0))

    async def record_image_produced(self, user_id: str) -> Account | None:
        """
        Bump lifetime counters after a successful generation.

        Returns:
            Updated account if found, None otherwise
        """
        result = await self.collection.find_one_and_update(
            {"user_id": user_id},
            {"$inc": {"image_count": 1, "generation_count": 1}},
            return_document=ReturnDocument.AFTER,
        )

        if not result:
            logger.warning("Failed to update counters - account not found", user_id=user_id)
            return None

        result.pop("_id", None)
        return Account(**result)
