"""
Transaction repository: append-only debit/credit records.
Doubles as the idempotency store for payment credits.
"""

import uuid
from typing import Any

import structlog
from motor.motor_asyncio import AsyncIOMotorCollection

from ...core.utils.date_utils import utcnow
from ...models.transaction import TransactionKind, TransactionRecord

logger = structlog.get_logger()


class TransactionRepository:
    """Repository for credit transaction records. Records are never updated."""

    def __init__(self, collection: AsyncIOMotorCollection):
        """
        Initialize transaction repository.

        Args:
            collection: MongoDB collection for transactions
        """
        self.collection = collection

    async def ensure_indexes(self) -> None:
        """
        Create indexes for optimal query performance.
        Called during application startup.
        """
        await self.collection.create_index("transaction_id", unique=True)
        await self.collection.create_index([("user_id", 1), ("created_at", -1)])
        await self.collection.create_index("description")
        # One credit per payment reference, even under concurrent verification
        await self.collection.create_index(
            [("kind", 1), ("description", 1)],
            unique=True,
            partialFilterExpression={"kind": "credit"},
            name="credit_reference_unique",
        )

        logger.info("Transaction indexes created")

    async def record(
        self,
        user_id: str,
        amount: int,
        kind: TransactionKind,
        description: str,
        session: Any = None,
    ) -> TransactionRecord:
        """
        Append an immutable transaction record.

        Args:
            user_id: Account identifier
            amount: Credits moved (positive)
            kind: "debit" or "credit"
            description: Purpose, or payment reference for credits
            session: Optional MongoDB session for transactions

        Returns:
            Created record

        Raises:
            pymongo.errors.DuplicateKeyError: If a credit with this
                description already exists
        """
        record = TransactionRecord(
            transaction_id=f"txn_{uuid.uuid4().hex[:12]}",
            user_id=user_id,
            amount=amount,
            kind=kind,
            description=description,
            created_at=utcnow(),
        )

        await self.collection.insert_one(record.model_dump(), session=session)

        logger.info(
            "Transaction recorded",
            transaction_id=record.transaction_id,
            user_id=user_id,
            amount=amount,
            kind=kind,
        )

        return record

    async def record_debit(
        self, user_id: str, amount: int, description: str
    ) -> TransactionRecord:
        """Append a debit record for a paid operation."""
        return await self.record(user_id, amount, "debit", description)

    async def record_credit(
        self, user_id: str, amount: int, description: str
    ) -> TransactionRecord:
        """Append a credit record; description is the payment reference."""
        return await self.record(user_id, amount, "credit", description)

    async def find_by_description(self, description: str) -> TransactionRecord | None:
        """
        Get a transaction by exact description match.

        Args:
            description: Description or payment reference

        Returns:
            Transaction if found, None otherwise
        """
        record_dict = await self.collection.find_one({"description": description})

        if not record_dict:
            return None

        # Remove MongoDB _id field
        record_dict.pop("_id", None)

        return TransactionRecord(**record_dict)

    async def get_user_transactions(
        self,
        user_id: str,
        page: int = 1,
        page_size: int = 20,
        kind: str | None = None,
    ) -> tuple[list[TransactionRecord], int]:
        """
        Get paginated transaction history for an account.

        Args:
            user_id: Account identifier
            page: Page number (1-indexed)
            page_size: Number of transactions per page
            kind: Optional filter (debit, credit)

        Returns:
            Tuple of (transactions list, total count)
        """
        query_filter: dict[str, Any] = {"user_id": user_id}
        if kind:
            query_filter["kind"] = kind

        total = await self.collection.count_documents(query_filter)

        skip = (page - 1) * page_size
        cursor = (
            self.collection.find(query_filter)
            .sort("created_at", -1)  # Newest first
            .skip(skip)
            .limit(page_size)
        )

        transactions = []
        async for record_dict in cursor:
            record_dict.pop("_id", None)
            transactions.append(TransactionRecord(**record_dict))

        return transactions, total
