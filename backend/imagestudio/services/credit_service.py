"""
Credit ledger service.
Business logic layer over account balances and transaction records.
"""

from typing import Any

import structlog

from ..core.exceptions import InsufficientCreditsError, RefundFailure, ValidationError
from ..database.repositories.account_repository import AccountRepository
from ..database.repositories.transaction_repository import TransactionRepository
from ..models.transaction import TransactionRecord

logger = structlog.get_logger()


class CreditService:
    """Service for credit reservations, refunds and top-ups."""

    def __init__(
        self,
        account_repo: AccountRepository,
        transaction_repo: TransactionRepository,
    ):
        """
        Initialize credit service.

        Args:
            account_repo: Repository for account balances
            transaction_repo: Repository for transaction records
        """
        self.account_repo = account_repo
        self.transaction_repo = transaction_repo

    @staticmethod
    def _check_amount(amount: int) -> None:
        if amount <= 0:
            raise ValidationError("Credit amount must be positive", amount=amount)

    async def try_reserve(self, account_id: str, amount: int) -> bool:
        """
        Atomically take amount from the balance if it is available.

        Returns:
            True if the credits were reserved
        """
        self._check_amount(amount)
        return await self.account_repo.try_reserve(account_id, amount) is not None

    async def reserve(self, account_id: str, amount: int) -> int:
        """
        Reserve credits for a paid operation.

        Args:
            account_id: Account identifier
            amount: Operation price

        Returns:
            Balance after the reservation

        Raises:
            InsufficientCreditsError: If the balance is below amount
        """
        self._check_amount(amount)
        new_balance = await self.account_repo.try_reserve(account_id, amount)

        if new_balance is None:
            logger.warning(
                "Reservation rejected - insufficient credits",
                account_id=account_id,
                price=amount,
            )
            raise InsufficientCreditsError(
                "Insufficient credits", account_id=account_id, price=amount
            )

        logger.info(
            "Credits reserved",
            account_id=account_id,
            price=amount,
            new_balance=new_balance,
        )
        return new_balance

    async def refund(self, account_id: str, amount: int) -> bool:
        """
        Return reserved credits after a failed attempt.

        Best-effort: a failure is logged as RefundFailure and never raised,
        so it cannot mask the error that caused the refund.

        Returns:
            True if the balance was restored
        """
        try:
            new_balance = await self.account_repo.increment_credits(account_id, amount)
        except Exception as e:
            failure = RefundFailure(
                "Refund failed",
                account_id=account_id,
                amount=amount,
                error=str(e),
                cause=type(e).__name__,
            )
            logger.error("Refund failure", **failure.to_dict())
            return False

        if new_balance is None:
            failure = RefundFailure(
                "Refund failed - account not found", account_id=account_id, amount=amount
            )
            logger.error("Refund failure", **failure.to_dict())
            return False

        logger.info(
            "Credits refunded",
            account_id=account_id,
            amount=amount,
            new_balance=new_balance,
        )
        return True

    async def credit(
        self, account_id: str, amount: int, session: Any = None
    ) -> int | None:
        """
        Add purchased credits to the balance.

        Args:
            account_id: Account identifier
            amount: Credits to add
            session: Optional MongoDB session for transactions

        Returns:
            New balance, or None if the account is missing
        """
        self._check_amount(amount)
        new_balance = await self.account_repo.increment_credits(
            account_id, amount, session=session
        )

        if new_balance is not None:
            logger.info(
                "Credits added",
                account_id=account_id,
                amount=amount,
                new_balance=new_balance,
            )
        return new_balance

    async def get_balance(self, account_id: str) -> int | None:
        return await self.account_repo.get_balance(account_id)

    async def get_user_transactions(
        self,
        account_id: str,
        page: int = 1,
        page_size: int = 20,
        kind: str | None = None,
    ) -> tuple[list[TransactionRecord], int]:
        """
        Get paginated transaction history for an account.

        Args:
            account_id: Account identifier
            page: Page number (1-indexed)
            page_size: Number of records per page
            kind: Optional filter (debit, credit)

        Returns:
            Tuple of (records list, total count)
        """
        return await self.transaction_repo.get_user_transactions(
            user_id=account_id, page=page, page_size=page_size, kind=kind
        )
