"""
Billing service: credit pack checkout and payment verification.

A verified payment is credited at most once. The payment reference is the
credit record's description; it is checked before crediting and guarded by
a unique index, so replays and concurrent verifications credit nothing.
"""

from dataclasses import dataclass
from typing import Any

import structlog
from pymongo.errors import DuplicateKeyError, PyMongoError

from ..core.config import Settings
from ..core.exceptions import (
    AuthorizationError,
    DatabaseError,
    NotFoundError,
    ValidationError,
)
from ..core.utils.date_utils import utc_millis
from ..database.mongodb import MongoDB
from ..database.repositories.transaction_repository import TransactionRepository
from ..models.account import Account
from .credit_service import CreditService
from .paystack_client import PaystackClient

logger = structlog.get_logger()


@dataclass(frozen=True)
class CreditPlan:
    credits: int
    amount_ngn: int


PLANS: dict[str, CreditPlan] = {
    "pack_500": CreditPlan(credits=500, amount_ngn=500),
    "pack_1000": CreditPlan(credits=1000, amount_ngn=1000),
    "pack_3000": CreditPlan(credits=3000, amount_ngn=3000),
}


@dataclass(frozen=True)
class CheckoutSession:
    authorization_url: str
    reference: str


@dataclass(frozen=True)
class VerificationResult:
    credits: int
    added: int = 0
    already_credited: bool = False


class BillingService:
    """Turns verified payments into credits."""

    def __init__(
        self,
        credit_service: CreditService,
        transaction_repo: TransactionRepository,
        paystack: PaystackClient,
        settings: Settings,
        mongodb: MongoDB | None = None,
    ):
        """
        Initialize billing service.

        Args:
            credit_service: Ledger used to add credits
            transaction_repo: Credit records (idempotency store)
            paystack: Payment gateway client
            settings: Application settings
            mongodb: Connection used for multi-document transactions
        """
        self.credit_service = credit_service
        self.transaction_repo = transaction_repo
        self.paystack = paystack
        self.settings = settings
        self.mongodb = mongodb

    async def checkout(
        self, account: Account, plan_id: str, app_url: str | None = None
    ) -> CheckoutSession:
        """
        Start a hosted checkout for a credit pack.

        Args:
            account: Paying account
            plan_id: One of PLANS
            app_url: Public app URL when APP_URL is not configured

        Raises:
            ValidationError: Unknown plan or account without email
            GatewayError: Paystack rejected the request
        """
        plan = PLANS.get(plan_id)
        if plan is None:
            raise ValidationError("Invalid plan", plan_id=plan_id)
        if not account.email:
            raise ValidationError("Account has no email address")

        base_url = (self.settings.app_url or app_url or "http://localhost:3000").rstrip("/")
        reference = f"cred_{account.user_id}_{utc_millis()}"

        data = await self.paystack.initialize_transaction(
            email=account.email,
            amount_kobo=plan.amount_ngn * 100,
            reference=reference,
            callback_url=f"{base_url}/billing/success",
            metadata={
                "userId": account.user_id,
                "planId": plan_id,
                "credits": plan.credits,
                "amountNgn": plan.amount_ngn,
            },
        )

        logger.info(
            "Checkout initialized",
            account_id=account.user_id,
            plan_id=plan_id,
            reference=reference,
        )

        return CheckoutSession(
            authorization_url=str(data.get("authorization_url") or ""),
            reference=reference,
        )

    @staticmethod
    def _paid_amount(data: dict[str, Any], account_id: str) -> int:
        """Validate a verified transaction and return the paid amount in NGN."""
        if data.get("status") != "success":
            raise ValidationError("Payment not successful", status=data.get("status"))

        try:
            amount_ngn = round(float(data.get("amount") or 0) / 100)
        except (TypeError, ValueError):
            amount_ngn = 0
        if amount_ngn <= 0:
            raise ValidationError("Invalid payment amount")

        metadata = data.get("metadata")
        if not isinstance(metadata, dict):
            metadata = {}

        try:
            expected = float(metadata.get("amountNgn"))
        except (TypeError, ValueError):
            expected = None
        if expected is not None and expected > 0 and expected != amount_ngn:
            raise ValidationError(
                "Payment amount mismatch", expected=expected, paid=amount_ngn
            )

        owner = metadata.get("userId")
        if owner and str(owner) != account_id:
            raise AuthorizationError("Payment belongs to another account")

        return amount_ngn

    async def verify(self, account_id: str, reference: str) -> VerificationResult:
        """
        Verify a payment and credit it exactly once.

        Credits equal the paid amount in NGN.

        Raises:
            ValidationError: Missing reference, unpaid or inconsistent payment
            AuthorizationError: Payment was started by another account
            GatewayError: Paystack verification failed
        """
        if not reference:
            raise ValidationError("Missing reference")

        data = await self.paystack.verify_transaction(reference)
        credits = self._paid_amount(data, account_id)

        existing = await self.transaction_repo.find_by_description(reference)
        if existing is not None:
            return await self._already_credited(account_id, reference)

        try:
            new_balance = await self._apply_credit(account_id, credits, reference)
        except DuplicateKeyError:
            return await self._already_credited(account_id, reference)

        logger.info(
            "Payment credited",
            account_id=account_id,
            reference=reference,
            amount=credits,
            new_balance=new_balance,
        )
        return VerificationResult(credits=new_balance, added=credits)

    async def _already_credited(self, account_id: str, reference: str) -> VerificationResult:
        logger.info("Payment replay skipped", account_id=account_id, reference=reference)
        balance = await self.credit_service.get_balance(account_id)
        return VerificationResult(credits=balance or 0, already_credited=True)

    async def _apply_credit(self, account_id: str, credits: int, reference: str) -> int:
        """Write the credit record and add the credits, atomically when possible."""
        client = self.mongodb.client if self.mongodb is not None else None

        if client is not None:
            try:
                async with await client.start_session() as session:
                    async with session.start_transaction():
                        await self.transaction_repo.record(
                            account_id, credits, "credit", reference, session=session
                        )
                        new_balance = await self.credit_service.credit(
                            account_id, credits, session=session
                        )
                        if new_balance is None:
                            # Aborts the transaction, dropping the credit record
                            raise NotFoundError("Account not found", account_id=account_id)
                return new_balance
            except DuplicateKeyError:
                raise
            except PyMongoError as e:
                error_msg = str(e).lower()
                if "transaction" not in error_msg and "replica" not in error_msg:
                    raise DatabaseError(
                        "Failed to credit payment", reference=reference
                    ) from e
                logger.warning(
                    "MongoDB transactions not supported - falling back to sequential",
                    error=str(e),
                )

        # Sequential: the record claims the reference before the balance moves
        await self.transaction_repo.record_credit(account_id, credits, reference)
        new_balance = await self.credit_service.credit(account_id, credits)
        if new_balance is None:
            logger.error(
                "Credit record written but balance not updated",
                account_id=account_id,
                reference=reference,
                amount=credits,
            )
            raise DatabaseError(
                "Failed to credit payment", account_id=account_id, reference=reference
            )
        return new_balance
