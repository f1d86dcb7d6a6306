"""
Generation orchestrator.

Runs one priced image operation: validate, reserve credits, call the
gateway, then either commit the side effects or refund the reservation.

Failure rules:
- Nothing is reserved until input validation passes.
- Any gateway failure or cancellation refunds the exact reserved amount; a
  failed refund is logged and the original error still reaches the caller.
- Once the gateway has succeeded the credits are never refunded; failed
  side-effect writes are logged and the request still succeeds.
"""

import asyncio
from collections.abc import Awaitable
from typing import Any

import structlog

from ..core.exceptions import (
    AppError,
    GatewayError,
    NotFoundError,
    PersistenceFailure,
    ValidationError,
)
from ..core.pricing import ResolutionTier, normalize_resolution, price
from ..core.utils.date_utils import utcnow
from ..database.repositories.account_repository import AccountRepository
from ..database.repositories.generated_image_repository import GeneratedImageRepository
from ..database.repositories.history_repository import HistoryRepository
from ..database.repositories.style_repository import StyleRepository
from ..database.repositories.transaction_repository import TransactionRepository
from ..models.account import HistoryEntry
from ..models.generation import (
    AttemptOutcome,
    AttemptState,
    EnhancePayload,
    EnhanceRequest,
    GeneratePayload,
    GenerateRequest,
    GenerationAttempt,
    GenerationPayload,
    StyleTransferPayload,
    StyleTransferRequest,
    UpscalePayload,
    UpscaleRequest,
)
from .credit_service import CreditService
from .gateway import GenerationGateway, ensure_image_input

logger = structlog.get_logger()


class GenerationOrchestrator:
    """Reserve, invoke, then commit or refund, for every image operation."""

    def __init__(
        self,
        credit_service: CreditService,
        gateway: GenerationGateway,
        account_repo: AccountRepository,
        history_repo: HistoryRepository,
        transaction_repo: TransactionRepository,
        style_repo: StyleRepository,
        generated_image_repo: GeneratedImageRepository,
    ):
        self.credit_service = credit_service
        self.gateway = gateway
        self.account_repo = account_repo
        self.history_repo = history_repo
        self.transaction_repo = transaction_repo
        self.style_repo = style_repo
        self.generated_image_repo = generated_image_repo

    # ===== Operations =====

    async def enhance(self, account_id: str, request: EnhanceRequest) -> GenerationAttempt:
        payload = EnhancePayload(
            image=request.image,
            prompt=request.prompt,
            style_name=request.style_name,
            sliders=request.sliders,
            high_res=request.high_res,
        )
        return await self._run(account_id, payload)

    async def generate(self, account_id: str, request: GenerateRequest) -> GenerationAttempt:
        payload = GeneratePayload(
            prompt=request.prompt,
            style=request.style,
            sliders=request.sliders,
            high_res=request.high_res,
            aspect_ratio=request.aspect_ratio,
        )
        return await self._run(account_id, payload)

    async def upscale(self, account_id: str, request: UpscaleRequest) -> GenerationAttempt:
        payload = UpscalePayload(image=request.image, scale=request.scale)
        return await self._run(account_id, payload)

    async def style_transfer(
        self, account_id: str, request: StyleTransferRequest
    ) -> GenerationAttempt:
        """
        Transform an image with an admin-defined style.

        Raises:
            NotFoundError: Unknown style
            ValidationError: Missing or malformed inputs, unknown resolution
            InsufficientCreditsError: Balance below the tier price
            GatewayError: Model run failed (credits refunded)
        """
        payload = await self._build_style_transfer_payload(request)
        return await self._run(account_id, payload, resolution=payload.resolution)

    async def _build_style_transfer_payload(
        self, request: StyleTransferRequest
    ) -> StyleTransferPayload:
        style = await self.style_repo.get_by_id(request.style_id)
        if style is None:
            raise NotFoundError("Style not found", style_id=request.style_id)

        if not style.reference_image:
            raise ValidationError(
                "Style is missing reference image", style_id=style.style_id
            )

        is_fabric_mockup = style.style_type == "fabric-mockup"

        main_image = request.main_image
        if not main_image:
            raise ValidationError(
                "fabricImage is required" if is_fabric_mockup else "image is required"
            )

        if is_fabric_mockup and style.requires_logo_upload and not request.logo_image:
            raise ValidationError("logoImage is required")

        resolution = normalize_resolution(request.resolution_choice)

        ensure_image_input(style.reference_image, "referenceImage")
        ensure_image_input(main_image, "image")
        if request.logo_image:
            ensure_image_input(request.logo_image, "logoImage")

        return StyleTransferPayload(
            style=style,
            main_image=main_image,
            resolution=resolution,
            logo_image=request.logo_image,
            user_prompt=request.user_prompt or "",
        )

    # ===== State machine =====

    async def _run(
        self,
        account_id: str,
        payload: GenerationPayload,
        resolution: ResolutionTier = ResolutionTier.STANDARD,
    ) -> GenerationAttempt:
        attempt = GenerationAttempt(
            account_id=account_id,
            operation=payload.kind,
            price=price(payload.kind, resolution),
            resolution=resolution,
        )
        attempt.transition(AttemptState.VALIDATED)

        # Raises InsufficientCreditsError; nothing to undo at this point
        attempt.balance = await self.credit_service.reserve(account_id, attempt.price)
        attempt.reserved = True
        attempt.transition(AttemptState.RESERVED)

        try:
            attempt.transition(AttemptState.GATEWAY_CALLED)
            attempt.asset = await self.gateway.invoke(payload)
        except asyncio.CancelledError as e:
            # Caller went away mid-call; the refund must still land
            await asyncio.shield(self._refund(attempt, e))
            raise
        except AppError as e:
            await self._refund(attempt, e)
            raise
        except Exception as e:
            await self._refund(attempt, e)
            raise GatewayError(
                "Image generation failed",
                service="gateway",
                operation=attempt.operation.value,
            ) from e

        await self._commit(attempt, payload)
        return attempt

    async def _refund(self, attempt: GenerationAttempt, error: BaseException) -> None:
        logger.error(
            "Gateway failure, refunding reservation",
            account_id=attempt.account_id,
            operation=attempt.operation.value,
            price=attempt.price,
            error=str(error),
            error_type=type(error).__name__,
        )

        if await self.credit_service.refund(attempt.account_id, attempt.price):
            attempt.transition(AttemptState.REFUNDED_FAILURE)
            attempt.outcome = AttemptOutcome.FAILED_REFUNDED
        else:
            attempt.transition(AttemptState.UNREFUNDED_FAILURE)
            attempt.outcome = AttemptOutcome.FAILED_UNREFUNDED

    async def _commit(self, attempt: GenerationAttempt, payload: GenerationPayload) -> None:
        account_id = attempt.account_id
        image = attempt.asset.image

        prepended = await self._side_effect(
            attempt,
            "history",
            self.history_repo.prepend(account_id, HistoryEntry(url=image, created_at=utcnow())),
        )
        if prepended is False:
            self._log_persistence_failure(attempt, "history", "account not found")

        account = await self._side_effect(
            attempt, "counters", self.account_repo.record_image_produced(account_id)
        )
        if account is not None:
            attempt.balance = account.credits

        if isinstance(payload, StyleTransferPayload):
            await self._side_effect(
                attempt,
                "debit_record",
                self.transaction_repo.record_debit(
                    account_id, attempt.price, payload.debit_description
                ),
            )
            await self._audit(attempt, payload)

        attempt.outcome = AttemptOutcome.SUCCEEDED
        if attempt.persistence_failures:
            attempt.transition(AttemptState.UNREFUNDED_FAILURE)
        else:
            attempt.transition(AttemptState.COMMITTED)

        logger.info(
            "Generation committed",
            account_id=account_id,
            operation=attempt.operation.value,
            price=attempt.price,
            new_balance=attempt.balance,
            persistence_failures=attempt.persistence_failures or None,
        )

    async def _audit(self, attempt: GenerationAttempt, payload: StyleTransferPayload) -> None:
        """Non-critical audit record; its failure never affects the attempt."""
        try:
            await self.generated_image_repo.create(
                user_id=attempt.account_id,
                style_id=payload.style.style_id,
                original_image_url=payload.main_image,
                generated_image_url=attempt.asset.image,
            )
        except Exception as e:
            logger.warning(
                "Failed to save generated image record",
                account_id=attempt.account_id,
                style_id=payload.style.style_id,
                error=str(e),
            )

    async def _side_effect(
        self, attempt: GenerationAttempt, step: str, operation: Awaitable[Any]
    ) -> Any:
        try:
            return await operation
        except Exception as e:
            self._log_persistence_failure(attempt, step, str(e))
            return None

    def _log_persistence_failure(
        self, attempt: GenerationAttempt, step: str, reason: str
    ) -> None:
        failure = PersistenceFailure(
            "Post-generation write failed",
            account_id=attempt.account_id,
            operation=attempt.operation.value,
            step=step,
            reason=reason,
        )
        logger.error("Persistence failure", **failure.to_dict())
        attempt.persistence_failures.append(step)

