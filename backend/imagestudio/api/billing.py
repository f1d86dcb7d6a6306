"""
Billing endpoints: credit pack checkout and payment verification.
"""

from typing import Any

import structlog
from fastapi import APIRouter, Depends, Query, Request

from ..models.account import Account
from ..services.billing_service import BillingService
from .dependencies.auth import get_current_user, get_current_user_id
from .dependencies.services import get_billing_service
from .schemas.billing_schemas import CheckoutRequest
from .schemas.envelope import success

logger = structlog.get_logger()

router = APIRouter(prefix="/api/billing", tags=["billing"])


def _public_base_url(request: Request) -> str:
    """Base URL as seen by the browser (honors reverse-proxy headers)."""
    host = request.headers.get("x-forwarded-host") or request.headers.get("host")
    proto = request.headers.get("x-forwarded-proto") or request.url.scheme
    return f"{proto}://{host}" if host else str(request.base_url)


@router.post("/checkout")
async def checkout(
    request: Request,
    body: CheckoutRequest,
    account: Account = Depends(get_current_user),
    billing_service: BillingService = Depends(get_billing_service),
) -> dict[str, Any]:
    """
    Start a Paystack checkout for a credit pack.

    **Request Body:** `{"planId": "pack_1000"}`

    **Response:** `{"status": "success", "data": {"authorizationUrl": "...", "reference": "cred_..."}}`
    """
    session = await billing_service.checkout(
        account, body.plan_id or "", app_url=_public_base_url(request)
    )
    return success(
        {"authorizationUrl": session.authorization_url, "reference": session.reference}
    )


@router.get("/verify")
async def verify_payment(
    reference: str | None = Query(None, description="Payment reference"),
    user_id: str = Depends(get_current_user_id),
    billing_service: BillingService = Depends(get_billing_service),
) -> dict[str, Any]:
    """
    Verify a payment and credit it once.

    Replays of an already credited reference return `alreadyCredited: true`
    with the unchanged balance.
    """
    result = await billing_service.verify(user_id, reference or "")

    if result.already_credited:
        return success({"credits": result.credits, "alreadyCredited": True})
    return success({"credits": result.credits, "added": result.added})
