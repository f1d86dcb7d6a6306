"""
Account endpoints: profile, recent history and credit transactions.
"""

import math
from typing import Any, Literal

import structlog
from fastapi import APIRouter, Depends, Query

from ..database.repositories.history_repository import HistoryRepository
from ..models.account import Account
from ..services.credit_service import CreditService
from .dependencies.auth import get_current_user, get_current_user_id
from .dependencies.services import get_credit_service, get_history_repository
from .schemas.envelope import success

logger = structlog.get_logger()

router = APIRouter(prefix="/api", tags=["user"])


@router.get("/user/history")
async def get_history(
    user_id: str = Depends(get_current_user_id),
    history_repo: HistoryRepository = Depends(get_history_repository),
) -> dict[str, Any]:
    """Two most recent generated images, newest first."""
    entries = await history_repo.read(user_id)
    return success([entry.model_dump(mode="json", by_alias=True) for entry in entries])


@router.get("/users/me")
async def get_current_user_profile(
    current_user: Account = Depends(get_current_user),
) -> dict[str, Any]:
    """Current account profile including credit balance."""
    return success(
        {
            "userId": current_user.user_id,
            "email": current_user.email,
            "name": current_user.name,
            "credits": current_user.credits,
            "imageCount": current_user.image_count,
            "generationCount": current_user.generation_count,
            "isAdmin": current_user.is_admin,
            "createdAt": current_user.created_at.isoformat(),
        }
    )


@router.get("/credits/transactions")
async def get_transaction_history(
    page: int = Query(1, ge=1, description="Page number (1-indexed)"),
    page_size: int = Query(20, ge=1, le=100, description="Items per page"),
    kind: Literal["debit", "credit"] | None = Query(None, description="Filter by kind"),
    user_id: str = Depends(get_current_user_id),
    credit_service: CreditService = Depends(get_credit_service),
) -> dict[str, Any]:
    """
    Paginated credit transactions, newest first.

    **Query Parameters:**
    - `page`: Page number (default: 1)
    - `page_size`: Items per page (default: 20, max: 100)
    - `kind`: Filter by kind (debit, credit)
    """
    transactions, total = await credit_service.get_user_transactions(
        account_id=user_id, page=page, page_size=page_size, kind=kind
    )

    return success(
        {
            "transactions": [
                {
                    "transactionId": record.transaction_id,
                    "amount": record.amount,
                    "kind": record.kind,
                    "description": record.description,
                    "createdAt": record.created_at.isoformat(),
                }
                for record in transactions
            ],
            "pagination": {
                "page": page,
                "pageSize": page_size,
                "total": total,
                "totalPages": math.ceil(total / page_size) if total else 0,
            },
        }
    )
