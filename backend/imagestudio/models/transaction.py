"""
Transaction record models.
Immutable audit trail of credit debits and credits.
"""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from ..core.utils.date_utils import utcnow

TransactionKind = Literal["debit", "credit"]


class TransactionRecord(BaseModel):
    """
    One immutable debit or credit tied to an account.

    For payment credits the description carries the payment reference and
    doubles as the idempotency key.
    """

    transaction_id: str = Field(..., description="Unique transaction identifier")
    user_id: str = Field(..., description="Account the record belongs to")
    amount: int = Field(..., gt=0, description="Credits moved (always positive)")
    kind: TransactionKind = Field(..., description="debit or credit")
    description: str = Field(..., description="Purpose or payment reference")
    created_at: datetime = Field(default_factory=utcnow)

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "transaction_id": "txn_abc123",
                "user_id": "user_xyz789",
                "amount": 500,
                "kind": "debit",
                "description": "studio:style_123:model2:4k",
                "created_at": "2025-10-13T10:00:00Z",
            }
        }
    )
