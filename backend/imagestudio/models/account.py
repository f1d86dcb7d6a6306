"""
Account models: a user's credit-bearing identity record.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from ..core.utils.date_utils import utcnow

# Usage history is a convenience cache of the latest results, not an audit trail
USAGE_HISTORY_LIMIT = 2


class HistoryEntry(BaseModel):
    """One generated image in the account's recent usage history."""

    model_config = ConfigDict(populate_by_name=True)

    url: str = Field(..., description="Generated image URL or data URL")
    created_at: datetime = Field(default_factory=utcnow, alias="createdAt")


class Account(BaseModel):
    """Account document stored in the users collection."""

    user_id: str = Field(..., description="Unique account identifier")
    email: str | None = Field(None, description="Email address (unique if set)")
    name: str | None = Field(None, description="Display name")
    is_admin: bool = Field(False, description="Admin privileges flag")
    created_at: datetime = Field(default_factory=utcnow)

    # Credit system fields
    credits: int = Field(
        default=0, ge=0, description="Current credit balance (whole credits)"
    )
    usage_history: list[HistoryEntry] = Field(
        default_factory=list,
        description="Most recent generated images, newest first (max 2)",
    )
    image_count: int = Field(default=0, description="Lifetime images produced")
    generation_count: int = Field(
        default=0, description="Lifetime successful generation attempts"
    )

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "user_id": "user_abc123",
                "email": "ada@example.com",
                "name": "Ada",
                "is_admin": False,
                "credits": 600,
                "usage_history": [
                    {
                        "url": "https://cdn.example.com/out.png",
                        "createdAt": "2025-10-13T10:00:00Z",
                    }
                ],
                "image_count": 12,
                "generation_count": 12,
            }
        }
    )
