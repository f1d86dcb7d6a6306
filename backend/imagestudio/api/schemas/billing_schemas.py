"""
Billing API request schemas.
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CheckoutRequest(BaseModel):
    """Request to start a credit pack checkout."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    plan_id: str | None = Field(None, description="pack_500, pack_1000 or pack_3000")
