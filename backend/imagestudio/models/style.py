"""
Style template models.
Admin-authored configuration for style-transfer prompts and required inputs.
"""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from ..core.utils.date_utils import utcnow

StyleType = Literal["fabric-mockup", "studio-portrait", "style-transfer"]

# Fields returned by the lightweight listing (no heavy image payloads)
SUMMARY_FIELDS: tuple[str, ...] = (
    "style_id",
    "name",
    "description",
    "cover_image",
    "style_type",
    "requires_fabric_upload",
    "requires_logo_upload",
    "requires_custom_instructions",
    "requires_mannequin_reference",
    "allows_resolution_selection",
    "created_at",
    "updated_at",
)


class _CamelModel(BaseModel):
    """Accept and emit camelCase on the wire, snake_case in storage."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class StyleTemplate(_CamelModel):
    """Style template document stored in the styles collection."""

    style_id: str = Field(..., description="Unique style identifier")
    name: str
    description: str = ""
    cover_image: str = ""
    reference_image: str | None = Field(
        None, description="Reference image sent as the first model input"
    )
    example_before_image: str | None = None
    example_after_image: str | None = None
    prompt: str = Field("", description="Base prompt for every model")
    nano_banana_prompt: str | None = Field(None, description="model1 prompt override")
    nano_banana_pro_prompt: str | None = Field(
        None, description="model2 prompt override"
    )
    style_type: StyleType = "fabric-mockup"

    # Feature flags controlling which inputs the studio asks for
    requires_fabric_upload: bool = True
    requires_logo_upload: bool = True
    requires_custom_instructions: bool = True
    requires_mannequin_reference: bool = True
    allows_resolution_selection: bool = True

    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    def base_prompt_for(self, model_choice: str) -> str:
        """Model-specific prompt, falling back to the shared prompt."""
        override = (
            self.nano_banana_pro_prompt
            if model_choice == "model2"
            else self.nano_banana_prompt
        )
        return override or self.prompt


class StyleCreate(_CamelModel):
    """Request model for creating a style template."""

    name: str = Field(..., min_length=1)
    description: str = ""
    cover_image: str = Field(..., min_length=1)
    reference_image: str = Field(..., min_length=1)
    prompt: str = Field(..., min_length=1)
    nano_banana_prompt: str | None = None
    nano_banana_pro_prompt: str | None = None
    style_type: StyleType = "fabric-mockup"
    requires_fabric_upload: bool = True
    requires_logo_upload: bool = True
    requires_custom_instructions: bool = True
    requires_mannequin_reference: bool = True
    allows_resolution_selection: bool = True


class StyleUpdate(_CamelModel):
    """Partial update; unset fields keep their stored value."""

    name: str | None = None
    description: str | None = None
    cover_image: str | None = None
    reference_image: str | None = None
    prompt: str | None = None
    nano_banana_prompt: str | None = None
    nano_banana_pro_prompt: str | None = None
    style_type: StyleType | None = None
    requires_fabric_upload: bool | None = None
    requires_logo_upload: bool | None = None
    requires_custom_instructions: bool | None = None
    requires_mannequin_reference: bool | None = None
    allows_resolution_selection: bool | None = None
