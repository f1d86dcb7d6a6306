"""
Enhance style presets.
Named prompt presets the enhance page offers; the client sends the chosen
preset's name and prompt as styleName / prompt.
"""

from datetime import datetime

from pydantic import BaseModel, Field

from ..core.utils.date_utils import utcnow


class EnhanceStyle(BaseModel):
    """Enhance style document stored in the enhance_styles collection."""

    enhance_style_id: str = Field(..., description="Unique preset identifier")
    name: str
    description: str = ""
    cover_image: str = ""
    prompt: str = Field("", description="Prompt sent with the enhance request")
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    def to_public(self) -> dict[str, str]:
        """Wire shape of the public catalog."""
        return {
            "id": self.enhance_style_id,
            "name": self.name,
            "description": self.description,
            "coverImage": self.cover_image,
            "prompt": self.prompt,
            "createdAt": self.created_at.isoformat(),
            "updatedAt": self.updated_at.isoformat(),
        }
