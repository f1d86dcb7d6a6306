"""
Generation models: request bodies, gateway payloads, attempt state and audit records.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from ..core.pricing import OperationKind, ResolutionTier, model_choice_for
from ..core.utils.date_utils import utcnow
from .style import StyleTemplate

AspectRatio = Literal["1:1", "16:9", "9:16", "4:5", "9:21"]

# (standard width, standard height) per aspect ratio; high-res doubles both
_GENERATE_DIMENSIONS: dict[str, tuple[int, int]] = {
    "1:1": (1024, 1024),
    "16:9": (1024, 576),
    "9:16": (576, 1024),
    "4:5": (819, 1024),
    "9:21": (540, 1260),
}


# ===== Request bodies =====


class _CamelRequest(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class EnhanceRequest(_CamelRequest):
    """Body of POST /api/image/enhance."""

    image: str = Field(..., min_length=1, description="Source image (data URL)")
    prompt: str = ""
    style_name: str = "Enhance"
    sliders: dict[str, Any] | None = None
    high_res: bool = True


class GenerateRequest(_CamelRequest):
    """Body of POST /api/image/generate."""

    prompt: str = Field(..., min_length=1)
    style: str = "Studio"
    sliders: dict[str, Any] | None = None
    high_res: bool = False
    aspect_ratio: AspectRatio = "1:1"


class UpscaleRequest(_CamelRequest):
    """Body of POST /api/image/upscale."""

    image: str = Field(..., min_length=1)
    scale: int = Field(2, ge=1, le=8)


class StyleTransferRequest(_CamelRequest):
    """Body of POST /api/image/style-transfer."""

    style_id: str = Field(..., min_length=1)
    image: str | None = None
    fabric_image: str | None = None
    logo_image: str | None = None
    user_prompt: str | None = None
    resolution_choice: str | None = None

    @property
    def main_image(self) -> str | None:
        """The image to transform; older clients send it as fabricImage."""
        return self.image or self.fabric_image


# ===== Gateway payloads =====


@dataclass(frozen=True)
class EnhancePayload:
    image: str
    prompt: str = ""
    style_name: str = "Enhance"
    sliders: dict[str, Any] | None = None
    high_res: bool = True

    kind = OperationKind.ENHANCE


@dataclass(frozen=True)
class GeneratePayload:
    prompt: str
    style: str = "Studio"
    sliders: dict[str, Any] | None = None
    high_res: bool = False
    aspect_ratio: str = "1:1"

    kind = OperationKind.GENERATE

    @property
    def dimensions(self) -> tuple[int, int]:
        """Output (width, height) for the aspect ratio and resolution."""
        width, height = _GENERATE_DIMENSIONS.get(
            self.aspect_ratio, _GENERATE_DIMENSIONS["1:1"]
        )
        if self.high_res:
            return width * 2, height * 2
        return width, height


@dataclass(frozen=True)
class UpscalePayload:
    image: str
    scale: int = 2

    kind = OperationKind.UPSCALE


@dataclass(frozen=True)
class StyleTransferPayload:
    style: StyleTemplate
    main_image: str
    resolution: ResolutionTier
    logo_image: str | None = None
    user_prompt: str = ""

    kind = OperationKind.STYLE_TRANSFER

    @property
    def model_choice(self) -> str:
        return model_choice_for(self.resolution)

    @property
    def debit_description(self) -> str:
        """Transaction description, e.g. studio:style_1:model2:4k."""
        return (
            f"studio:{self.style.style_id}:{self.model_choice}:"
            f"{self.resolution.value}"
        )


GenerationPayload = EnhancePayload | GeneratePayload | UpscalePayload | StyleTransferPayload


@dataclass(frozen=True)
class GeneratedAsset:
    """Normalized successful gateway result."""

    image: str  # URL or data URL
    operation: OperationKind


# ===== Attempt lifecycle =====


class AttemptState(str, Enum):
    """Orchestrator states for one generation attempt."""

    AUTHENTICATED = "authenticated"
    VALIDATED = "validated"
    RESERVED = "reserved"
    GATEWAY_CALLED = "gateway_called"
    COMMITTED = "committed"
    REFUNDED_FAILURE = "refunded_failure"
    UNREFUNDED_FAILURE = "unrefunded_failure"


class AttemptOutcome(str, Enum):
    PENDING = "pending"
    SUCCEEDED = "succeeded"
    FAILED_REFUNDED = "failed_refunded"
    FAILED_UNREFUNDED = "failed_unrefunded"


@dataclass
class GenerationAttempt:
    """
    One request-scoped, priced invocation of an image operation.

    Never persisted. The reservation it holds is the delta between a successful
    conditional decrement and a possible compensating increment.
    """

    account_id: str
    operation: OperationKind
    price: int
    resolution: ResolutionTier = ResolutionTier.STANDARD
    state: AttemptState = AttemptState.AUTHENTICATED
    outcome: AttemptOutcome = AttemptOutcome.PENDING
    reserved: bool = False
    balance: int | None = None  # Last balance observed by the ledger
    asset: GeneratedAsset | None = None
    persistence_failures: list[str] = field(default_factory=list)

    def transition(self, state: AttemptState) -> None:
        self.state = state


# ===== Audit =====


class GeneratedImageRecord(BaseModel):
    """Best-effort audit record of a paid style-transfer result."""

    record_id: str
    user_id: str
    style_id: str
    original_image_url: str
    generated_image_url: str
    created_at: datetime = Field(default_factory=utcnow)
