"""
Credit pricing for image operations.
Centralizes operation kinds, resolution tiers, and their credit costs.
"""

from enum import Enum

from .exceptions import InvalidResolutionError


class OperationKind(str, Enum):
    """Image operations that spend credits."""

    ENHANCE = "enhance"
    GENERATE = "generate"
    STYLE_TRANSFER = "style-transfer"
    UPSCALE = "upscale"


class ResolutionTier(str, Enum):
    """Output resolution tiers offered for style transfer."""

    STANDARD = "standard"
    TWO_K = "2k"
    FOUR_K = "4k"


# Flat-priced operations ignore the resolution tier entirely
FLAT_OPERATION_COST = 1

STYLE_TRANSFER_COSTS: dict[ResolutionTier, int] = {
    ResolutionTier.STANDARD: 100,
    ResolutionTier.TWO_K: 300,
    ResolutionTier.FOUR_K: 500,
}

# "1k" is what the studio UI sends for the standard tier
_RESOLUTION_ALIASES: dict[str, ResolutionTier] = {
    "1k": ResolutionTier.STANDARD,
    "standard": ResolutionTier.STANDARD,
    "2k": ResolutionTier.TWO_K,
    "4k": ResolutionTier.FOUR_K,
}


def normalize_resolution(value: str | ResolutionTier | None) -> ResolutionTier:
    """
    Map a client-supplied resolution choice onto a tier.

    Args:
        value: "1k", "standard", "2k", "4k", a tier, or None (standard)

    Returns:
        Matching resolution tier

    Raises:
        InvalidResolutionError: If the value is not a recognized tier
    """
    if isinstance(value, ResolutionTier):
        return value
    if value is None or value == "":
        return ResolutionTier.STANDARD

    tier = _RESOLUTION_ALIASES.get(str(value).lower())
    if tier is None:
        raise InvalidResolutionError(
            "resolutionChoice must be one of 1k, 2k, 4k", resolution=value
        )
    return tier


def price(
    operation: OperationKind | str, resolution: str | ResolutionTier | None = None
) -> int:
    """
    Credit cost of one operation at a resolution tier.

    Args:
        operation: Operation kind
        resolution: Resolution tier (only meaningful for style transfer)

    Returns:
        Cost in whole credits

    Raises:
        InvalidResolutionError: If style transfer is priced at an unknown tier
        ValueError: If the operation kind is unknown
    """
    kind = OperationKind(operation)
    if kind is not OperationKind.STYLE_TRANSFER:
        return FLAT_OPERATION_COST

    return STYLE_TRANSFER_COSTS[normalize_resolution(resolution)]


def model_choice_for(resolution: ResolutionTier) -> str:
    """Standard tier runs on model1, higher tiers on model2."""
    return "model1" if resolution is ResolutionTier.STANDARD else "model2"


def provider_resolution(resolution: ResolutionTier) -> str | None:
    """Resolution hint sent to the model provider (model2 only)."""
    if resolution is ResolutionTier.STANDARD:
        return None
    return "4K" if resolution is ResolutionTier.FOUR_K else "2K"
