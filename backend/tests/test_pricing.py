"""
Unit tests for credit pricing and resolution tiers.
"""

import pytest

from imagestudio.core.exceptions import InvalidResolutionError, ValidationError
from imagestudio.core.pricing import (
    OperationKind,
    ResolutionTier,
    model_choice_for,
    normalize_resolution,
    price,
    provider_resolution,
)


class TestPrice:
    """Test price() for every operation."""

    def test_style_transfer_tiers(self):
        """Test style transfer costs 100 / 300 / 500 by tier."""
        assert price("style-transfer", "standard") == 100
        assert price("style-transfer", "2k") == 300
        assert price("style-transfer", "4k") == 500

    def test_style_transfer_defaults_to_standard(self):
        """Test missing resolution prices at the standard tier."""
        assert price(OperationKind.STYLE_TRANSFER) == 100
        assert price(OperationKind.STYLE_TRANSFER, "") == 100

    def test_style_transfer_accepts_1k_alias(self):
        """Test the UI's 1k value prices as standard."""
        assert price("style-transfer", "1k") == 100

    @pytest.mark.parametrize("operation", ["enhance", "generate", "upscale"])
    @pytest.mark.parametrize("resolution", [None, "standard", "2k", "4k", "bogus"])
    def test_flat_operations_ignore_resolution(self, operation, resolution):
        """Test enhance/generate/upscale always cost 1 credit."""
        assert price(operation, resolution) == 1

    def test_unknown_resolution_for_style_transfer(self):
        """Test unknown tier raises InvalidResolutionError."""
        with pytest.raises(InvalidResolutionError):
            price("style-transfer", "8k")

    def test_unknown_operation(self):
        """Test unknown operation kind raises ValueError."""
        with pytest.raises(ValueError):
            price("sketch")


class TestNormalizeResolution:
    """Test resolution normalization."""

    def test_case_insensitive(self):
        """Test tier names are case-insensitive."""
        assert normalize_resolution("4K") is ResolutionTier.FOUR_K
        assert normalize_resolution("Standard") is ResolutionTier.STANDARD

    def test_tier_passthrough(self):
        """Test tiers are returned unchanged."""
        assert normalize_resolution(ResolutionTier.TWO_K) is ResolutionTier.TWO_K

    def test_invalid_resolution_is_validation_error(self):
        """Test InvalidResolutionError maps to HTTP 400."""
        with pytest.raises(ValidationError) as exc_info:
            normalize_resolution("huge")

        assert exc_info.value.status_code == 400
        assert exc_info.value.error_type == "invalid_resolution"


class TestModelSelection:
    """Test model and provider resolution selection by tier."""

    def test_standard_uses_model1(self):
        """Test standard tier runs on model1 without a resolution hint."""
        assert model_choice_for(ResolutionTier.STANDARD) == "model1"
        assert provider_resolution(ResolutionTier.STANDARD) is None

    def test_higher_tiers_use_model2(self):
        """Test 2k/4k run on model2 with matching hints."""
        assert model_choice_for(ResolutionTier.TWO_K) == "model2"
        assert model_choice_for(ResolutionTier.FOUR_K) == "model2"
        assert provider_resolution(ResolutionTier.TWO_K) == "2K"
        assert provider_resolution(ResolutionTier.FOUR_K) == "4K"
