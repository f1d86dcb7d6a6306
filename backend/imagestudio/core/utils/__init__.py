"""
Core utility functions for the image studio backend.
"""

from .date_utils import utc_millis, utcnow
from .image_probe import (
    ImageDimensions,
    get_approx_bytes,
    get_image_dimensions,
    is_data_url,
)

__all__ = [
    # Dates
    "utcnow",
    "utc_millis",
    # Image metadata probes
    "ImageDimensions",
    "get_image_dimensions",
    "get_approx_bytes",
    "is_data_url",
]
