"""
Metadata-only probes for base64 data URL images.

Reads pixel dimensions straight from the PNG IHDR chunk or the JPEG SOF
marker instead of decoding the image. Anything unrecognized or malformed
yields None ("unknown"), so callers fall back to their attempt bound.
"""

import base64
import binascii
import re
import struct
from dataclasses import dataclass

_DATA_URL_PATTERN = re.compile(r"data:(image/\w+);base64,(.+)", re.DOTALL)

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"

# Baseline, extended sequential and progressive DCT
_JPEG_SOF_MARKERS = frozenset({0xC0, 0xC1, 0xC2})


@dataclass(frozen=True)
class ImageDimensions:
    """Pixel size of an image."""

    width: int
    height: int

    @property
    def shortest_side(self) -> int:
        return min(self.width, self.height)


def _decode_payload(data_url: str) -> tuple[str, bytes] | None:
    if not isinstance(data_url, str):
        return None
    match = _DATA_URL_PATTERN.fullmatch(data_url)
    if not match:
        return None
    try:
        return match.group(1), base64.b64decode(match.group(2))
    except (binascii.Error, ValueError):
        return None


def _png_dimensions(buf: bytes) -> ImageDimensions | None:
    if len(buf) < 24 or buf[:8] != PNG_SIGNATURE:
        return None
    width, height = struct.unpack(">II", buf[16:24])
    return ImageDimensions(width=width, height=height)


def _jpeg_dimensions(buf: bytes) -> ImageDimensions | None:
    if len(buf) < 4 or buf[0] != 0xFF or buf[1] != 0xD8:
        return None

    offset = 2
    while offset < len(buf):
        if buf[offset] != 0xFF:
            offset += 1
            continue
        if offset + 1 >= len(buf):
            return None

        marker = buf[offset + 1]
        if marker in _JPEG_SOF_MARKERS:
            if offset + 8 >= len(buf):
                return None
            height, width = struct.unpack(">HH", buf[offset + 5 : offset + 9])
            return ImageDimensions(width=width, height=height)

        if offset + 4 >= len(buf):
            return None
        (segment_length,) = struct.unpack(">H", buf[offset + 2 : offset + 4])
        if segment_length <= 0:
            return None
        offset += 2 + segment_length

    return None


def get_image_dimensions(data_url: str) -> ImageDimensions | None:
    """
    Read pixel dimensions from a PNG or JPEG data URL.

    Args:
        data_url: "data:image/<type>;base64,<payload>" string

    Returns:
        Dimensions, or None if the format is unsupported or malformed
    """
    decoded = _decode_payload(data_url)
    if decoded is None:
        return None

    mime, buf = decoded
    if mime == "image/png":
        return _png_dimensions(buf)
    if mime in ("image/jpeg", "image/jpg"):
        return _jpeg_dimensions(buf)
    return None


def get_approx_bytes(data_url: str) -> int | None:
    """
    Decoded payload size of a base64 image data URL, computed from its length.

    Returns:
        Byte count, or None if the value is not an image data URL
    """
    if not isinstance(data_url, str):
        return None
    match = _DATA_URL_PATTERN.fullmatch(data_url)
    if not match:
        return None

    payload = match.group(2)
    if payload.endswith("=="):
        padding = 2
    elif payload.endswith("="):
        padding = 1
    else:
        padding = 0
    return (len(payload) * 3) // 4 - padding


def is_data_url(value: object) -> bool:
    """True for any "data:" URL string."""
    return isinstance(value, str) and value.startswith("data:")
