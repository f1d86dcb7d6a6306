"""
Model-run output shapes.

The provider returns the generated asset as a bare URL string, a list of URL
strings, or an object carrying a URL. Each shape is a variant of
ExternalOutput with its own extraction rule.
"""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class Url:
    value: str


@dataclass(frozen=True)
class UrlList:
    values: tuple[str, ...]


@dataclass(frozen=True)
class UrlBearing:
    payload: dict[str, Any]


ExternalOutput = Url | UrlList | UrlBearing


def parse_output(raw: Any) -> ExternalOutput | None:
    """
    Classify a raw provider output.

    Returns:
        The matching variant, or None if the shape is not recognized
    """
    if isinstance(raw, str) and raw:
        return Url(raw)
    if isinstance(raw, list) and raw and all(isinstance(item, str) for item in raw):
        return UrlList(tuple(raw))
    if isinstance(raw, dict):
        return UrlBearing(raw)
    return None


def extract_url(output: ExternalOutput | None) -> str | None:
    """Pull the single asset URL out of a parsed output."""
    match output:
        case Url(value=value):
            return value
        case UrlList(values=values):
            return values[0]
        case UrlBearing(payload=payload):
            for key in ("url", "uri", "image"):
                candidate = payload.get(key)
                if isinstance(candidate, str) and candidate:
                    return candidate
            return None
        case _:
            return None
