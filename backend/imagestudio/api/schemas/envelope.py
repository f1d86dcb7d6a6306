"""
Uniform response envelope: {status, data?, message?}.
"""

from typing import Any

from pydantic.alias_generators import to_camel


def success(data: Any = None, message: str | None = None) -> dict[str, Any]:
    """Success envelope; omits empty fields."""
    body: dict[str, Any] = {"status": "success"}
    if data is not None:
        body["data"] = data
    if message is not None:
        body["message"] = message
    return body


def error(message: str) -> dict[str, Any]:
    return {"status": "error", "message": message}


def camelize(document: dict[str, Any]) -> dict[str, Any]:
    """Rename a stored document's snake_case keys for the wire."""
    return {to_camel(key): value for key, value in document.items()}
