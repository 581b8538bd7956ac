"""JSON envelope shared by every API response.

Success: ``{"success": true, "data": ..., "message"?: str}``
Failure: ``{"success": false, "error": str, "message"?: str, "data"?: {...}}``
"""
from typing import Any


def success_response(data: Any, message: str | None = None) -> dict[str, Any]:
    body: dict[str, Any] = {"success": True, "data": data}
    if message:
        body["message"] = message
    return body


def error_response(
    error: str,
    message: str | None = None,
    data: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Build a failure body; ``error`` is the machine-readable kind, e.g. ``DuplicateEmail``."""
    body: dict[str, Any] = {"success": False, "error": error}
    if message:
        body["message"] = message
    if data:
        body["data"] = data
    return body
