"""
Canvas API Errors

This module defines the single error type raised by the Canvas HTTP client
and the rules used to turn a raw error response body into a readable message.
"""

import json
from enum import Enum
from typing import Any

# Maximum number of characters of a plain-text error body kept in a message
MAX_TEXT_DETAIL_LENGTH = 200


class CanvasAPIError(Exception):
    """
    Normalized failure of a Canvas API call.

    Attributes:
        message: Human-readable description of the failure
        status_code: HTTP status of the failed response, 0 when no response arrived
        response_body: Decoded body of the failed response, None for network failures
    """

    def __init__(self, message: str, status_code: int = 0, response_body: Any = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.response_body = response_body

    @property
    def is_network_error(self) -> bool:
        """True when the request never produced a response."""
        return self.status_code == 0

    def __repr__(self) -> str:
        return f"CanvasAPIError(status_code={self.status_code}, message={self.message!r})"


class ErrorBodyKind(Enum):
    """Shapes an error response body can take, in extraction priority order."""

    TEXT = "text"
    MESSAGE = "message"
    ERROR_LIST = "error_list"
    STRUCTURED = "structured"
    OTHER = "other"


def classify_error_body(body: Any) -> ErrorBodyKind:
    """
    Detect the shape of an error response body.

    Args:
        body: Decoded response body (text, parsed JSON or None)

    Returns:
        The first matching kind in priority order
    """
    if isinstance(body, str):
        return ErrorBodyKind.TEXT
    if isinstance(body, dict):
        if body.get("message"):
            return ErrorBodyKind.MESSAGE
        if isinstance(body.get("errors"), list):
            return ErrorBodyKind.ERROR_LIST
        return ErrorBodyKind.STRUCTURED
    if isinstance(body, list):
        return ErrorBodyKind.STRUCTURED
    return ErrorBodyKind.OTHER


def _error_entry_text(entry: Any) -> str:
    if isinstance(entry, dict) and entry.get("message"):
        return str(entry["message"])
    return str(entry)


def extract_error_detail(body: Any) -> str:
    """
    Build the detail part of an error message from a response body.

    Args:
        body: Decoded response body

    Returns:
        Detail text for the error message
    """
    kind = classify_error_body(body)

    if kind is ErrorBodyKind.TEXT:
        if len(body) > MAX_TEXT_DETAIL_LENGTH:
            return body[:MAX_TEXT_DETAIL_LENGTH] + "..."
        return body
    if kind is ErrorBodyKind.MESSAGE:
        return str(body["message"])
    if kind is ErrorBodyKind.ERROR_LIST:
        return ", ".join(_error_entry_text(entry) for entry in body["errors"])
    if kind is ErrorBodyKind.STRUCTURED:
        return json.dumps(body)
    return str(body)


def error_from_response(status_code: int, body: Any) -> CanvasAPIError:
    """Create the error for a failed response that did arrive."""
    detail = extract_error_detail(body)
    return CanvasAPIError(f"API Error ({status_code}): {detail}", status_code, body)


def error_from_network_failure(error: Exception) -> CanvasAPIError:
    """Create the error for a request that never got a response."""
    return CanvasAPIError(f"Network error: {error}", 0, None)
