"""Error classes and helpers for the Fathom MCP Server.

Defines structured exceptions for the server's error model and a
function to convert exceptions to serializable error payloads suitable
for tool responses.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional, TypedDict


class ErrorPayload(TypedDict, total=False):
    code: str
    message: str
    details: Dict[str, Any]


@dataclass(eq=False)
class AppError(Exception):
    """Base application error with a code and optional details."""

    code: str
    message: str
    details: Optional[Dict[str, Any]] = None

    def __str__(self) -> str:
        return self.message

    def to_payload(self) -> ErrorPayload:
        payload: ErrorPayload = {"code": self.code, "message": self.message}
        if self.details:
            payload["details"] = self.details
        return payload


class BadRequestError(AppError):
    """Raised when a request is invalid or missing required parameters."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__("BAD_REQUEST", message, details)


class NotFoundError(AppError):
    """Raised when a requested resource cannot be found."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__("NOT_FOUND", message, details)


class ConfigError(AppError):
    """Raised when required configuration is missing at startup."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__("CONFIG_ERROR", message, details)


class FathomAPIError(AppError):
    """Raised when the Fathom API answers with a non-2xx status.

    Attributes:
        status_code: HTTP status returned by the API.
        body: Raw response body text.
    """

    def __init__(self, status_code: int, body: str) -> None:
        super().__init__(
            "UPSTREAM_ERROR",
            f"Fathom API error ({status_code}): {body}",
            {"status_code": status_code},
        )
        self.status_code = status_code
        self.body = body


def to_error_payload(error: AppError) -> ErrorPayload:
    """Convert an application error into a structured error payload.

    Examples:
        >>> payload = to_error_payload(NotFoundError("Meeting not found", {"recording_id": 1}))
        >>> payload["code"]
        'NOT_FOUND'
    """

    return error.to_payload()
