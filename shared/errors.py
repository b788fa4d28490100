"""
Shared error handling for the Pokédex relay.
"""

from typing import Dict, Any, Optional
from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Standard error response format."""

    request_id: Optional[str] = None
    code: str
    message: str
    details: Dict[str, Any] = {}


class RelayException(Exception):
    """Base exception for relay services."""

    http_status = 500

    def __init__(self, code: str, message: str, details: Optional[Dict[str, Any]] = None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_response(self, request_id: Optional[str] = None) -> ErrorResponse:
        """Convert to error response."""
        return ErrorResponse(
            request_id=request_id,
            code=self.code,
            message=self.message,
            details=self.details
        )


class UpstreamError(RelayException):
    """Non-success status or transport failure from an upstream origin."""

    def __init__(self, url: str, status_code: Optional[int] = None, message: Optional[str] = None):
        self.url = url
        self.upstream_status = status_code
        if message is None:
            message = f"Upstream returned {status_code}" if status_code else "Upstream request failed"
        details: Dict[str, Any] = {"url": url}
        if status_code is not None:
            details["status_code"] = status_code
        super().__init__("UPSTREAM_ERROR", message, details)

    @property
    def http_status(self) -> int:  # type: ignore[override]
        return 404 if self.upstream_status == 404 else 502


class DecodeError(RelayException):
    """Upstream body is not a well-formed document."""

    http_status = 502

    def __init__(self, url: str, message: str = "Malformed upstream document"):
        self.url = url
        super().__init__("DECODE_ERROR", message, {"url": url})


class InvalidArgument(RelayException):
    """Caller supplied an unsafe or invalid value."""

    http_status = 400

    def __init__(self, message: str = "Invalid argument", details: Optional[Dict[str, Any]] = None):
        super().__init__("INVALID_ARGUMENT", message, details)


class UnsupportedMediaType(RelayException):
    """Image extension is not in the relay's content type table."""

    http_status = 415

    def __init__(self, path: str, extension: str = ""):
        self.path = path
        self.extension = extension
        super().__init__(
            "UNSUPPORTED_MEDIA_TYPE",
            f"Unsupported image extension: {extension or '(none)'}",
            {"path": path, "extension": extension}
        )


class CacheUnavailable(RelayException):
    """The backing cache store cannot be reached."""

    http_status = 503

    def __init__(self, message: str = "Cache backend unavailable", details: Optional[Dict[str, Any]] = None):
        super().__init__("CACHE_UNAVAILABLE", message, details)
