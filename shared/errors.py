"""
Shared error handling for fetch-cache.
"""

from typing import Dict, Any, Optional
from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Standard error response format."""

    code: str
    message: str
    details: Dict[str, Any] = {}


class FetchCacheException(Exception):
    """Base exception for fetch-cache."""

    def __init__(self, code: str, message: str, details: Optional[Dict[str, Any]] = None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    @property
    def key(self) -> Optional[str]:
        """Cache key the error was raised for, if any."""
        return self.details.get("key")

    def to_response(self) -> ErrorResponse:
        """Convert to error response."""
        return ErrorResponse(
            code=self.code,
            message=self.message,
            details={k: v for k, v in self.details.items() if not isinstance(v, BaseException)}
        )


class ConfigError(FetchCacheException):
    """Invalid decorator configuration."""

    def __init__(self, message: str = "Invalid configuration", details: Optional[Dict[str, Any]] = None):
        super().__init__("CONFIG_ERROR", message, details)


class StoreError(FetchCacheException):
    """Key-value store read/write failure."""

    def __init__(self, message: str = "Store error", details: Optional[Dict[str, Any]] = None,
                 code: str = "STORE_ERROR"):
        super().__init__(code, message, details)


class BackpressureError(StoreError):
    """Store command queue is at its high-water mark."""

    def __init__(self, message: str = "Store command queue at high water mark",
                 details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details, code="STORE_SATURATED")


class CodecError(FetchCacheException):
    """Cache entry encoding/decoding failure."""


class DecodeError(CodecError):
    """Stored entry is not a valid encoding."""

    def __init__(self, message: str = "Invalid cache value", details: Optional[Dict[str, Any]] = None):
        super().__init__("DECODE_ERROR", message, details)


class EncodeError(CodecError):
    """Fetch result cannot be encoded for storage."""

    def __init__(self, message: str = "Unencodable fetch result", details: Optional[Dict[str, Any]] = None):
        super().__init__("ENCODE_ERROR", message, details)


class URLError(FetchCacheException):
    """Malformed URL passed to a cached fetch."""

    def __init__(self, url: str, message: str = "Invalid URL", details: Optional[Dict[str, Any]] = None):
        details = dict(details or {})
        details.setdefault("url", url)
        super().__init__("INVALID_URL", f"{message}: {url}", details)
        self.url = url


class UpstreamError(FetchCacheException):
    """Upstream fetch failure."""

    def __init__(self, message: str = "Upstream fetch failed", status: Optional[int] = None,
                 details: Optional[Dict[str, Any]] = None, cached: bool = False,
                 code: str = "UPSTREAM_ERROR"):
        super().__init__(code, message, details)
        self.status = status
        self.cached = cached


class NotFoundError(UpstreamError):
    """Upstream resource does not exist (404)."""

    def __init__(self, message: str = "Not found", details: Optional[Dict[str, Any]] = None,
                 cached: bool = False):
        super().__init__(message, 404, details, cached, code="NOT_FOUND")


class ForbiddenError(UpstreamError):
    """Upstream refused access to the resource (403)."""

    def __init__(self, message: str = "Forbidden", details: Optional[Dict[str, Any]] = None,
                 cached: bool = False):
        super().__init__(message, 403, details, cached, code="FORBIDDEN")
