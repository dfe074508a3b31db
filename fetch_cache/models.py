"""
Fetch outcome model shared by the codec and the caching strategies.
"""

from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Mapping, Optional

from shared.errors import ForbiddenError, NotFoundError, UpstreamError

# Failure statuses worth remembering in the store.
CACHEABLE_STATUSES = (404, 403)


@dataclass(frozen=True)
class FetchResult:
    """Successful upstream fetch."""
    payload: Any = None
    headers: Optional[Mapping[str, str]] = None


Fetcher = Callable[[str], Awaitable[FetchResult]]


def status_code(error: Optional[BaseException]) -> Optional[int]:
    """Classify a fetch failure as 404/403, or None when it is opaque."""
    if error is None:
        return None

    for attr in ("status", "status_code", "code"):
        status = _cacheable(getattr(error, attr, None))
        if status is not None:
            return status

    # httpx.HTTPStatusError and friends keep the status on the response
    response = getattr(error, "response", None)
    return _cacheable(getattr(response, "status_code", None))


def _cacheable(value: Any) -> Optional[int]:
    # 404.0 or an IntEnum member must still encode as E404
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if value in CACHEABLE_STATUSES:
        return int(value)
    return None


def error_for_status(status: int, *, cached: bool = False) -> UpstreamError:
    """Build the negative outcome for a cacheable status."""
    if status == 404:
        return NotFoundError(cached=cached)
    if status == 403:
        return ForbiddenError(cached=cached)
    return UpstreamError(f"Upstream returned {status}", status=status, cached=cached)
