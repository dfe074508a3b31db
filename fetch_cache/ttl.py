"""
Expiry resolution for cache entries.
"""

from typing import Mapping, Union
from urllib.parse import urlsplit

from shared.errors import URLError

DEFAULT_TTL = 300

TTLConfig = Union[int, Mapping[str, int]]


def hostname(url: str) -> str:
    """Hostname of a URL ('' for relative URLs)."""
    try:
        return urlsplit(url).hostname or ""
    except (TypeError, ValueError, AttributeError) as e:
        raise URLError(str(url), details={"reason": str(e)})


def resolve_ttl(url: str, ttl: TTLConfig) -> int:
    """Seconds an entry for ``url`` should live.

    A flat TTL applies to every URL. A mapping is looked up by exact
    hostname, then its ``default`` entry, then ``DEFAULT_TTL``.
    """
    if isinstance(ttl, int):
        return ttl

    host = hostname(url)
    return ttl.get(host) or ttl.get("default") or DEFAULT_TTL
