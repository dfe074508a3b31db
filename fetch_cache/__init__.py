"""
Cache-aside decorator for asynchronous fetchers.

Wraps an upstream ``async fetch(url)`` with a Redis-backed cache using one
of two strategies (readthrough or race), a tagged byte codec for fetch
outcomes, and a backpressure guard that skips the store when its command
queue is saturated.
"""

from .codec import decode, encode
from .decorator import CachedFetch, CachingSource, cached, caching_fetch
from .models import FetchResult, status_code
from .options import CacheOptions
from .store import BaseStore, RedisStore, admit
from .ttl import resolve_ttl

__all__ = [
    "admit",
    "BaseStore",
    "CachedFetch",
    "cached",
    "caching_fetch",
    "CacheOptions",
    "CachingSource",
    "decode",
    "encode",
    "FetchResult",
    "RedisStore",
    "resolve_ttl",
    "status_code",
]
