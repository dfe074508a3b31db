"""
Store package for fetch-cache.

Provides the byte-oriented key-value store the strategies cache into,
currently backed by Redis, and the backpressure guard consulted before
every store command.
"""

from .backpressure import admit
from .base import BaseStore, DEFAULT_HIGH_WATER
from .redis_store import RedisStore

__all__ = ["admit", "BaseStore", "DEFAULT_HIGH_WATER", "RedisStore"]
