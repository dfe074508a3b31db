"""
Decorator factory producing cached drop-in replacements for fetchers.
"""

from typing import Any, Optional

from shared.errors import ConfigError
from shared.metrics import MetricsCollector
from .models import FetchResult, Fetcher
from .options import CacheOptions
from .strategies import STRATEGY_TYPES, CachingStrategy


class CachedFetch:
    """Awaitable with the same signature as the fetcher it wraps."""

    def __init__(self, fetch: Fetcher, options: CacheOptions, metrics: Optional[MetricsCollector] = None):
        if fetch is None:
            raise ConfigError("No fetch function provided")
        if not callable(fetch):
            raise ConfigError("Fetch function is not callable")
        self.fetch = fetch
        self.options = options
        self.strategy: CachingStrategy = STRATEGY_TYPES[options.strategy](fetch, options, metrics)

    async def __call__(self, url: str) -> FetchResult:
        return await self.strategy(url)

    def cache_key(self, url: str) -> str:
        return self.strategy.cache_key(url)

    async def drain(self) -> None:
        """Wait for background store writes and race branches."""
        await self.strategy.drain()


def caching_fetch(fetch: Fetcher, options: CacheOptions,
                  metrics: Optional[MetricsCollector] = None) -> CachedFetch:
    """Wrap ``fetch`` with the caching strategy named in ``options``."""
    return CachedFetch(fetch, options, metrics)


def cached(options: CacheOptions, metrics: Optional[MetricsCollector] = None):
    """Decorator form of ``caching_fetch``."""
    def decorator(fetch: Fetcher) -> CachedFetch:
        return caching_fetch(fetch, options, metrics)
    return decorator


class CachingSource:
    """Wraps an object exposing ``async get(url)`` with a cached ``get``.

    Every other attribute is delegated to the wrapped source.
    """

    def __init__(self, source: Any, options: CacheOptions, metrics: Optional[MetricsCollector] = None):
        if source is None:
            raise ConfigError("No source provided")
        if not callable(getattr(source, "get", None)):
            raise ConfigError("No get method found on source")
        self.source = source
        self.get = caching_fetch(source.get, options, metrics)

    @property
    def options(self) -> CacheOptions:
        return self.get.options

    def __getattr__(self, name: str) -> Any:
        source = self.__dict__.get("source")
        if source is None:
            raise AttributeError(name)
        return getattr(source, name)
