"""
Plumbing shared by the caching strategies.
"""

import asyncio
from typing import Coroutine, Optional, Set

from shared.errors import FetchCacheException, StoreError
from shared.logging import fetch_context, get_logger
from shared.metrics import MetricsCollector
from ..models import FetchResult, Fetcher
from ..options import CacheOptions
from ..store.backpressure import admit
from ..ttl import resolve_ttl


class CachingStrategy:
    """Binds an upstream fetcher to a store under one namespace."""

    name = "base"

    def __init__(self, fetch: Fetcher, options: CacheOptions, metrics: Optional[MetricsCollector] = None):
        self._fetch = fetch
        self.options = options
        self.store = options.store
        self.namespace = options.namespace
        self.metrics = metrics or MetricsCollector(options.namespace)
        self.logger = get_logger(f"fetch_cache.{self.name}")
        self._background: Set[asyncio.Task] = set()

    async def __call__(self, url: str) -> FetchResult:
        key = self.cache_key(url)
        with fetch_context(self.namespace, key, self.name):
            # URLError propagates here, before any store access
            ttl = resolve_ttl(url, self.options.ttl)
            return await self._lookup(url, key, ttl)

    async def _lookup(self, url: str, key: str, ttl: int) -> FetchResult:
        raise NotImplementedError

    def cache_key(self, url: str) -> str:
        """Store key for a URL."""
        return f"{self.namespace}-{url}"

    async def _upstream(self, url: str) -> FetchResult:
        with self.metrics.time_operation("upstream_duration_seconds", namespace=self.namespace):
            return await self._fetch(url)

    def _admit(self) -> bool:
        """Consult the backpressure guard before touching the store."""
        if admit(self.store):
            return True
        self.metrics.record_diagnostic("STORE_SATURATED")
        return False

    def _record(self, outcome: str) -> None:
        self.metrics.record_request(self.namespace, self.name, outcome)
        self.logger.debug("Cached fetch answered", outcome=outcome)

    def _report(self, error: FetchCacheException, key: str) -> None:
        """Surface a non-fatal diagnostic tagged with its key."""
        error.details.setdefault("key", key)
        self.metrics.record_diagnostic(error.code)
        self.store.emit_error(error)

    def _spawn(self, coro: Coroutine, name: str) -> asyncio.Task:
        """Run work the caller does not wait for."""
        task = asyncio.create_task(coro, name=f"fetch_cache.{name}")
        self._background.add(task)
        task.add_done_callback(self._background.discard)
        return task

    async def _write(self, key: str, entry: bytes, ttl: int) -> None:
        try:
            await self.store.setex(key, ttl, entry)
        except StoreError as e:
            self.metrics.record_write(self.namespace, "failed")
            self._report(e, key)
            return
        self.metrics.record_write(self.namespace, "written")
        self.logger.debug("Cache entry written", ttl=ttl)

    async def drain(self) -> None:
        """Wait for background store work to finish."""
        while self._background:
            await asyncio.gather(*list(self._background), return_exceptions=True)
