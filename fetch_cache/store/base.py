"""
Key-value store capability consumed by the caching strategies.
"""

from contextlib import asynccontextmanager
from typing import Callable, List, Optional

from shared.errors import FetchCacheException
from shared.logging import get_logger

# Outstanding commands tolerated before the guard short-circuits.
DEFAULT_HIGH_WATER = 1000

ErrorListener = Callable[[FetchCacheException], None]


class BaseStore:
    """Tracks outstanding commands and fans out diagnostics.

    Subclasses implement ``get``/``setex`` and wrap each command in
    ``self._command()`` so ``pending`` reflects the commands in flight.
    """

    def __init__(self, high_water: int = DEFAULT_HIGH_WATER):
        self.high_water = high_water
        self.logger = get_logger("fetch_cache.store")
        self._pending = 0
        self._listeners: List[ErrorListener] = []

    @property
    def pending(self) -> int:
        """Commands issued and not yet answered."""
        return self._pending

    @asynccontextmanager
    async def _command(self):
        self._pending += 1
        try:
            yield
        finally:
            self._pending -= 1

    async def get(self, key: str) -> Optional[bytes]:
        raise NotImplementedError

    async def setex(self, key: str, ttl: int, value: bytes) -> None:
        raise NotImplementedError

    async def close(self) -> None:
        """Release store resources."""

    def add_error_listener(self, listener: ErrorListener) -> None:
        """Register a callback for non-fatal diagnostics."""
        self._listeners.append(listener)

    def remove_error_listener(self, listener: ErrorListener) -> None:
        self._listeners.remove(listener)

    def emit_error(self, error: FetchCacheException) -> None:
        """Surface a non-fatal diagnostic."""
        self.logger.warning(
            "Cache diagnostic",
            code=error.code,
            key=error.key,
            error=error.message
        )
        for listener in list(self._listeners):
            try:
                listener(error)
            except Exception as e:
                # Diagnostics never replace the answer of the fetch that raised them
                self.logger.error(
                    "Cache diagnostic listener failed",
                    code=error.code,
                    key=error.key,
                    error=str(e)
                )
