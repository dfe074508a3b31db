"""
Race caching: query the store and upstream concurrently.

Whichever branch first produces a usable outcome answers the caller.
Upstream always answers if nothing else has; a store hit only answers if
it arrives first. Once both encodings are known the store is reconciled
with the upstream encoding.
"""

import asyncio
from typing import Optional

from shared.errors import DecodeError, EncodeError, StoreError
from ..codec import decode, encode
from ..models import FetchResult
from .base import CachingStrategy

# Stands in for an empty or unusable store entry; no encoding is empty.
_ABSENT = b""


class _Race:
    """State of one race invocation."""

    __slots__ = ("key", "ttl", "answer", "cached", "current", "bypassed")

    def __init__(self, key: str, ttl: int, answer: asyncio.Future):
        self.key = key
        self.ttl = ttl
        self.answer = answer
        self.cached: Optional[bytes] = None
        self.current: Optional[bytes] = None
        self.bypassed = False

    def deliver(self, outcome) -> bool:
        """Answer the caller unless someone already did."""
        if self.answer.done():
            return False
        if isinstance(outcome, BaseException):
            self.answer.set_exception(outcome)
        else:
            self.answer.set_result(outcome)
        return True


class RaceStrategy(CachingStrategy):
    """Concurrent lookup with upstream as the source of truth."""

    name = "race"

    async def _lookup(self, url: str, key: str, ttl: int) -> FetchResult:
        race = _Race(key, ttl, asyncio.get_running_loop().create_future())

        self._spawn(self._upstream_branch(url, race), "race.upstream")
        if self._admit():
            self._spawn(self._store_branch(race), "race.store")
        else:
            race.bypassed = True

        return await race.answer

    async def _upstream_branch(self, url: str, race: _Race) -> None:
        result: Optional[FetchResult] = None
        error: Optional[Exception] = None
        try:
            result = await self._upstream(url)
        except Exception as e:
            error = e

        try:
            race.current = encode(result, error)
        except EncodeError as e:
            self._report(e, race.key)

        if race.deliver(error if error is not None else result):
            self._record("bypass" if race.bypassed else "miss")
        elif error is not None:
            self.logger.debug("Upstream failed after cached answer", error=str(error))
        await self._reconcile(race)

    async def _store_branch(self, race: _Race) -> None:
        try:
            entry = await self.store.get(race.key)
        except StoreError as e:
            # No cached value means no reconciliation write either.
            self._report(e, race.key)
            return

        outcome = None
        race.cached = _ABSENT
        if entry is not None:
            try:
                outcome = decode(entry)
            except DecodeError as e:
                self._report(e, race.key)
            else:
                race.cached = bytes(entry)

        if outcome is not None and race.deliver(outcome):
            self._record("hit")
        await self._reconcile(race)

    async def _reconcile(self, race: _Race) -> None:
        """Write the upstream encoding once both sides are known."""
        if race.cached is None or race.current is None:
            return
        if race.cached == race.current and not self.options.refresh_identical:
            self.metrics.record_write(self.namespace, "skipped")
            return
        await self._write(race.key, race.current, race.ttl)

