"""
Readthrough caching: serve the store, fall back to upstream, then populate.
"""

from typing import Optional

from shared.errors import DecodeError, EncodeError, StoreError, UpstreamError
from ..codec import decode, encode
from ..models import FetchResult, status_code
from .base import CachingStrategy


class ReadthroughStrategy(CachingStrategy):
    """Sequential lookup; upstream is only called on a miss."""

    name = "readthrough"

    async def _lookup(self, url: str, key: str, ttl: int) -> FetchResult:

        if not self._admit():
            self._record("bypass")
            return await self._upstream(url)

        try:
            entry = await self.store.get(key)
        except StoreError as e:
            # The store just failed a read; do not write to it afterwards.
            self._report(e, key)
            self._record("bypass")
            return await self._upstream(url)

        if entry is not None:
            try:
                outcome = decode(entry)
            except DecodeError as e:
                self._report(e, key)
            else:
                self._record("hit")
                if isinstance(outcome, UpstreamError):
                    raise outcome
                return outcome

        self._record("miss")
        try:
            result = await self._upstream(url)
        except Exception as e:
            if status_code(e) is not None:
                self._spawn(self._populate(key, ttl, error=e), "populate")
            raise

        self._spawn(self._populate(key, ttl, result=result), "populate")
        return result

    async def _populate(self, key: str, ttl: int, result: Optional[FetchResult] = None,
                        error: Optional[BaseException] = None) -> None:
        try:
            entry = encode(result, error)
        except EncodeError as e:
            self._report(e, key)
            return
        if entry is None:
            return
        await self._write(key, entry, ttl)
