"""
Test doubles for fetch-cache tests.
"""

import asyncio
from typing import Any, Dict, List, Optional, Tuple

import sys
import os
sys.path.append(os.path.join(os.path.dirname(__file__), '..', '..'))

from fetch_cache.models import FetchResult
from fetch_cache.store.base import BaseStore


class FakeStore(BaseStore):
    """In-memory store whose commands can be held open or made to fail."""

    def __init__(self, high_water: int = 1000):
        super().__init__(high_water)
        self.data: Dict[str, bytes] = {}
        self.ttls: Dict[str, int] = {}
        self.calls: List[Tuple[str, str]] = []
        self.get_error: Optional[Exception] = None
        self.set_error: Optional[Exception] = None
        self.get_gate: Optional[asyncio.Event] = None
        self.diagnostics: List[Exception] = []
        self.add_error_listener(self.diagnostics.append)

    async def get(self, key: str) -> Optional[bytes]:
        self.calls.append(("get", key))
        async with self._command():
            if self.get_gate is not None:
                await self.get_gate.wait()
            if self.get_error is not None:
                raise self.get_error
            return self.data.get(key)

    async def setex(self, key: str, ttl: int, value: bytes) -> None:
        self.calls.append(("setex", key))
        async with self._command():
            if self.set_error is not None:
                raise self.set_error
            self.data[key] = value
            self.ttls[key] = ttl

    @property
    def writes(self) -> List[str]:
        return [key for op, key in self.calls if op == "setex"]

    @property
    def reads(self) -> List[str]:
        return [key for op, key in self.calls if op == "get"]


class FakeUpstream:
    """Upstream fetcher answering from a URL -> outcome table."""

    def __init__(self, responses: Optional[Dict[str, Any]] = None):
        self.responses: Dict[str, Any] = responses or {}
        self.calls: List[str] = []
        self.gate: Optional[asyncio.Event] = None

    async def __call__(self, url: str) -> FetchResult:
        self.calls.append(url)
        if self.gate is not None:
            await self.gate.wait()
        outcome = self.responses[url]
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome


class OpaqueError(Exception):
    """Unclassified upstream failure."""


