"""
Redis-backed key-value store.
"""

from typing import Optional

import redis.asyncio as redis
from redis.exceptions import RedisError

from shared.errors import ConfigError, StoreError
from .base import BaseStore, DEFAULT_HIGH_WATER


class RedisStore(BaseStore):
    """Byte-oriented Redis store with an outstanding-command counter."""

    def __init__(self, client: redis.Redis, high_water: int = DEFAULT_HIGH_WATER):
        super().__init__(high_water)
        pool = getattr(client, "connection_pool", None)
        connection_kwargs = getattr(pool, "connection_kwargs", {}) or {}
        if connection_kwargs.get("decode_responses"):
            raise ConfigError(
                "Redis client must return bytes; create it with decode_responses=False"
            )
        self.client = client

    @classmethod
    def from_url(cls, redis_url: str, high_water: int = DEFAULT_HIGH_WATER, **kwargs) -> "RedisStore":
        """Create a store with its own connection pool."""
        kwargs["decode_responses"] = False
        client = redis.from_url(redis_url, **kwargs)
        return cls(client, high_water=high_water)

    async def get(self, key: str) -> Optional[bytes]:
        """Get the raw entry for a key."""
        async with self._command():
            try:
                return await self.client.get(key)
            except RedisError as e:
                raise StoreError(
                    f"Redis get failed: {e}",
                    details={"key": key, "operation": "get"}
                )

    async def setex(self, key: str, ttl: int, value: bytes) -> None:
        """Write an entry that expires after ``ttl`` seconds."""
        async with self._command():
            try:
                await self.client.setex(key, ttl, value)
            except RedisError as e:
                raise StoreError(
                    f"Redis setex failed: {e}",
                    details={"key": key, "operation": "setex"}
                )

    async def close(self) -> None:
        """Close the Redis connection."""
        await self.client.aclose()
        self.logger.info("Redis store closed")
