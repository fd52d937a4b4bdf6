"""Redis cache tier.

Provides the shared, durable Tier-2 on top of the redis-py async client.
Values are stored as JSON; expiry is enforced by Redis itself (PX) and read
back with PTTL so the local tier can be backfilled with an expiry derived
from the shared one.
"""

from __future__ import annotations

import json
from datetime import datetime, timedelta
from typing import TYPE_CHECKING, Any

import redis.asyncio as redis
from redis.exceptions import RedisError

from shared_kernel.cache.exceptions import CacheTierUnavailableError
from shared_kernel.cache.value_objects import CacheEntry, CacheTierName
from shared_kernel.clock import Clock

if TYPE_CHECKING:
    from redis.asyncio import Redis

# Module-level client (connection pool lives inside it)
_redis_client: Redis | None = None


def get_redis(redis_url: str) -> Redis:
    """Get or create the shared Redis client.

    Uses connection pooling for efficient connection management.
    """
    global _redis_client
    if _redis_client is None:
        _redis_client = redis.from_url(
            redis_url,
            encoding="utf-8",
            decode_responses=True,
        )
    return _redis_client


async def close_redis() -> None:
    """Close Redis connections."""
    global _redis_client
    if _redis_client is not None:
        await _redis_client.aclose()
        _redis_client = None


class RedisCacheTier:
    """Tier-2: shared across processes, survives restarts of any one of them."""

    def __init__(self, client: Redis, clock: Clock, key_prefix: str = "") -> None:
        self._client = client
        self._clock = clock
        self._key_prefix = key_prefix

    def _key(self, key: str) -> str:
        return f"{self._key_prefix}:{key}" if self._key_prefix else key

    async def get(self, key: str) -> CacheEntry | None:
        full_key = self._key(key)
        try:
            async with self._client.pipeline(transaction=False) as pipe:
                pipe.get(full_key)
                pipe.pttl(full_key)
                raw, ttl_ms = await pipe.execute()
        except RedisError as e:
            raise CacheTierUnavailableError("shared", "get", key, e) from e

        if raw is None:
            return None
        try:
            value = json.loads(raw)
        except ValueError as e:
            raise CacheTierUnavailableError("shared", "get", key, e) from e

        expires_at: datetime | None = None
        if ttl_ms is not None and ttl_ms > 0:
            expires_at = self._clock.now() + timedelta(milliseconds=ttl_ms)

        return CacheEntry(
            key=key,
            value=value,
            tier=CacheTierName.SHARED,
            expires_at=expires_at,
        )

    async def set(self, key: str, value: Any, expires_at: datetime) -> None:
        ttl_ms = int((expires_at - self._clock.now()).total_seconds() * 1000)
        if ttl_ms <= 0:
            await self.delete(key)
            return
        try:
            payload = json.dumps(value)
        except (TypeError, ValueError) as e:
            raise CacheTierUnavailableError("shared", "set", key, e) from e
        try:
            await self._client.set(self._key(key), payload, px=ttl_ms)
        except RedisError as e:
            raise CacheTierUnavailableError("shared", "set", key, e) from e

    async def delete(self, key: str) -> None:
        try:
            await self._client.delete(self._key(key))
        except RedisError as e:
            raise CacheTierUnavailableError("shared", "delete", key, e) from e
