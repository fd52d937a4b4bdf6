"""Two-tier cache-aside orchestrator.

Reads consult the local tier, then the shared tier, then the loader. A
shared-tier hit is copied into the local tier; a loaded value is written to
the shared tier first and the local tier second. The local copy always
expires ``skew`` before the shared one, so a process never serves a value
the shared tier has already dropped.

The shared tier is best-effort: when it is unreachable reads fall through
to the loader and writes and deletes are skipped.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from datetime import datetime, timedelta
from typing import Any, TypeVar

from shared_kernel.cache.exceptions import CacheTierUnavailableError
from shared_kernel.cache.observability import CacheProbe, DefaultCacheProbe
from shared_kernel.cache.ports import CacheTier
from shared_kernel.cache.value_objects import CacheEntry, CacheTierName
from shared_kernel.clock import Clock

T = TypeVar("T")

DEFAULT_TTL = timedelta(minutes=5)
DEFAULT_SKEW = timedelta(seconds=15)


class TieredCache:
    """ICache implementation over a local and a shared CacheTier."""

    def __init__(
        self,
        local: CacheTier,
        shared: CacheTier,
        clock: Clock,
        default_ttl: timedelta = DEFAULT_TTL,
        skew: timedelta = DEFAULT_SKEW,
        probe: CacheProbe | None = None,
    ) -> None:
        if default_ttl <= timedelta(0):
            raise ValueError("default_ttl must be positive")
        if skew < timedelta(0):
            raise ValueError("skew must not be negative")
        self._local = local
        self._shared = shared
        self._clock = clock
        self._default_ttl = default_ttl
        self._skew = skew
        self._probe = probe or DefaultCacheProbe()

    async def get_or_create(
        self,
        key: str,
        loader: Callable[[], Awaitable[T | None]],
        ttl: timedelta | None = None,
    ) -> T | None:
        if not key:
            raise ValueError("Cache key must not be empty")
        if ttl is None:
            ttl = self._default_ttl
        elif ttl <= timedelta(0):
            raise ValueError("ttl must be positive")

        local_entry = await self._local.get(key)
        if local_entry is not None:
            self._probe.cache_hit(key, CacheTierName.LOCAL)
            return local_entry.value
        self._probe.cache_miss(key, CacheTierName.LOCAL)

        shared_entry = await self._read_shared(key)
        if shared_entry is not None:
            self._probe.cache_hit(key, CacheTierName.SHARED)
            shared_expiry = shared_entry.expires_at or self._clock.now() + ttl
            await self._set_local(key, shared_entry.value, shared_expiry)
            return shared_entry.value
        self._probe.cache_miss(key, CacheTierName.SHARED)

        value = await loader()
        if value is None:
            self._probe.cache_loaded(key, cached=False)
            return None

        shared_expiry = self._clock.now() + ttl
        await self._write_shared(key, value, shared_expiry)
        await self._set_local(key, value, shared_expiry)
        self._probe.cache_loaded(key, cached=True)
        return value

    async def remove(self, key: str) -> None:
        if not key:
            raise ValueError("Cache key must not be empty")
        await self._local.delete(key)
        try:
            await self._shared.delete(key)
        except CacheTierUnavailableError as e:
            self._probe.tier_unavailable(key, "delete", str(e))
        self._probe.cache_removed(key)

    async def _read_shared(self, key: str) -> CacheEntry | None:
        try:
            return await self._shared.get(key)
        except CacheTierUnavailableError as e:
            self._probe.tier_unavailable(key, "get", str(e))
            return None

    async def _write_shared(self, key: str, value: Any, expires_at: datetime) -> None:
        try:
            await self._shared.set(key, value, expires_at)
        except CacheTierUnavailableError as e:
            self._probe.tier_unavailable(key, "set", str(e))

    async def _set_local(self, key: str, value: Any, shared_expiry: datetime) -> None:
        local_expiry = shared_expiry - self._skew
        if local_expiry <= self._clock.now():
            return
        await self._local.set(key, value, local_expiry)
