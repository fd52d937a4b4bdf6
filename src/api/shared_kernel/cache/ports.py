"""Protocols (ports) for the tiered cache.

The orchestrator composes two tiers that share the CacheTier shape. Callers
depend on ICache only.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from datetime import datetime, timedelta
from typing import Any, Protocol, TypeVar, runtime_checkable

from shared_kernel.cache.value_objects import CacheEntry

T = TypeVar("T")


@runtime_checkable
class CacheTier(Protocol):
    """A single cache tier (process-local or shared)."""

    async def get(self, key: str) -> CacheEntry | None:
        """Return the live entry for ``key``, or None on a miss.

        Raises:
            CacheTierUnavailableError: If the backend cannot be reached
        """
        ...

    async def set(self, key: str, value: Any, expires_at: datetime) -> None:
        """Store ``value`` under ``key`` until ``expires_at``."""
        ...

    async def delete(self, key: str) -> None:
        """Remove ``key``. Absent keys are not an error."""
        ...


@runtime_checkable
class ICache(Protocol):
    """Cache-aside contract used by read paths and the change recorder."""

    async def get_or_create(
        self,
        key: str,
        loader: Callable[[], Awaitable[T | None]],
        ttl: timedelta | None = None,
    ) -> T | None:
        """Return the cached value for ``key`` or load and cache it.

        Args:
            key: Non-empty cache key
            loader: Zero-argument coroutine function producing the value
            ttl: Shared-tier lifetime, defaults to the configured TTL

        Returns:
            The cached or freshly loaded value; None if the loader found nothing

        Raises:
            ValueError: If key is empty
            Exception: Whatever the loader raised, unchanged
        """
        ...

    async def remove(self, key: str) -> None:
        """Remove ``key`` from every tier."""
        ...
