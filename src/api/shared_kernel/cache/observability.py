"""Observability probes for the tiered cache.

Following Domain Oriented Observability, probes capture domain-significant
events without cluttering the cache-aside algorithm with logging concerns.
"""

from __future__ import annotations

from typing import Protocol

import structlog

from shared_kernel.cache.value_objects import CacheTierName

logger = structlog.get_logger()


class CacheProbe(Protocol):
    """Protocol for cache observability."""

    def cache_hit(self, key: str, tier: CacheTierName) -> None:
        """Called when a tier serves the key."""
        ...

    def cache_miss(self, key: str, tier: CacheTierName) -> None:
        """Called when a tier does not hold the key."""
        ...

    def cache_loaded(self, key: str, cached: bool) -> None:
        """Called after the loader ran. ``cached`` is False for absent results."""
        ...

    def cache_removed(self, key: str) -> None:
        """Called after a key was removed from all tiers."""
        ...

    def tier_unavailable(self, key: str, operation: str, error: str) -> None:
        """Called when the shared tier fails and the cache falls through."""
        ...


class DefaultCacheProbe:
    """Default implementation using structlog."""

    def __init__(self) -> None:
        self._log = logger.bind(component="tiered_cache")

    def cache_hit(self, key: str, tier: CacheTierName) -> None:
        self._log.debug("cache_hit", key=key, tier=tier.value)

    def cache_miss(self, key: str, tier: CacheTierName) -> None:
        self._log.debug("cache_miss", key=key, tier=tier.value)

    def cache_loaded(self, key: str, cached: bool) -> None:
        self._log.debug("cache_loaded", key=key, cached=cached)

    def cache_removed(self, key: str) -> None:
        self._log.debug("cache_removed", key=key)

    def tier_unavailable(self, key: str, operation: str, error: str) -> None:
        self._log.warning(
            "cache_tier_unavailable",
            key=key,
            operation=operation,
            error=error,
        )
