"""Tiered cache-aside contracts shared across bounded contexts."""

from shared_kernel.cache.exceptions import CacheTierUnavailableError
from shared_kernel.cache.ports import CacheTier, ICache
from shared_kernel.cache.value_objects import CacheEntry, CacheTierName

__all__ = [
    "CacheEntry",
    "CacheTier",
    "CacheTierName",
    "CacheTierUnavailableError",
    "ICache",
]
