"""Tiered cache infrastructure.

LocalCache (process memory) and RedisCacheTier (shared) composed by
TieredCache into a single cache-aside ICache.
"""

from infrastructure.cache.keys import CacheKeys
from infrastructure.cache.local import LocalCache
from infrastructure.cache.orchestrator import TieredCache
from infrastructure.cache.redis import RedisCacheTier, close_redis, get_redis

__all__ = [
    "CacheKeys",
    "LocalCache",
    "RedisCacheTier",
    "TieredCache",
    "close_redis",
    "get_redis",
]
