"""Process-local cache tier.

An LRU-bounded dict of CacheEntry objects. All operations complete without
awaiting, so concurrent coroutines on the event loop never observe a
half-written entry.
"""

from __future__ import annotations

from collections import OrderedDict
from datetime import datetime
from typing import Any

from shared_kernel.cache.value_objects import CacheEntry, CacheTierName
from shared_kernel.clock import Clock


class LocalCache:
    """Tier-1: fast, per-process, lost on restart."""

    def __init__(self, clock: Clock, max_entries: int = 10_000) -> None:
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self._clock = clock
        self._max_entries = max_entries
        self._entries: OrderedDict[str, CacheEntry] = OrderedDict()

    def __len__(self) -> int:
        return len(self._entries)

    async def get(self, key: str) -> CacheEntry | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if entry.is_expired(self._clock.now()):
            del self._entries[key]
            return None
        self._entries.move_to_end(key)
        return entry

    async def set(self, key: str, value: Any, expires_at: datetime) -> None:
        if expires_at <= self._clock.now():
            self._entries.pop(key, None)
            return
        self._entries[key] = CacheEntry(
            key=key,
            value=value,
            tier=CacheTierName.LOCAL,
            expires_at=expires_at,
        )
        self._entries.move_to_end(key)
        while len(self._entries) > self._max_entries:
            self._entries.popitem(last=False)

    async def delete(self, key: str) -> None:
        self._entries.pop(key, None)
