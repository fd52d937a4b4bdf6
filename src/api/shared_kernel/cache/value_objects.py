"""Value objects for the tiered cache."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum
from typing import Any


class CacheTierName(StrEnum):
    """Tier an entry resides in."""

    LOCAL = "local"
    SHARED = "shared"


@dataclass(frozen=True)
class CacheEntry:
    """A cached value as it exists in one tier.

    Attributes:
        key: Deterministic key (entity kind + identifier + tenant)
        value: Decoded payload
        tier: Tier of residence
        expires_at: Absolute expiry (UTC), None if the tier could not report it
    """

    key: str
    value: Any
    tier: CacheTierName
    expires_at: datetime | None

    def is_expired(self, now: datetime) -> bool:
        """Check whether the entry has expired at ``now``."""
        return self.expires_at is not None and self.expires_at <= now
