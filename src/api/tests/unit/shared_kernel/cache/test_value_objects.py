"""Unit tests for cache value objects and exceptions."""

from datetime import UTC, datetime, timedelta

from shared_kernel.cache.exceptions import CacheTierUnavailableError
from shared_kernel.cache.value_objects import CacheEntry, CacheTierName

NOW = datetime(2026, 1, 1, tzinfo=UTC)


class TestCacheEntry:
    def test_not_expired_before_expiry(self):
        entry = CacheEntry("k", 1, CacheTierName.LOCAL, NOW + timedelta(seconds=1))
        assert not entry.is_expired(NOW)

    def test_expired_at_expiry(self):
        entry = CacheEntry("k", 1, CacheTierName.LOCAL, NOW)
        assert entry.is_expired(NOW)

    def test_unknown_expiry_never_expires(self):
        entry = CacheEntry("k", 1, CacheTierName.SHARED, None)
        assert not entry.is_expired(NOW + timedelta(days=365))


class TestCacheTierUnavailableError:
    def test_keeps_cause_details(self):
        error = CacheTierUnavailableError(
            "shared", "get", "acme:user-1", ConnectionError("refused")
        )

        assert (error.tier, error.operation, error.key) == ("shared", "get", "acme:user-1")
        assert "refused" in str(error)
