"""Unit tests for infrastructure settings."""

from datetime import timedelta

import pytest
from pydantic import ValidationError

from infrastructure.settings import (
    CacheSettings,
    DatabaseSettings,
    FanoutSettings,
    OutboxSettings,
)


class TestDatabaseSettingsPoolConfiguration:
    """Tests for connection pool configuration."""

    def test_default_pool_settings(self):
        """Should have sensible pool defaults."""
        settings = DatabaseSettings()
        assert settings.pool_min_connections >= 1
        assert settings.pool_max_connections >= settings.pool_min_connections

    def test_pool_max_must_be_greater_than_or_equal_to_min(self):
        with pytest.raises(ValidationError) as exc_info:
            DatabaseSettings(pool_min_connections=10, pool_max_connections=5)

        assert "pool_max_connections" in str(exc_info.value)

    def test_pool_max_equal_to_min_is_valid(self):
        settings = DatabaseSettings(pool_min_connections=5, pool_max_connections=5)
        assert settings.pool_max_connections == 5

    def test_pool_min_must_be_positive(self):
        with pytest.raises(ValidationError):
            DatabaseSettings(pool_min_connections=0)

    def test_connection_string_omits_password(self):
        settings = DatabaseSettings(password="s3cret")
        assert "s3cret" not in settings.connection_string


class TestCacheSettings:
    def test_defaults(self):
        settings = CacheSettings()
        assert settings.default_ttl == timedelta(minutes=5)
        assert settings.skew == timedelta(seconds=15)

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("TENANTCORE_CACHE_SKEW_SECONDS", "30")
        monkeypatch.setenv("TENANTCORE_CACHE_KEY_PREFIX", "staging")

        settings = CacheSettings()

        assert settings.skew == timedelta(seconds=30)
        assert settings.key_prefix == "staging"

    def test_ttl_must_be_positive(self):
        with pytest.raises(ValidationError):
            CacheSettings(default_ttl_seconds=0)


class TestOutboxSettings:
    def test_defaults(self):
        settings = OutboxSettings()
        assert settings.enabled is True
        assert settings.batch_size == 20
        assert settings.poll_interval == timedelta(seconds=10)

    def test_relay_can_be_disabled_from_environment(self, monkeypatch):
        monkeypatch.setenv("TENANTCORE_OUTBOX_ENABLED", "false")
        assert OutboxSettings().enabled is False

    @pytest.mark.parametrize("field", ["batch_size", "poll_interval_seconds"])
    def test_rejects_non_positive_values(self, field):
        with pytest.raises(ValidationError):
            OutboxSettings(**{field: 0})


class TestFanoutSettings:
    def test_timeout_must_be_positive(self):
        with pytest.raises(ValidationError):
            FanoutSettings(request_timeout_seconds=0)

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("TENANTCORE_FANOUT_SEARCH_URL", "http://search:9200")
        assert FanoutSettings().search_url == "http://search:9200"
