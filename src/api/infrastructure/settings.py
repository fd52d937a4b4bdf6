"""Application settings using pydantic-settings.

Settings are loaded from environment variables with sensible defaults
for development. Production deployments should set all values explicitly.
"""

from datetime import timedelta
from functools import lru_cache

from pydantic import Field, SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseSettings(BaseSettings):
    """Database connection settings.

    Environment variables:
        TENANTCORE_DB_HOST: Database host (default: localhost)
        TENANTCORE_DB_PORT: Database port (default: 5432)
        TENANTCORE_DB_DATABASE: Database name (default: tenantcore)
        TENANTCORE_DB_USERNAME: Database user (default: tenantcore)
        TENANTCORE_DB_PASSWORD: Database password (required in production)
        TENANTCORE_DB_POOL_MIN_CONNECTIONS: Minimum connections in pool (default: 2)
        TENANTCORE_DB_POOL_MAX_CONNECTIONS: Maximum connections in pool (default: 10)
    """

    model_config = SettingsConfigDict(
        env_prefix="TENANTCORE_DB_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    host: str = Field(default="localhost", description="Database host")
    port: int = Field(default=5432, description="Database port")
    database: str = Field(default="tenantcore", description="Database name")
    username: str = Field(default="tenantcore", description="Database username")
    password: SecretStr = Field(
        default=SecretStr(""),
        description="Database password",
    )
    pool_min_connections: int = Field(
        default=2,
        description="Minimum connections in pool",
        ge=1,
        le=100,
    )
    pool_max_connections: int = Field(
        default=10,
        description="Maximum connections in pool",
        ge=1,
        le=100,
    )

    @model_validator(mode="after")
    def validate_pool_settings(self) -> "DatabaseSettings":
        """Validate pool max >= min."""
        if self.pool_max_connections < self.pool_min_connections:
            raise ValueError(
                f"pool_max_connections ({self.pool_max_connections}) must be >= "
                f"pool_min_connections ({self.pool_min_connections})"
            )
        return self

    @property
    def connection_string(self) -> str:
        """Generate a connection string (without password for logging)."""
        return f"postgresql://{self.username}@{self.host}:{self.port}/{self.database}"


class CacheSettings(BaseSettings):
    """Tiered cache settings.

    Environment variables:
        TENANTCORE_CACHE_REDIS_URL: Shared tier Redis URL
        TENANTCORE_CACHE_KEY_PREFIX: Namespace prepended to shared-tier keys
        TENANTCORE_CACHE_DEFAULT_TTL_SECONDS: Default lifetime (default: 300)
        TENANTCORE_CACHE_SKEW_SECONDS: Local tier expires this much earlier (default: 15)
        TENANTCORE_CACHE_LOCAL_MAX_ENTRIES: Local tier capacity (default: 10000)
    """

    model_config = SettingsConfigDict(
        env_prefix="TENANTCORE_CACHE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    redis_url: str = Field(
        default="redis://localhost:6379/0", description="Shared tier Redis URL"
    )
    key_prefix: str = Field(
        default="tenantcore", description="Namespace for shared-tier keys"
    )
    default_ttl_seconds: int = Field(
        default=300, description="Default cache lifetime", ge=1
    )
    skew_seconds: int = Field(
        default=15, description="How much earlier the local tier expires", ge=0
    )
    local_max_entries: int = Field(
        default=10_000, description="Local tier capacity", ge=1
    )

    @property
    def default_ttl(self) -> timedelta:
        return timedelta(seconds=self.default_ttl_seconds)

    @property
    def skew(self) -> timedelta:
        return timedelta(seconds=self.skew_seconds)


class OutboxSettings(BaseSettings):
    """Outbox relay settings.

    Environment variables:
        TENANTCORE_OUTBOX_ENABLED: Run the relay in this process (default: true)
        TENANTCORE_OUTBOX_BATCH_SIZE: Entries per cycle (default: 20)
        TENANTCORE_OUTBOX_POLL_INTERVAL_SECONDS: Wait between cycles (default: 10)
    """

    model_config = SettingsConfigDict(
        env_prefix="TENANTCORE_OUTBOX_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    enabled: bool = Field(default=True, description="Run the outbox relay")
    batch_size: int = Field(default=20, description="Entries per cycle", ge=1)
    poll_interval_seconds: float = Field(
        default=10.0, description="Wait between cycles", gt=0
    )

    @property
    def poll_interval(self) -> timedelta:
        return timedelta(seconds=self.poll_interval_seconds)


class FanoutSettings(BaseSettings):
    """Fanout target settings.

    Environment variables:
        TENANTCORE_FANOUT_SEARCH_URL: Base URL of the search index
        TENANTCORE_FANOUT_SEARCH_INDEX: Index name for users (default: users)
        TENANTCORE_FANOUT_STREAM_NAME: Redis stream for integration events
        TENANTCORE_FANOUT_NOTIFY_CHANNEL_PREFIX: Redis channel prefix for notifications
        TENANTCORE_FANOUT_REQUEST_TIMEOUT_SECONDS: HTTP timeout (default: 5)
    """

    model_config = SettingsConfigDict(
        env_prefix="TENANTCORE_FANOUT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    search_url: str = Field(
        default="http://localhost:9200", description="Search index base URL"
    )
    search_index: str = Field(default="users", description="User index name")
    stream_name: str = Field(
        default="tenantcore:integration-events",
        description="Redis stream for integration events",
    )
    notify_channel_prefix: str = Field(
        default="tenantcore:notifications",
        description="Redis channel prefix for realtime notifications",
    )
    request_timeout_seconds: float = Field(
        default=5.0, description="HTTP request timeout", gt=0
    )


class Settings(BaseSettings):
    """Main application settings aggregating all configuration sections."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application metadata
    app_name: str = Field(default="tenantcore API", description="Application name")
    debug: bool = Field(default=False, description="Debug mode")
    create_schema: bool = Field(
        default=False,
        description="Create missing tables on startup (development only)",
    )

    @property
    def database(self) -> DatabaseSettings:
        """Get database settings."""
        return get_database_settings()

    @property
    def cache(self) -> CacheSettings:
        """Get cache settings."""
        return get_cache_settings()

    @property
    def outbox(self) -> OutboxSettings:
        """Get outbox relay settings."""
        return get_outbox_settings()

    @property
    def fanout(self) -> FanoutSettings:
        """Get fanout target settings."""
        return get_fanout_settings()


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()


@lru_cache
def get_database_settings() -> DatabaseSettings:
    """Get cached database settings.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return DatabaseSettings()


@lru_cache
def get_cache_settings() -> CacheSettings:
    """Get cached cache settings."""
    return CacheSettings()


@lru_cache
def get_outbox_settings() -> OutboxSettings:
    """Get cached outbox relay settings."""
    return OutboxSettings()


@lru_cache
def get_fanout_settings() -> FanoutSettings:
    """Get cached fanout target settings."""
    return FanoutSettings()
