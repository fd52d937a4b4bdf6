"""Database engine creation for async SQLAlchemy.

tenantcore runs two engine roles against the same database, each with its
own asyncpg pool:

- ``write``: change recording in request handlers, the outbox relay and
  migrations
- ``read``: cache-miss loads; every transaction is read-only

Connections carry ``application_name = tenantcore-<role>`` so the roles can
be told apart in ``pg_stat_activity``. The role name is also the engine name
reported to the ConnectionProbe.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Literal

from sqlalchemy.engine import URL
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

if TYPE_CHECKING:
    from infrastructure.settings import DatabaseSettings

__all__ = [
    "APPLICATION_NAME",
    "EngineRole",
    "build_async_url",
    "create_role_engine",
    "server_settings_for",
]

APPLICATION_NAME = "tenantcore"

EngineRole = Literal["write", "read"]

_ROLE_SERVER_SETTINGS: dict[str, dict[str, str]] = {
    "write": {},
    "read": {"default_transaction_read_only": "on"},
}


def server_settings_for(role: EngineRole) -> dict[str, str]:
    """PostgreSQL session parameters applied to every connection of ``role``.

    Raises:
        ValueError: If ``role`` is not a known engine role
    """
    if role not in _ROLE_SERVER_SETTINGS:
        raise ValueError(f"Unknown engine role: {role!r}")
    return {
        "application_name": f"{APPLICATION_NAME}-{role}",
        **_ROLE_SERVER_SETTINGS[role],
    }


def create_role_engine(settings: DatabaseSettings, role: EngineRole) -> AsyncEngine:
    """Create the async engine for one role.

    The pool never overflows past ``pool_max_connections`` and connections
    are pinged before use.

    Args:
        settings: Database connection settings
        role: Engine role, "write" or "read"

    Returns:
        Configured async engine
    """
    return create_async_engine(
        build_async_url(settings),
        pool_size=settings.pool_max_connections,
        max_overflow=0,
        pool_pre_ping=True,
        connect_args={"server_settings": server_settings_for(role)},
    )


def build_async_url(settings: DatabaseSettings) -> str:
    """Build the asyncpg URL, percent-encoding the credentials."""
    url = URL.create(
        drivername="postgresql+asyncpg",
        username=settings.username,
        password=settings.password.get_secret_value(),
        host=settings.host,
        port=settings.port,
        database=settings.database,
    )
    return url.render_as_string(hide_password=False)
