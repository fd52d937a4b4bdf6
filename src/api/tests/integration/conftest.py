"""Integration test fixtures.

These fixtures require a running PostgreSQL instance (and Redis for the
API tests). Use docker-compose for testing; connection settings come from
the usual TENANTCORE_DB_* and TENANTCORE_CACHE_* environment variables.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator

import pytest
import pytest_asyncio
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from infrastructure.database.engines import create_role_engine
from infrastructure.database.models import Base
from infrastructure.outbox.models import OutboxModel  # noqa: F401 - registers the table
from infrastructure.settings import DatabaseSettings
from users.infrastructure.models import UserModel  # noqa: F401 - registers the table


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers",
        "integration: mark test as integration test (requires database)",
    )


@pytest.fixture(scope="session")
def integration_db_settings() -> DatabaseSettings:
    """Database settings for integration tests, read from the environment."""
    return DatabaseSettings()


@pytest_asyncio.fixture
async def engine(integration_db_settings: DatabaseSettings) -> AsyncGenerator[AsyncEngine, None]:
    """Engine with the schema created and both tables emptied."""
    engine = create_role_engine(integration_db_settings, "write")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
        await conn.execute(text("TRUNCATE outbox, users"))
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, expire_on_commit=False)


@pytest_asyncio.fixture
async def async_session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session
