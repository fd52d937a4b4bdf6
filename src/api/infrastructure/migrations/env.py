"""Alembic environment for the tenantcore schema.

Runs migrations online over the async engine built from DatabaseSettings,
so migrations and the application share one source of connection config.
"""

import asyncio

from alembic import context
from sqlalchemy.engine import Connection

from infrastructure.database.engines import create_role_engine
from infrastructure.database.models import Base
from infrastructure.outbox.models import OutboxModel  # noqa: F401 - registers the table
from infrastructure.settings import get_database_settings
from users.infrastructure.models import UserModel  # noqa: F401 - registers the table

target_metadata = Base.metadata


def do_run_migrations(connection: Connection) -> None:
    context.configure(connection=connection, target_metadata=target_metadata)

    with context.begin_transaction():
        context.run_migrations()


async def run_async_migrations() -> None:
    engine = create_role_engine(get_database_settings(), "write")

    async with engine.connect() as connection:
        await connection.run_sync(do_run_migrations)

    await engine.dispose()


asyncio.run(run_async_migrations())
