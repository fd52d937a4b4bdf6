"""Database infrastructure - async SQLAlchemy engines and sessions."""

from infrastructure.database.dependencies import (
    close_database_connections,
    get_read_session,
    get_write_session,
    get_write_sessionmaker,
)
from infrastructure.database.models import Base, TimestampMixin

__all__ = [
    "Base",
    "TimestampMixin",
    "close_database_connections",
    "get_read_session",
    "get_write_session",
    "get_write_sessionmaker",
]
