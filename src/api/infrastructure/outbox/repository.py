"""Outbox repository implementation.

This module provides the PostgreSQL implementation of the outbox repository.
It persists committed changes to the outbox table and lets the relay read
and update their delivery status.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from infrastructure.outbox.models import OutboxModel
from shared_kernel.outbox.value_objects import OutboxEntry


class OutboxRepository:
    """PostgreSQL implementation of the outbox repository.

    This repository shares the same database session as its caller, so
    appends happen within the same transaction as the aggregate changes.
    This is critical for the atomicity guarantee of the outbox pattern.

    The repository only calls session.add() and session.execute(); it never
    calls session.commit(). The caller owns the transaction boundary.
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize the repository with a session.

        Args:
            session: The SQLAlchemy async session (shared with the caller)
        """
        self._session = session

    async def append(
        self,
        event_type: str,
        payload: dict[str, Any],
        occurred_at: datetime,
        aggregate_type: str,
        aggregate_id: str,
        tenant_id: str,
    ) -> None:
        """Append a pre-serialized change within the current transaction.

        Args:
            event_type: Change tag (e.g., "UserCreated")
            payload: JSON-compatible minimal projection of the change
            occurred_at: When the change occurred
            aggregate_type: Type of aggregate (e.g., "user")
            aggregate_id: ULID of the aggregate
            tenant_id: Tenant owning the aggregate
        """
        model = OutboxModel(
            aggregate_type=aggregate_type,
            aggregate_id=aggregate_id,
            tenant_id=tenant_id,
            event_type=event_type,
            payload=payload,
            occurred_at=occurred_at,
            processed_at=None,
        )

        self._session.add(model)

    async def fetch_pending(self, limit: int) -> list[OutboxEntry]:
        """Fetch pending entries, oldest first, across all tenants.

        No row locking is taken: a single relay instance per deployment
        is assumed.

        Args:
            limit: Maximum number of entries to fetch

        Returns:
            List of pending OutboxEntry value objects
        """
        stmt = (
            select(OutboxModel)
            .where(OutboxModel.processed_at.is_(None))
            .order_by(OutboxModel.occurred_at, OutboxModel.created_at)
            .limit(limit)
        )

        result = await self._session.execute(stmt)
        models = result.scalars().all()

        return [model.to_value_object() for model in models]

    async def mark_processed(self, entry_id: UUID, processed_at: datetime) -> None:
        """Stage the processed timestamp for an entry.

        Args:
            entry_id: The UUID of the entry
            processed_at: Time of successful dispatch
        """
        stmt = (
            update(OutboxModel)
            .where(OutboxModel.id == entry_id)
            .values(processed_at=processed_at)
        )

        await self._session.execute(stmt)

    async def mark_failed(self, entry_id: UUID, error: str) -> None:
        """Stage a failure description, replacing any previous one.

        The entry stays pending and is retried next cycle.

        Args:
            entry_id: The UUID of the entry
            error: Description of the dispatch failure
        """
        stmt = (
            update(OutboxModel)
            .where(OutboxModel.id == entry_id)
            .values(last_error=error)
        )

        await self._session.execute(stmt)
