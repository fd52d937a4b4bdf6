"""Protocols (ports) for the outbox pattern.

These protocols define the interfaces for outbox persistence and dispatch.
Each bounded context registers its own fanout handler with the router, so
the shared kernel never knows about specific change types.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable
from uuid import UUID

if TYPE_CHECKING:
    from shared_kernel.outbox.value_objects import OutboxEntry


@runtime_checkable
class IOutboxRepository(Protocol):
    """Repository for outbox entry persistence.

    The repository shares the database session of its caller. It never
    commits; the caller owns the transaction boundary.
    """

    async def append(
        self,
        event_type: str,
        payload: dict[str, Any],
        occurred_at: datetime,
        aggregate_type: str,
        aggregate_id: str,
        tenant_id: str,
    ) -> None:
        """Append a pre-serialized change to the outbox within the current transaction.

        Args:
            event_type: Change tag (e.g., "UserCreated")
            payload: Pre-serialized change data as a dictionary
            occurred_at: When the change occurred
            aggregate_type: Type of aggregate (e.g., "user")
            aggregate_id: ULID of the aggregate
            tenant_id: Tenant owning the aggregate
        """
        ...

    async def fetch_pending(self, limit: int) -> list["OutboxEntry"]:
        """Fetch pending entries, oldest ``occurred_at`` first.

        Args:
            limit: Maximum number of entries to fetch

        Returns:
            List of pending OutboxEntry objects across all tenants
        """
        ...

    async def mark_processed(self, entry_id: UUID, processed_at: datetime) -> None:
        """Stage the processed timestamp for an entry."""
        ...

    async def mark_failed(self, entry_id: UUID, error: str) -> None:
        """Stage a failure description for an entry, leaving it pending.

        The previous error text, if any, is replaced.
        """
        ...


@runtime_checkable
class EventSerializer(Protocol):
    """Converts a bounded context's domain events to outbox payloads.

    Payloads are the minimal JSON-compatible projection the fanout
    handlers need; they are never deserialized back into domain events.
    """

    def supported_event_types(self) -> frozenset[str]:
        """Return the event type names this serializer handles."""
        ...

    def serialize(self, event: Any) -> dict[str, Any]:
        """Convert a domain event to a JSON-serializable dictionary.

        Raises:
            ValueError: If the event type is not supported
        """
        ...


@runtime_checkable
class FanoutHandler(Protocol):
    """Dispatches outbox entries of specific types to fanout targets.

    Each bounded context provides its own implementation that knows how to
    turn its change payloads into index documents, integration events and
    notifications.
    """

    def supported_event_types(self) -> frozenset[str]:
        """Return the change tags this handler dispatches.

        Returns:
            Frozenset of event type names (e.g., {"UserCreated"})
        """
        ...

    async def handle(self, entry: "OutboxEntry") -> None:
        """Dispatch one entry to every target it concerns.

        Raises:
            Exception: Any target failure; the relay records it on the entry
        """
        ...


@runtime_checkable
class OutboxDispatcher(Protocol):
    """Routes an entry to the handler registered for its type."""

    async def dispatch(self, entry: "OutboxEntry") -> bool:
        """Dispatch ``entry``.

        Returns:
            True if a handler ran, False if no handler is registered
        """
        ...
