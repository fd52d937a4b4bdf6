"""Value objects for the outbox pattern.

Value objects are immutable descriptors that provide type safety and
domain semantics for outbox entries and relay cycles.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum
from typing import Any
from uuid import UUID


@dataclass(frozen=True)
class OutboxEntry:
    """Represents a single entry in the outbox table.

    This is an immutable value object that captures the state of an outbox
    entry as it exists in the database. It carries everything a fanout
    target needs, including the tenant the change belongs to, so the relay
    never has to infer tenant scope from ambient state.

    Attributes:
        id: Unique identifier for the entry (UUID)
        aggregate_type: Type of aggregate that generated the event (e.g., "user")
        aggregate_id: ULID of the aggregate
        tenant_id: Tenant that owns the aggregate
        event_type: Change tag (e.g., "UserCreated")
        payload: Serialized minimal projection of the change
        occurred_at: When the change occurred
        processed_at: When the entry was dispatched (None while pending)
        created_at: When the entry was written to the outbox
        last_error: Description of the most recent dispatch failure, if any
    """

    id: UUID
    aggregate_type: str
    aggregate_id: str
    tenant_id: str
    event_type: str
    payload: dict[str, Any]
    occurred_at: datetime
    processed_at: datetime | None
    created_at: datetime
    last_error: str | None = None

    @property
    def is_processed(self) -> bool:
        """Check if this entry has been processed.

        Returns:
            True if processed_at is set, False otherwise
        """
        return self.processed_at is not None


class RelayState(StrEnum):
    """Phase of the outbox relay within a cycle."""

    IDLE = "idle"
    SCANNING = "scanning"
    DISPATCHING = "dispatching"
    COMMITTING = "committing"


@dataclass(frozen=True)
class CycleResult:
    """Outcome of one relay cycle.

    Attributes:
        fetched: Number of pending entries selected
        processed: Entries marked processed
        failed: Entries left pending with an error
        committed: Whether the status updates were persisted
    """

    fetched: int = 0
    processed: int = 0
    failed: int = 0
    committed: bool = True
