"""In-process domain change events.

A DomainChangeEvent describes a mutation that has already been committed.
Subscribers are plain async callables registered, in order, with the
ChangeRecorder at composition time. There is no global event bus.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


@dataclass(frozen=True)
class DomainChangeEvent:
    """Notification that an aggregate mutation was durably committed.

    Attributes:
        event_type: Change tag (e.g. "UserCreated")
        aggregate_type: Kind of aggregate that changed (e.g. "user")
        aggregate_id: Identifier of the aggregate
        tenant_id: Tenant owning the aggregate
        occurred_at: When the change happened (UTC)
        payload: Minimal projection of the change
    """

    event_type: str
    aggregate_type: str
    aggregate_id: str
    tenant_id: str
    occurred_at: datetime
    payload: dict[str, Any] = field(default_factory=dict)


DomainEventSubscriber = Callable[[DomainChangeEvent], Awaitable[None]]
