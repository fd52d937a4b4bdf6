"""Value objects passed to fanout targets."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


@dataclass(frozen=True)
class IndexDocument:
    """A document to upsert into the search index.

    Attributes:
        index: Logical index name (e.g. "users")
        document_id: Stable identifier; repeated writes replace the document
        body: Document fields
    """

    index: str
    document_id: str
    body: dict[str, Any]


@dataclass(frozen=True)
class IntegrationEvent:
    """A cross-service event published to the message bus.

    Attributes:
        message_id: Identifier consumers deduplicate on (the outbox entry id)
        event_type: Integration event name (e.g. "UserCreatedIntegrationEvent")
        tenant_id: Tenant the change belongs to
        occurred_at: When the originating change happened
        data: Event body
    """

    message_id: str
    event_type: str
    tenant_id: str
    occurred_at: datetime
    data: dict[str, Any] = field(default_factory=dict)
