"""Outbox integration for the users bounded context.

UserEventSerializer turns user domain events into outbox payloads.
UserFanoutHandler turns those payloads, once committed, into a search
document, an integration event and a realtime notification.
"""

from __future__ import annotations

from typing import Any, get_args

from shared_kernel.fanout.ports import (
    IntegrationEventPublisher,
    RealtimeNotifier,
    SearchIndexer,
)
from shared_kernel.fanout.value_objects import IndexDocument, IntegrationEvent
from shared_kernel.outbox.value_objects import OutboxEntry
from users.domain.events import DomainEvent

# Derive supported events from the DomainEvent type alias
_SUPPORTED_EVENTS: frozenset[str] = frozenset(
    cls.__name__ for cls in get_args(DomainEvent)
)


class UserEventSerializer:
    """Serializes user domain events to the outbox payload shape.

    The payload is the minimal projection ``id, tenant_id, first_name,
    last_name, email``; the event type travels in the outbox row.
    """

    def supported_event_types(self) -> frozenset[str]:
        """Return the event type names this serializer handles."""
        return _SUPPORTED_EVENTS

    def serialize(self, event: DomainEvent) -> dict[str, Any]:
        """Convert a user event to a JSON-serializable dictionary.

        Raises:
            ValueError: If the event type is not supported
        """
        event_type = type(event).__name__
        if event_type not in _SUPPORTED_EVENTS:
            raise ValueError(f"Unsupported event type: {event_type}")

        return {
            "id": event.user_id,
            "tenant_id": event.tenant_id,
            "first_name": event.first_name,
            "last_name": event.last_name,
            "email": event.email,
        }


class UserFanoutHandler:
    """Dispatches committed user changes to the fanout targets.

    Targets are called in order (index, bus, notifier). If one fails the
    whole entry is retried later, so earlier targets see the change again;
    all three tolerate that.
    """

    def __init__(
        self,
        indexer: SearchIndexer,
        publisher: IntegrationEventPublisher,
        notifier: RealtimeNotifier,
        index_name: str = "users",
    ) -> None:
        self._indexer = indexer
        self._publisher = publisher
        self._notifier = notifier
        self._index_name = index_name

    def supported_event_types(self) -> frozenset[str]:
        return _SUPPORTED_EVENTS

    async def handle(self, entry: OutboxEntry) -> None:
        payload = entry.payload
        user_id = payload["id"]
        full_name = f"{payload['first_name']} {payload['last_name']}"

        await self._indexer.index(
            IndexDocument(
                index=self._index_name,
                document_id=user_id,
                body={
                    "id": user_id,
                    "tenant_id": entry.tenant_id,
                    "first_name": payload["first_name"],
                    "last_name": payload["last_name"],
                    "full_name": full_name,
                    "email": payload["email"],
                },
            )
        )

        await self._publisher.publish(
            IntegrationEvent(
                message_id=str(entry.id),
                event_type=f"{entry.event_type}IntegrationEvent",
                tenant_id=entry.tenant_id,
                occurred_at=entry.occurred_at,
                data={
                    "user_id": user_id,
                    "email": payload["email"],
                    "full_name": full_name,
                },
            )
        )

        await self._notifier.notify(user_id, full_name, tenant_id=entry.tenant_id)
