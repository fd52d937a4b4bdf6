"""Fanout target contracts consumed by the outbox relay.

Every target must be idempotent: the relay may deliver the same logical
change more than once (e.g. after a crash between delivery and the commit
that marks the entry processed).
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from shared_kernel.fanout.value_objects import IndexDocument, IntegrationEvent


@runtime_checkable
class SearchIndexer(Protocol):
    """Writes documents to the search index as upserts."""

    async def index(self, document: IndexDocument) -> None:
        """Upsert ``document`` by its id.

        Raises:
            FanoutError: If the index rejects the write
        """
        ...


@runtime_checkable
class IntegrationEventPublisher(Protocol):
    """Publishes integration events to the message bus.

    Delivery is at-least-once. Implementations skip an event whose
    ``message_id`` they have already published when they can tell, but a
    consumer must still treat ``message_id`` as its idempotency key.
    """

    async def publish(self, event: IntegrationEvent) -> None:
        """Publish ``event`` unless its ``message_id`` was already published.

        Raises:
            FanoutError: If the bus does not accept the event
        """
        ...


@runtime_checkable
class RealtimeNotifier(Protocol):
    """Pushes short notifications to connected clients."""

    async def notify(
        self, subject_id: str, description: str, *, tenant_id: str | None = None
    ) -> None:
        """Notify clients that ``subject_id`` changed.

        ``tenant_id`` narrows delivery to that tenant's clients when given.

        Raises:
            FanoutError: If the notification could not be sent
        """
        ...
