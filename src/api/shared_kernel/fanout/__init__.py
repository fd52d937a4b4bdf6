"""Fanout target contracts (search index, message bus, realtime notifier)."""

from shared_kernel.fanout.exceptions import FanoutError
from shared_kernel.fanout.ports import (
    IntegrationEventPublisher,
    RealtimeNotifier,
    SearchIndexer,
)
from shared_kernel.fanout.value_objects import IndexDocument, IntegrationEvent

__all__ = [
    "FanoutError",
    "IndexDocument",
    "IntegrationEvent",
    "IntegrationEventPublisher",
    "RealtimeNotifier",
    "SearchIndexer",
]
