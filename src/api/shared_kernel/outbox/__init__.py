"""Outbox pattern implementation for ensuring consistency.

This module provides the transactional outbox pattern to propagate committed
changes from PostgreSQL to downstream consumers (search index, message bus,
realtime notifier) without a distributed transaction.
"""

from shared_kernel.outbox.ports import (
    EventSerializer,
    FanoutHandler,
    IOutboxRepository,
    OutboxDispatcher,
)
from shared_kernel.outbox.value_objects import CycleResult, OutboxEntry, RelayState

__all__ = [
    "CycleResult",
    "EventSerializer",
    "FanoutHandler",
    "IOutboxRepository",
    "OutboxDispatcher",
    "OutboxEntry",
    "RelayState",
]
