"""Observability probes for the outbox relay and change recorder.

Following Domain Oriented Observability, probes capture domain-significant
events and metrics without cluttering business logic with logging concerns.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol
from uuid import UUID

import structlog

if TYPE_CHECKING:
    from shared_kernel.outbox.value_objects import CycleResult


logger = structlog.get_logger()


class OutboxRelayProbe(Protocol):
    """Protocol for outbox relay observability.

    Implementations can log, emit metrics, or send traces.
    """

    def relay_started(self, batch_size: int, poll_interval_seconds: float) -> None:
        """Called when the relay loop starts."""
        ...

    def relay_stopped(self) -> None:
        """Called when the relay loop exits."""
        ...

    def event_processed(self, entry_id: UUID, event_type: str) -> None:
        """Called when an entry was dispatched successfully."""
        ...

    def event_processing_failed(
        self, entry_id: UUID, event_type: str, error: str
    ) -> None:
        """Called when dispatch fails and the entry stays pending."""
        ...

    def event_unrouted(self, entry_id: UUID, event_type: str) -> None:
        """Called when no handler is registered for an entry's type."""
        ...

    def cycle_completed(self, result: CycleResult) -> None:
        """Called at the end of every cycle."""
        ...

    def cycle_failed(self, stage: str, error: str) -> None:
        """Called when fetching or committing a batch fails."""
        ...

    def handler_registered(
        self, context_name: str, event_types: frozenset[str]
    ) -> None:
        """Called when a fanout handler is registered with the router."""
        ...


class DefaultOutboxRelayProbe:
    """Default implementation using structlog.

    Logs all relay events with appropriate log levels.
    """

    def __init__(self) -> None:
        """Initialize the probe with a logger."""
        self._log = logger.bind(component="outbox_relay")

    def relay_started(self, batch_size: int, poll_interval_seconds: float) -> None:
        """Log relay start."""
        self._log.info(
            "outbox_relay_started",
            batch_size=batch_size,
            poll_interval_seconds=poll_interval_seconds,
        )

    def relay_stopped(self) -> None:
        """Log relay stop."""
        self._log.info("outbox_relay_stopped")

    def event_processed(self, entry_id: UUID, event_type: str) -> None:
        """Log successful dispatch."""
        self._log.info(
            "outbox_event_processed",
            entry_id=str(entry_id),
            event_type=event_type,
        )

    def event_processing_failed(
        self, entry_id: UUID, event_type: str, error: str
    ) -> None:
        """Log failed dispatch that will be retried next cycle."""
        self._log.warning(
            "outbox_event_processing_failed",
            entry_id=str(entry_id),
            event_type=event_type,
            error=error,
        )

    def event_unrouted(self, entry_id: UUID, event_type: str) -> None:
        """Log an entry with no registered fanout handler."""
        self._log.warning(
            "outbox_event_unrouted",
            entry_id=str(entry_id),
            event_type=event_type,
        )

    def cycle_completed(self, result: CycleResult) -> None:
        """Log cycle outcome when there was work."""
        if result.fetched > 0:
            self._log.info(
                "outbox_cycle_completed",
                fetched=result.fetched,
                processed=result.processed,
                failed=result.failed,
                committed=result.committed,
            )

    def cycle_failed(self, stage: str, error: str) -> None:
        """Log fetch/commit failure."""
        self._log.error("outbox_cycle_failed", stage=stage, error=error)

    def handler_registered(
        self, context_name: str, event_types: frozenset[str]
    ) -> None:
        """Log fanout handler registration."""
        self._log.info(
            "outbox_handler_registered",
            context=context_name,
            event_types=sorted(event_types),
            event_count=len(event_types),
        )


class ChangeRecorderProbe(Protocol):
    """Protocol for change recorder observability."""

    def change_recorded(
        self, event_type: str, aggregate_id: str, tenant_id: str
    ) -> None:
        """Called after mutation and outbox append committed together."""
        ...

    def change_record_failed(
        self, event_type: str, aggregate_id: str, error: str
    ) -> None:
        """Called when the atomic unit was rolled back."""
        ...

    def subscriber_failed(
        self, event_type: str, subscriber: str, error: str
    ) -> None:
        """Called when a post-commit subscriber raised."""
        ...


class DefaultChangeRecorderProbe:
    """Default implementation using structlog."""

    def __init__(self) -> None:
        self._log = logger.bind(component="change_recorder")

    def change_recorded(
        self, event_type: str, aggregate_id: str, tenant_id: str
    ) -> None:
        self._log.info(
            "change_recorded",
            event_type=event_type,
            aggregate_id=aggregate_id,
            tenant_id=tenant_id,
        )

    def change_record_failed(
        self, event_type: str, aggregate_id: str, error: str
    ) -> None:
        self._log.error(
            "change_record_failed",
            event_type=event_type,
            aggregate_id=aggregate_id,
            error=error,
        )

    def subscriber_failed(
        self, event_type: str, subscriber: str, error: str
    ) -> None:
        self._log.error(
            "change_subscriber_failed",
            event_type=event_type,
            subscriber=subscriber,
            error=error,
        )
