"""Outbox relay for propagating committed changes to fanout targets.

The relay runs as a background task within the FastAPI application. Each
cycle scans a bounded batch of pending outbox entries, dispatches them one
by one through the fanout router, stages their new status and commits the
whole batch once. Dispatch failures are isolated per entry; the entry keeps
its pending status and is retried on a later cycle.
"""

from __future__ import annotations

import asyncio
import contextlib
from collections.abc import Callable
from datetime import timedelta

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from infrastructure.outbox.repository import OutboxRepository
from shared_kernel.clock import Clock
from shared_kernel.outbox.observability import (
    DefaultOutboxRelayProbe,
    OutboxRelayProbe,
)
from shared_kernel.outbox.ports import IOutboxRepository, OutboxDispatcher
from shared_kernel.outbox.value_objects import CycleResult, OutboxEntry, RelayState

RepositoryFactory = Callable[[AsyncSession], IOutboxRepository]


def describe_error(error: BaseException) -> str:
    """Render an exception as a non-empty, human-readable description."""
    message = str(error)
    return f"{type(error).__name__}: {message}" if message else type(error).__name__


class OutboxRelay:
    """Background relay that drains the outbox into the fanout targets.

    Exactly one relay should run per deployment: pending entries are read
    without row locks. Delivery is at-least-once; a crash between dispatch
    and commit replays the batch.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        dispatcher: OutboxDispatcher,
        clock: Clock,
        probe: OutboxRelayProbe | None = None,
        batch_size: int = 20,
        poll_interval: timedelta = timedelta(seconds=10),
        repository_factory: RepositoryFactory = OutboxRepository,
    ) -> None:
        """Initialize the relay.

        Args:
            session_factory: Factory for the relay's own database sessions
            dispatcher: Routes entries to fanout handlers
            clock: Source of time and of the interruptible wait
            probe: Observability probe for logging/metrics
            batch_size: Maximum entries per cycle
            poll_interval: Wait between cycles
            repository_factory: Builds the outbox repository for a session
        """
        if batch_size < 1:
            raise ValueError("batch_size must be at least 1")
        if poll_interval <= timedelta(0):
            raise ValueError("poll_interval must be positive")
        self._session_factory = session_factory
        self._dispatcher = dispatcher
        self._clock = clock
        self._probe = probe or DefaultOutboxRelayProbe()
        self._batch_size = batch_size
        self._poll_interval = poll_interval
        self._repository_factory = repository_factory
        self._state = RelayState.IDLE
        self._stop = asyncio.Event()
        self._task: asyncio.Task[None] | None = None

    @property
    def state(self) -> RelayState:
        return self._state

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def start(self) -> None:
        """Start the relay loop as a background task.

        Calling start on a running relay does nothing.
        """
        if self.is_running:
            return
        self._stop = asyncio.Event()
        self._task = asyncio.create_task(self.run(), name="outbox-relay")

    async def stop(self, grace_period: timedelta = timedelta(seconds=30)) -> None:
        """Signal the loop to stop and wait for the current cycle to finish.

        A cycle still running after ``grace_period`` is cancelled; its
        uncommitted status updates are discarded and replayed later.
        """
        self._stop.set()
        task, self._task = self._task, None
        if task is None:
            return
        try:
            await asyncio.wait_for(asyncio.shield(task), grace_period.total_seconds())
        except asyncio.TimeoutError:
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task

    async def run(self) -> None:
        """Run cycles until stopped.

        The stop signal is checked before every cycle and interrupts the
        wait between cycles. No exception escapes the loop.
        """
        self._probe.relay_started(
            self._batch_size, self._poll_interval.total_seconds()
        )
        try:
            while not self._stop.is_set():
                try:
                    await self.run_cycle()
                except Exception as e:
                    self._probe.cycle_failed("cycle", describe_error(e))
                if await self._clock.wait(self._stop, self._poll_interval):
                    break
        finally:
            self._state = RelayState.IDLE
            self._probe.relay_stopped()

    async def run_cycle(self) -> CycleResult:
        """Perform exactly one scan, dispatch and commit cycle.

        Returns:
            Counts of fetched, processed and failed entries
        """
        try:
            async with self._session_factory() as session:
                repository = self._repository_factory(session)

                self._state = RelayState.SCANNING
                try:
                    entries = await repository.fetch_pending(self._batch_size)
                except Exception as e:
                    self._probe.cycle_failed(RelayState.SCANNING.value, describe_error(e))
                    result = CycleResult(committed=False)
                    self._probe.cycle_completed(result)
                    return result

                if not entries:
                    result = CycleResult()
                    self._probe.cycle_completed(result)
                    return result

                processed = failed = 0
                try:
                    self._state = RelayState.DISPATCHING
                    for entry in entries:
                        if await self._dispatch(repository, entry):
                            processed += 1
                        else:
                            failed += 1

                    self._state = RelayState.COMMITTING
                    await session.commit()
                    committed = True
                except Exception as e:
                    self._probe.cycle_failed(self._state.value, describe_error(e))
                    await session.rollback()
                    committed = False

                result = CycleResult(
                    fetched=len(entries),
                    processed=processed,
                    failed=failed,
                    committed=committed,
                )
                self._probe.cycle_completed(result)
                return result
        finally:
            self._state = RelayState.IDLE

    async def _dispatch(self, repository: IOutboxRepository, entry: OutboxEntry) -> bool:
        """Dispatch one entry and stage its status. Returns True on success."""
        try:
            routed = await self._dispatcher.dispatch(entry)
        except Exception as e:
            error = describe_error(e)
            await repository.mark_failed(entry.id, error)
            self._probe.event_processing_failed(entry.id, entry.event_type, error)
            return False

        await repository.mark_processed(entry.id, self._clock.now())
        if routed:
            self._probe.event_processed(entry.id, entry.event_type)
        else:
            self._probe.event_unrouted(entry.id, entry.event_type)
        return True
