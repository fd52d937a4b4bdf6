"""Unit tests for the infrastructure and outbox probes.

Probes are checked against a mocked structlog logger so the event names
and fields they emit stay stable.
"""

from unittest.mock import MagicMock

import structlog

from infrastructure.observability import ObservationContext
from infrastructure.observability.probes import DefaultConnectionProbe
from infrastructure.observability.startup_probe import DefaultStartupProbe
from shared_kernel.outbox.observability import DefaultOutboxRelayProbe
from shared_kernel.outbox.value_objects import CycleResult


class TestConnectionProbe:
    def test_engine_created_logs_target_without_password(self):
        mock_logger = MagicMock(spec=structlog.stdlib.BoundLogger)
        probe = DefaultConnectionProbe(logger=mock_logger)

        probe.engine_created("write", "postgresql://svc@db:5432/tenantcore", 10)

        mock_logger.info.assert_called_once_with(
            "database_engine_created",
            engine="write",
            target="postgresql://svc@db:5432/tenantcore",
            pool_size=10,
        )

    def test_with_context_adds_request_metadata(self):
        mock_logger = MagicMock(spec=structlog.stdlib.BoundLogger)
        context = ObservationContext(request_id="req-1", tenant_id="acme")
        probe = DefaultConnectionProbe(logger=mock_logger).with_context(context)

        probe.pool_closed("read")

        kwargs = mock_logger.info.call_args.kwargs
        assert kwargs["pool"] == "read"
        assert kwargs["request_id"] == "req-1"
        assert kwargs["tenant_id"] == "acme"


class TestStartupProbe:
    def test_shutdown_step_failed_logs_warning(self):
        mock_logger = MagicMock(spec=structlog.stdlib.BoundLogger)
        probe = DefaultStartupProbe(logger=mock_logger)

        probe.shutdown_step_failed("redis", "ConnectionError: closed")

        mock_logger.warning.assert_called_once_with(
            "shutdown_step_failed", step="redis", error="ConnectionError: closed"
        )


class TestOutboxRelayProbe:
    def test_idle_cycles_are_not_logged(self):
        probe = DefaultOutboxRelayProbe()
        probe._log = MagicMock()

        probe.cycle_completed(CycleResult())

        probe._log.info.assert_not_called()

    def test_cycles_with_work_are_logged(self):
        probe = DefaultOutboxRelayProbe()
        probe._log = MagicMock()

        probe.cycle_completed(CycleResult(fetched=3, processed=2, failed=1))

        probe._log.info.assert_called_once_with(
            "outbox_cycle_completed",
            fetched=3,
            processed=2,
            failed=1,
            committed=True,
        )
