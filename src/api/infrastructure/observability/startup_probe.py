"""Domain probe for application startup and lifecycle events.

Following Domain-Oriented Observability patterns, this probe captures
domain-significant events during application initialization and shutdown.
"""

from __future__ import annotations

from typing import Protocol

import structlog


class StartupProbe(Protocol):
    """Domain probe for application startup operations."""

    def application_started(self, app_name: str, version: str) -> None:
        """Record that the composition root finished building."""
        ...

    def outbox_relay_disabled(self) -> None:
        """Record that the relay is not run in this process by configuration."""
        ...

    def shutdown_step_failed(self, step: str, error: str) -> None:
        """Record that releasing a resource on shutdown failed."""
        ...

    def application_stopped(self) -> None:
        """Record that all resources were released."""
        ...


class DefaultStartupProbe:
    """Default implementation of StartupProbe using structlog."""

    def __init__(self, logger: structlog.stdlib.BoundLogger | None = None):
        self._logger = logger or structlog.get_logger()

    def application_started(self, app_name: str, version: str) -> None:
        """Record that the composition root finished building."""
        self._logger.info("application_started", app_name=app_name, version=version)

    def outbox_relay_disabled(self) -> None:
        """Record that the relay is not run in this process."""
        self._logger.info("outbox_relay_disabled")

    def shutdown_step_failed(self, step: str, error: str) -> None:
        """Record that releasing a resource on shutdown failed."""
        self._logger.warning("shutdown_step_failed", step=step, error=error)

    def application_stopped(self) -> None:
        """Record that all resources were released."""
        self._logger.info("application_stopped")
