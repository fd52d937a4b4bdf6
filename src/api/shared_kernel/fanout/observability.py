"""Observability probe for fanout targets."""

from __future__ import annotations

from typing import Protocol

import structlog

logger = structlog.get_logger()


class FanoutProbe(Protocol):
    """Protocol for fanout target observability."""

    def delivered(self, target: str, subject_id: str) -> None:
        """Called when a target accepted a delivery."""
        ...

    def delivery_failed(self, target: str, subject_id: str, error: str) -> None:
        """Called when a target rejected a delivery."""
        ...

    def delivery_skipped(self, target: str, subject_id: str) -> None:
        """Called when a target already holds the delivery."""
        ...


class DefaultFanoutProbe:
    """Default implementation using structlog."""

    def __init__(self) -> None:
        self._log = logger.bind(component="fanout")

    def delivered(self, target: str, subject_id: str) -> None:
        self._log.debug("fanout_delivered", target=target, subject_id=subject_id)

    def delivery_skipped(self, target: str, subject_id: str) -> None:
        self._log.info("fanout_delivery_skipped", target=target, subject_id=subject_id)

    def delivery_failed(self, target: str, subject_id: str, error: str) -> None:
        self._log.warning(
            "fanout_delivery_failed",
            target=target,
            subject_id=subject_id,
            error=error,
        )
