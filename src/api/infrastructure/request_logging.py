"""Explicit request logging for application commands.

Handlers opt in at composition time by being wrapped with
``with_request_logging``. Nothing is discovered from attributes or
decorators at runtime: an unwrapped handler is simply not logged.
"""

from __future__ import annotations

import functools
import time
from collections.abc import Awaitable, Callable
from typing import ParamSpec, Protocol, TypeVar

import structlog

P = ParamSpec("P")
R = TypeVar("R")

logger = structlog.get_logger()


class RequestLoggingProbe(Protocol):
    """Protocol for request logging observability."""

    def request_started(self, request_name: str) -> None: ...

    def request_handled(self, request_name: str, duration_ms: float) -> None: ...

    def request_failed(
        self, request_name: str, duration_ms: float, error: str
    ) -> None: ...


class DefaultRequestLoggingProbe:
    """Default implementation using structlog."""

    def __init__(self) -> None:
        self._log = logger.bind(component="request_logging")

    def request_started(self, request_name: str) -> None:
        self._log.info("request_started", request=request_name)

    def request_handled(self, request_name: str, duration_ms: float) -> None:
        self._log.info(
            "request_handled", request=request_name, duration_ms=round(duration_ms, 2)
        )

    def request_failed(
        self, request_name: str, duration_ms: float, error: str
    ) -> None:
        self._log.warning(
            "request_failed",
            request=request_name,
            duration_ms=round(duration_ms, 2),
            error=error,
        )


def with_request_logging(
    handler: Callable[P, Awaitable[R]],
    request_name: str,
    probe: RequestLoggingProbe | None = None,
) -> Callable[P, Awaitable[R]]:
    """Wrap an async handler so each call is logged with its duration.

    Exceptions are logged and re-raised unchanged.

    Args:
        handler: The async callable to wrap
        request_name: Name used in log events (e.g. "CreateUser")
        probe: Optional probe, defaults to structlog output

    Returns:
        An async callable with the same signature as ``handler``
    """
    probe = probe or DefaultRequestLoggingProbe()

    @functools.wraps(handler)
    async def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
        probe.request_started(request_name)
        started = time.perf_counter()
        try:
            result = await handler(*args, **kwargs)
        except Exception as e:
            elapsed = (time.perf_counter() - started) * 1000
            probe.request_failed(request_name, elapsed, f"{type(e).__name__}: {e}")
            raise
        probe.request_handled(request_name, (time.perf_counter() - started) * 1000)
        return result

    return wrapper
