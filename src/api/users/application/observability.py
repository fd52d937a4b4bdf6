"""Protocol for user application service observability.

Defines the interface for domain probes that capture application-level
domain events for user operations.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class UserServiceProbe(Protocol):
    """Domain probe for user application service operations."""

    def user_created(self, user_id: str, tenant_id: str) -> None:
        """Record that a user was registered."""
        ...

    def user_updated(self, user_id: str, tenant_id: str, changed: bool) -> None:
        """Record that a profile update was applied (or was a no-op)."""
        ...

    def duplicate_email(self, tenant_id: str, email: str) -> None:
        """Record that an email address collided within a tenant."""
        ...

    def user_not_found(self, user_id: str, tenant_id: str) -> None:
        """Record that a lookup found no user in the tenant."""
        ...

    def with_context(self, context: ObservationContext) -> UserServiceProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultUserServiceProbe:
    """Default implementation of UserServiceProbe using structlog."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
        context: ObservationContext | None = None,
    ):
        self._logger = logger or structlog.get_logger()
        self._context = context

    def _get_context_kwargs(self) -> dict[str, Any]:
        """Get context metadata as kwargs for logging."""
        if self._context is None:
            return {}
        return self._context.as_dict()

    def with_context(self, context: ObservationContext) -> DefaultUserServiceProbe:
        """Create a new probe with observation context bound."""
        return DefaultUserServiceProbe(logger=self._logger, context=context)

    def user_created(self, user_id: str, tenant_id: str) -> None:
        self._logger.info(
            "user_created",
            user_id=user_id,
            tenant_id=tenant_id,
            **self._get_context_kwargs(),
        )

    def user_updated(self, user_id: str, tenant_id: str, changed: bool) -> None:
        self._logger.info(
            "user_updated",
            user_id=user_id,
            tenant_id=tenant_id,
            changed=changed,
            **self._get_context_kwargs(),
        )

    def duplicate_email(self, tenant_id: str, email: str) -> None:
        self._logger.warning(
            "user_duplicate_email",
            tenant_id=tenant_id,
            email=email,
            **self._get_context_kwargs(),
        )

    def user_not_found(self, user_id: str, tenant_id: str) -> None:
        self._logger.info(
            "user_not_found",
            user_id=user_id,
            tenant_id=tenant_id,
            **self._get_context_kwargs(),
        )
