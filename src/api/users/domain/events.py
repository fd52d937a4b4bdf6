"""User domain events.

Events are recorded by the User aggregate and turned into outbox entries
by the application service. Each carries the full minimal projection the
fanout targets need, so the relay never reads the user table.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class UserCreated:
    """Event raised when a user is registered in a tenant.

    Attributes:
        user_id: The ULID of the user
        tenant_id: The tenant the user belongs to
        first_name: Given name
        last_name: Family name
        email: Lower-cased email address
        occurred_at: When the event occurred (UTC)
    """

    user_id: str
    tenant_id: str
    first_name: str
    last_name: str
    email: str
    occurred_at: datetime


@dataclass(frozen=True)
class UserUpdated:
    """Event raised when a user's profile changed.

    Carries the profile as it is after the change.
    """

    user_id: str
    tenant_id: str
    first_name: str
    last_name: str
    email: str
    occurred_at: datetime


DomainEvent = UserCreated | UserUpdated
