"""Users domain: the User aggregate, its identifiers and events."""

from users.domain.aggregates import User
from users.domain.events import DomainEvent, UserCreated, UserUpdated
from users.domain.value_objects import EmailAddress, UserId

__all__ = [
    "DomainEvent",
    "EmailAddress",
    "User",
    "UserCreated",
    "UserId",
    "UserUpdated",
]
