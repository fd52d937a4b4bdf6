"""Ports (interfaces) for the users bounded context."""

from users.ports.exceptions import DuplicateUserEmailError, UserNotFoundError
from users.ports.repositories import IUserRepository

__all__ = [
    "DuplicateUserEmailError",
    "IUserRepository",
    "UserNotFoundError",
]
