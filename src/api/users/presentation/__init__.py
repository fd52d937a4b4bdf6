"""Presentation layer for the users bounded context."""

from users.presentation.routes import router

__all__ = ["router"]
