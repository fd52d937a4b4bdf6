"""Infrastructure layer for the outbox pattern.

Contains the SQLAlchemy model, the repository, the change recorder that
writes to the outbox, and the relay and router that drain it.
"""

from infrastructure.outbox.models import OutboxModel
from infrastructure.outbox.recorder import ChangeRecorder, RecordedChange
from infrastructure.outbox.relay import OutboxRelay
from infrastructure.outbox.repository import OutboxRepository
from infrastructure.outbox.router import FanoutRouter

__all__ = [
    "ChangeRecorder",
    "FanoutRouter",
    "OutboxModel",
    "OutboxRelay",
    "OutboxRepository",
    "RecordedChange",
]
