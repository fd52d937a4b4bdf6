"""Exceptions raised by fanout targets."""


class FanoutError(Exception):
    """Raised when a fanout target rejects or cannot accept a delivery.

    The outbox relay catches it per entry and keeps the entry pending.
    """

    def __init__(self, target: str, message: str):
        super().__init__(f"{target}: {message}")
        self.target = target
