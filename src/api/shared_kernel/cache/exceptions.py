"""Exceptions raised by cache tiers."""


class CacheTierUnavailableError(Exception):
    """Raised by a tier whose backend cannot be reached or holds an unreadable value.

    The orchestrator treats it as a miss on reads and a no-op on writes.
    """

    def __init__(self, tier: str, operation: str, key: str, cause: Exception):
        super().__init__(f"{tier} tier {operation} failed for '{key}': {cause}")
        self.tier = tier
        self.operation = operation
        self.key = key
