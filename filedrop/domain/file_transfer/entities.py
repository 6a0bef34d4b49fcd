"""
File Transfer Entities

Domain entities for the token registry.
"""

import time
from dataclasses import dataclass, field


@dataclass(frozen=True)
class RegistryEntry:
    """
    A live token -> stored file mapping.

    Entries exist only for uploads that were fully written; once handed out
    by the registry they are no longer retrievable through it.
    """
    token: str
    storage_name: str
    registered_at: float = field(default_factory=time.time)

    def age_seconds(self, now: float = None) -> float:
        """Seconds elapsed since registration."""
        if now is None:
            now = time.time()
        return max(0.0, now - self.registered_at)

    def is_older_than(self, max_age_seconds: float, now: float = None) -> bool:
        return self.age_seconds(now) > max_age_seconds
