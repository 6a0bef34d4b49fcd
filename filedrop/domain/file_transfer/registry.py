"""
File Transfer Registry

Repository interface and in-memory implementation of the token registry,
the single source of truth for whether a stored file is still claimable.
"""

import logging
import threading
import time
from abc import ABC, abstractmethod
from typing import Dict, List, Optional

from filedrop.domain.errors import TokenCollisionError

from .entities import RegistryEntry

logger = logging.getLogger(__name__)


class FileRegistry(ABC):
    """
    Abstract registry interface.

    Every lookup that can return a stored file also removes it, so serving a
    file and revoking its token are the same indivisible event. There is no
    non-destructive read.
    """

    @abstractmethod
    def register(self, token: str, storage_name: str, registered_at: float = None) -> RegistryEntry:
        """
        Make a fully written file claimable by its token.

        Args:
            token: Transfer token
            storage_name: Name of the stored file
            registered_at: Registration timestamp (defaults to now)

        Returns:
            The new RegistryEntry

        Raises:
            TokenCollisionError: If the token is already registered
        """
        pass  # pragma: no cover

    @abstractmethod
    def consume_once(self, token: str) -> Optional[RegistryEntry]:
        """
        Atomically look up and remove an entry.

        Args:
            token: Transfer token

        Returns:
            The entry if it was present, None if unknown or already consumed
        """
        pass  # pragma: no cover

    @abstractmethod
    def evict_expired(self, max_age_seconds: float, now: float = None) -> List[RegistryEntry]:
        """
        Atomically remove and return entries older than max_age_seconds.

        Evicted entries count as consumed; their tokens are dead.
        """
        pass  # pragma: no cover

    @abstractmethod
    def __len__(self) -> int:
        pass  # pragma: no cover


class InMemoryFileRegistry(FileRegistry):
    """
    Process-local registry guarded by a single lock.

    Register and consume are linearizable with respect to each other. The
    lock is held only for dictionary operations, never for file I/O.
    """

    def __init__(self):
        self._entries: Dict[str, RegistryEntry] = {}
        self._lock = threading.Lock()

    def register(self, token: str, storage_name: str, registered_at: float = None) -> RegistryEntry:
        entry = RegistryEntry(
            token=token,
            storage_name=storage_name,
            registered_at=time.time() if registered_at is None else registered_at,
        )
        with self._lock:
            if token in self._entries:
                raise TokenCollisionError(f"Token already registered: {token[:8]}...")
            self._entries[token] = entry
        return entry

    def consume_once(self, token: str) -> Optional[RegistryEntry]:
        with self._lock:
            return self._entries.pop(token, None)

    def evict_expired(self, max_age_seconds: float, now: float = None) -> List[RegistryEntry]:
        if now is None:
            now = time.time()
        with self._lock:
            expired = [
                entry for entry in self._entries.values()
                if entry.is_older_than(max_age_seconds, now)
            ]
            for entry in expired:
                del self._entries[entry.token]

        if expired:
            logger.debug(f"Evicted {len(expired)} expired registry entries")
        return expired

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
