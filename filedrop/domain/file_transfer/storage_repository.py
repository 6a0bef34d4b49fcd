"""
File Storage Repository Interface

Abstract interface for physical file storage operations.
This abstraction keeps the transfer service infrastructure-agnostic by
defining contracts for blob operations without depending on a specific
storage implementation.
"""

from abc import ABC, abstractmethod
from typing import BinaryIO, Iterator, Optional


class FileStorageRepository(ABC):
    """
    Interface for flat, name-addressed blob storage.

    Contract Guarantees:
    - Names are flat: no directories, no path separators
    - save() never leaves a partial blob under the final name
    - open() returns None for missing blobs (no exceptions)
    - delete() never raises and reports whether it removed the blob
    - list_names() yields only completed blobs
    """

    @abstractmethod
    def save(self, name: str, content: BinaryIO, max_bytes: Optional[int] = None) -> int:
        """
        Stream content into a new blob.

        The content is written under a temporary name and moved into place
        only once it is complete. On any failure the temporary data is
        removed before the exception propagates.

        Args:
            name: Final blob name
            content: Binary source stream, read in chunks
            max_bytes: Byte ceiling; None for no limit

        Returns:
            Number of bytes written

        Raises:
            PayloadTooLargeError: If more than max_bytes were supplied
            FileExistsError: If a blob with this name already exists
            OSError: If the underlying write fails
            ValueError: If the name is empty or contains a path separator
        """
        pass  # pragma: no cover

    @abstractmethod
    def open(self, name: str) -> Optional[BinaryIO]:
        """
        Open a blob for reading. Caller must close the returned stream.

        Returns:
            Binary stream, or None if the blob does not exist
        """
        pass  # pragma: no cover

    @abstractmethod
    def size(self, name: str) -> Optional[int]:
        """Size in bytes, or None if the blob does not exist."""
        pass  # pragma: no cover

    @abstractmethod
    def delete(self, name: str) -> bool:
        """
        Delete a blob. Deleting a missing blob is a no-op.

        Returns:
            True if this call removed the blob, False if it was already
            missing or could not be removed
        """
        pass  # pragma: no cover

    @abstractmethod
    def exists(self, name: str) -> bool:
        pass  # pragma: no cover

    @abstractmethod
    def list_names(self) -> Iterator[str]:
        """Yield the names of all completed blobs."""
        pass  # pragma: no cover

    @abstractmethod
    def purge_partials(self) -> int:
        """
        Remove leftovers of interrupted writes.

        Returns:
            Number of partial blobs removed
        """
        pass  # pragma: no cover

    @abstractmethod
    def modified_at(self, name: str) -> Optional[float]:
        """Last modification time (epoch seconds), or None if missing."""
        pass  # pragma: no cover
