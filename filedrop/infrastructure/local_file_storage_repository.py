"""
Local File Storage Repository Implementation

Concrete implementation of FileStorageRepository for local filesystem
operations. Blobs live flat inside a single base directory; writes go to a
hidden temporary file first and are renamed into place once complete.
"""

import logging
import os
from pathlib import Path
from typing import BinaryIO, Iterator, Optional

from filedrop.domain.errors import PayloadTooLargeError
from filedrop.domain.file_transfer.storage_repository import FileStorageRepository

logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024

PARTIAL_PREFIX = "."
PARTIAL_SUFFIX = ".part"


class LocalFileStorageRepository(FileStorageRepository):
    """
    Local filesystem implementation of FileStorageRepository.

    Thread Safety:
        Distinct names never contend. Temporary files are created with
        exclusive mode, so two writers can never share one.

    Attributes:
        base_path: Directory holding all stored blobs
    """

    def __init__(self, base_path: str = "./uploads"):
        """
        Initialize the local file storage repository.

        Args:
            base_path: Storage directory, created if missing
        """
        self.base_path = Path(base_path)
        self._ensure_base_directory()

    def _ensure_base_directory(self) -> None:
        """
        Ensure the base storage directory exists.

        Raises:
            PermissionError: If insufficient permissions to create directory
            OSError: If directory creation fails for other reasons
        """
        try:
            self.base_path.mkdir(parents=True, exist_ok=True)
        except PermissionError as e:
            raise PermissionError(
                f"Insufficient permissions to create storage directory: {self.base_path}"
            ) from e
        except OSError as e:
            raise OSError(
                f"Failed to create storage directory: {self.base_path}"
            ) from e

    @staticmethod
    def _validate_name(name: str) -> None:
        if not name or not name.strip():
            raise ValueError("name cannot be empty")
        if "/" in name or "\\" in name or name in (".", ".."):
            raise ValueError(f"name must not contain path separators: {name!r}")

    @staticmethod
    def _is_partial(name: str) -> bool:
        return name.startswith(PARTIAL_PREFIX) and name.endswith(PARTIAL_SUFFIX)

    def path_for(self, name: str) -> Path:
        """Absolute path of a blob."""
        self._validate_name(name)
        return self.base_path / name

    def _partial_path_for(self, name: str) -> Path:
        return self.base_path / f"{PARTIAL_PREFIX}{name}{PARTIAL_SUFFIX}"

    # FileStorageRepository interface methods

    def save(self, name: str, content: BinaryIO, max_bytes: Optional[int] = None) -> int:
        final_path = self.path_for(name)
        if final_path.exists():
            raise FileExistsError(f"Blob already exists: {name}")

        partial_path = self._partial_path_for(name)
        written = 0
        completed = False

        # Opened before the cleanup guard: a partial owned by another writer is left alone
        partial = open(partial_path, "xb")
        try:
            with partial as f:
                while True:
                    chunk = content.read(CHUNK_SIZE)
                    if not chunk:
                        break
                    written += len(chunk)
                    if max_bytes is not None and written > max_bytes:
                        raise PayloadTooLargeError(
                            f"Upload exceeds {max_bytes} bytes", max_bytes=max_bytes
                        )
                    f.write(chunk)
                f.flush()
                os.fsync(f.fileno())

            os.replace(partial_path, final_path)
            completed = True
            return written
        finally:
            if not completed:
                self._discard(partial_path)

    def _discard(self, path: Path) -> None:
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            logger.error(f"Failed to remove partial file {path.name}: {e}")

    def open(self, name: str) -> Optional[BinaryIO]:
        try:
            return open(self.path_for(name), "rb")
        except (OSError, ValueError):
            return None

    def size(self, name: str) -> Optional[int]:
        try:
            path = self.path_for(name)
            if not path.is_file():
                return None
            return path.stat().st_size
        except (OSError, ValueError):
            return None

    def delete(self, name: str) -> bool:
        try:
            self.path_for(name).unlink()
            return True
        except (FileNotFoundError, ValueError):
            return False
        except OSError as e:
            logger.error(f"Failed to delete stored file {name}: {e}")
            return False

    def exists(self, name: str) -> bool:
        try:
            return self.path_for(name).is_file()
        except (OSError, ValueError):
            return False

    def list_names(self) -> Iterator[str]:
        for entry in self.base_path.iterdir():
            if entry.is_file() and not self._is_partial(entry.name):
                yield entry.name

    def modified_at(self, name: str) -> Optional[float]:
        try:
            return self.path_for(name).stat().st_mtime
        except (OSError, ValueError):
            return None

    def purge_partials(self) -> int:
        removed = 0
        for entry in self.base_path.iterdir():
            if entry.is_file() and self._is_partial(entry.name):
                self._discard(entry)
                removed += 1
        return removed
