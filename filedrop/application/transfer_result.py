"""
Transfer Result Value Objects

Encapsulate the outcome of upload and download operations.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, BinaryIO, Callable, Dict, Iterator, Optional

from filedrop.domain.errors import StreamInterruptedError

logger = logging.getLogger(__name__)

BYTES_PER_MB = 1024 * 1024

DOWNLOAD_CHUNK_SIZE = 64 * 1024


@dataclass
class UploadResult:
    """
    Value object representing a completed upload.

    Holds everything the client needs to share the file: the token, the
    public reference and what was actually stored.
    """

    token: str
    filename: str
    safe_filename: str
    size_bytes: int
    download_url: str
    uploaded_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def size_mb(self) -> float:
        return round(self.size_bytes / BYTES_PER_MB, 2)

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert result to dictionary for serialization.

        Returns:
            Dictionary representation of the result
        """
        return {
            "success": True,
            "message": "File uploaded successfully",
            "token": self.token,
            "filename": self.filename,
            "safe_filename": self.safe_filename,
            "size_bytes": self.size_bytes,
            "size_mb": self.size_mb,
            "download_url": self.download_url,
            "uploaded_at": self.uploaded_at.isoformat(),
            "note": "The file will be deleted after the first download",
        }


class FileDownload:
    """
    Handle for streaming a consumed file to a client.

    Iterating yields the file in chunks. ``close()`` releases the file and
    deletes it from storage; it runs exactly once whether the stream
    completed, failed, or was never started. The token behind it is already
    spent, so an interrupted transfer cannot be retried.
    """

    def __init__(
        self,
        token: str,
        filename: str,
        mime_type: str,
        size_bytes: Optional[int],
        stream: BinaryIO,
        on_close: Callable[[], None],
    ):
        self.token = token
        self.filename = filename
        self.mime_type = mime_type
        self.size_bytes = size_bytes
        self._stream = stream
        self._on_close = on_close
        self._completed = False
        self._closed = False

    @property
    def completed(self) -> bool:
        return self._completed

    @property
    def closed(self) -> bool:
        return self._closed

    def __iter__(self) -> Iterator[bytes]:
        try:
            while True:
                chunk = self._stream.read(DOWNLOAD_CHUNK_SIZE)
                if not chunk:
                    break
                yield chunk
        except OSError as e:
            self.close()
            raise StreamInterruptedError(
                f"Read failed while streaming token {self.token[:8]}", e
            ) from e
        self._completed = True

    def read_all(self) -> bytes:
        """Read the whole payload and close the handle."""
        try:
            return b"".join(self)
        finally:
            self.close()

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True

        if not self._completed:
            logger.warning(
                f"Transfer interrupted for token {self.token[:8]}; file discarded"
            )
        try:
            self._stream.close()
        finally:
            self._on_close()

    def __enter__(self) -> "FileDownload":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
