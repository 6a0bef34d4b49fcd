"""
Transfer Service

Orchestrates the upload and download workflows on top of the token
registry and the blob storage:

- upload: validate, sanitize, mint a token, write the file, then register
- download: consume the token, open the file, stream it, delete it

The registry owns the token -> file mapping; this service owns the file
content lifecycle (create, stream, delete).
"""

import logging
from typing import BinaryIO, Optional

from filedrop.domain.errors import (
    InvalidFilenameError,
    MissingPayloadError,
    PayloadTooLargeError,
    StorageWriteError,
    TokenCollisionError,
    TransferNotFoundError,
)
from filedrop.domain.file_transfer import (
    FileRegistry,
    FileStorageRepository,
    TransferToken,
    build_storage_name,
    ensure_file_extension,
    generate_token,
    infer_mime_type,
    recover_original_name,
    sanitize_filename,
)
from filedrop.domain.file_transfer.filename_policy import STORAGE_NAME_SEPARATOR
from filedrop.domain.file_transfer.value_objects import DEFAULT_TOKEN_BYTES

from .transfer_result import FileDownload, UploadResult

logger = logging.getLogger(__name__)


class TransferService:
    """
    Application service for single-use file transfers.

    Limits are fixed at construction time and never change afterwards.
    """

    def __init__(
        self,
        registry: FileRegistry,
        storage: FileStorageRepository,
        max_file_size: int,
        token_bytes: int = DEFAULT_TOKEN_BYTES,
        base_url: str = "",
    ):
        """
        Initialize TransferService with injected dependencies.

        Args:
            registry: Token registry
            storage: Blob storage for uploaded files
            max_file_size: Upload ceiling in bytes
            token_bytes: Random bytes per token
            base_url: Prefix for public download references
        """
        if max_file_size <= 0:
            raise ValueError(f"max_file_size must be positive, got {max_file_size}")

        self._registry = registry
        self._storage = storage
        self._max_file_size = max_file_size
        self._token_bytes = token_bytes
        self._base_url = base_url.rstrip("/")

    @property
    def max_file_size(self) -> int:
        return self._max_file_size

    @property
    def active_files(self) -> int:
        return len(self._registry)

    def build_download_url(self, token: str) -> str:
        return f"{self._base_url}/file/{token}"

    # =========================================================================
    # Upload
    # =========================================================================

    def upload(
        self,
        stream: Optional[BinaryIO],
        filename: Optional[str],
        content_length: Optional[int] = None,
    ) -> UploadResult:
        """
        Store an uploaded file and mint a single-use token for it.

        The registry entry is created only after the file has been written
        completely; a failed write leaves neither a file nor a token behind.

        Args:
            stream: Incoming byte stream
            filename: Untrusted client-supplied filename
            content_length: Declared payload size, if known

        Returns:
            UploadResult with token and public reference

        Raises:
            MissingPayloadError: If no stream was supplied
            InvalidFilenameError: If the filename is empty
            PayloadTooLargeError: If the payload exceeds the ceiling
            StorageWriteError: If writing to storage fails
            EntropySourceError: If no token could be generated
            TokenCollisionError: If the token is already registered
        """
        if stream is None:
            raise MissingPayloadError("No file provided")

        if not filename or not filename.strip():
            raise InvalidFilenameError("Filename cannot be empty")

        if content_length is not None and content_length > self._max_file_size:
            raise PayloadTooLargeError(
                f"Declared size {content_length} exceeds {self._max_file_size} bytes",
                max_bytes=self._max_file_size,
            )

        safe_filename = sanitize_filename(filename)
        token = generate_token(self._token_bytes).value
        storage_name = build_storage_name(token, safe_filename)

        try:
            size_bytes = self._storage.save(storage_name, stream, self._max_file_size)
        except PayloadTooLargeError:
            raise
        except FileExistsError as e:
            raise TokenCollisionError(f"Stored file already exists for token {token[:8]}", e) from e
        except (OSError, ValueError) as e:
            logger.error(f"Failed to store upload for token {token[:8]}: {e}")
            raise StorageWriteError("Failed to save file", e) from e

        try:
            self._registry.register(token, storage_name)
        except TokenCollisionError:
            self._storage.delete(storage_name)
            raise

        logger.info(f"[UPLOAD] Stored '{safe_filename}' ({size_bytes} bytes) as token {token[:8]}")

        return UploadResult(
            token=token,
            filename=filename,
            safe_filename=safe_filename,
            size_bytes=size_bytes,
            download_url=self.build_download_url(token),
        )

    # =========================================================================
    # Download
    # =========================================================================

    def download(self, token: str) -> FileDownload:
        """
        Consume a token and open its file for streaming.

        Once this returns, the token is dead. The returned handle deletes the
        file when it is closed, regardless of how much was transferred.

        Args:
            token: Token taken from the request path

        Returns:
            FileDownload handle (iterable of chunks, must be closed)

        Raises:
            TransferNotFoundError: For unknown, consumed or malformed tokens
        """
        if not TransferToken.is_well_formed(token):
            raise TransferNotFoundError("Malformed token")

        entry = self._registry.consume_once(token)
        if entry is None:
            raise TransferNotFoundError("Unknown or consumed token")

        storage_name = entry.storage_name
        stream = self._storage.open(storage_name)
        if stream is None:
            logger.warning(f"[DOWNLOAD] Stored file missing for token {token[:8]}")
            self._storage.delete(storage_name)
            raise TransferNotFoundError("Stored file missing")

        original_name = recover_original_name(storage_name, token)
        mime_type = infer_mime_type(original_name)
        final_name = ensure_file_extension(original_name, mime_type)

        def _discard() -> None:
            if self._storage.delete(storage_name):
                logger.info(f"[DOWNLOAD] Removed '{final_name}' for token {token[:8]}")

        return FileDownload(
            token=token,
            filename=final_name,
            mime_type=mime_type,
            size_bytes=self._storage.size(storage_name),
            stream=stream,
            on_close=_discard,
        )

    # =========================================================================
    # Maintenance
    # =========================================================================

    def recover(self) -> int:
        """
        Rebuild the registry from the storage directory.

        Removes leftovers of interrupted writes, then re-registers every
        stored file whose name starts with a well-formed token of the
        configured length. Files that do not match are left untouched.

        Returns:
            Number of entries restored
        """
        purged = self._storage.purge_partials()
        if purged:
            logger.info(f"Removed {purged} partial uploads")

        token_len = self._token_bytes * 2
        restored = 0
        for name in self._storage.list_names():
            token = name[:token_len]
            if name[token_len:token_len + 1] != STORAGE_NAME_SEPARATOR:
                continue
            if not TransferToken.is_well_formed(token, self._token_bytes):
                continue
            try:
                self._registry.register(
                    token, name, registered_at=self._storage.modified_at(name)
                )
            except TokenCollisionError:
                logger.warning(f"Skipping duplicate stored file for token {token[:8]}")
                continue
            restored += 1

        logger.info(f"Recovered {restored} pending transfers from storage")
        return restored

    def purge_abandoned(self, max_age_seconds: float, now: float = None) -> int:
        """
        Delete uploads that were never downloaded within max_age_seconds.

        Their tokens are consumed by the eviction and become dead.

        Returns:
            Number of files removed
        """
        expired = self._registry.evict_expired(max_age_seconds, now)
        removed = 0
        for entry in expired:
            if self._storage.delete(entry.storage_name):
                removed += 1
        if expired:
            logger.info(f"Purged {removed} abandoned uploads")
        return removed
