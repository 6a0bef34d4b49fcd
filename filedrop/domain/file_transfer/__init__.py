"""
File Transfer Domain

Handles single-use transfer tokens, the token registry and the filename
policy for stored uploads.
"""

from .entities import RegistryEntry
from .filename_policy import (
    build_storage_name,
    ensure_file_extension,
    infer_mime_type,
    recover_original_name,
    sanitize_filename,
)
from .registry import FileRegistry, InMemoryFileRegistry
from .storage_repository import FileStorageRepository
from .value_objects import InvalidTransferTokenError, TransferToken, generate_token

__all__ = [
    "RegistryEntry",
    "FileRegistry",
    "InMemoryFileRegistry",
    "FileStorageRepository",
    "TransferToken",
    "InvalidTransferTokenError",
    "generate_token",
    "sanitize_filename",
    "build_storage_name",
    "recover_original_name",
    "infer_mime_type",
    "ensure_file_extension",
]
