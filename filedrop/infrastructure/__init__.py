"""
Infrastructure Layer

Concrete adapters for storage and background maintenance.
"""

from .local_file_storage_repository import LocalFileStorageRepository
from .upload_sweeper import UploadSweeper

__all__ = ["LocalFileStorageRepository", "UploadSweeper"]
