"""
Application Layer

Orchestrates domain services and the storage infrastructure.
"""

from .dependency_container import DependencyContainer
from .transfer_result import FileDownload, UploadResult
from .transfer_service import TransferService

__all__ = [
    "DependencyContainer",
    "FileDownload",
    "TransferService",
    "UploadResult",
]
