"""
Upload Sweeper

Background thread that periodically purges uploads nobody downloaded
within the configured time to live.
"""

import logging
import threading
from typing import Optional

from filedrop.application.transfer_service import TransferService

logger = logging.getLogger(__name__)


class UploadSweeper:
    """
    Daemon thread calling TransferService.purge_abandoned on an interval.

    Only the registry's eviction is serialized; file deletion happens
    outside the registry lock like every other file operation.
    """

    def __init__(
        self,
        transfer_service: TransferService,
        max_age_seconds: float,
        interval_seconds: float = 300,
    ):
        if max_age_seconds <= 0:
            raise ValueError("max_age_seconds must be positive")
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")

        self._transfer_service = transfer_service
        self._max_age_seconds = max_age_seconds
        self._interval_seconds = interval_seconds
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def sweep_once(self) -> int:
        """Run a single sweep. Errors are logged, never raised."""
        try:
            return self._transfer_service.purge_abandoned(self._max_age_seconds)
        except Exception as e:
            logger.exception(f"Upload sweep failed: {e}")
            return 0

    def _run(self) -> None:
        logger.info(
            f"Upload sweeper started (ttl={self._max_age_seconds}s, "
            f"interval={self._interval_seconds}s)"
        )
        while not self._stop_event.wait(self._interval_seconds):
            self.sweep_once()
        logger.info("Upload sweeper stopped")

    def start(self) -> None:
        if self.running:
            return
        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self._run, name="upload-sweeper", daemon=True
        )
        self._thread.start()

    def stop(self, timeout: float = 5.0) -> None:
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None
