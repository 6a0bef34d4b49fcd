"""
Unit tests for the background upload sweeper.
"""

import threading
from unittest.mock import Mock

import pytest

from filedrop.infrastructure.upload_sweeper import UploadSweeper


@pytest.fixture
def mock_transfer_service():
    service = Mock()
    service.purge_abandoned.return_value = 0
    return service


class TestUploadSweeper:
    def test_rejects_non_positive_settings(self, mock_transfer_service):
        with pytest.raises(ValueError):
            UploadSweeper(mock_transfer_service, max_age_seconds=0)
        with pytest.raises(ValueError):
            UploadSweeper(mock_transfer_service, max_age_seconds=60, interval_seconds=0)

    def test_sweep_once_delegates_with_ttl(self, mock_transfer_service):
        mock_transfer_service.purge_abandoned.return_value = 3
        sweeper = UploadSweeper(mock_transfer_service, max_age_seconds=120)

        assert sweeper.sweep_once() == 3
        mock_transfer_service.purge_abandoned.assert_called_once_with(120)

    def test_sweep_once_swallows_and_logs_failures(self, mock_transfer_service, caplog):
        mock_transfer_service.purge_abandoned.side_effect = RuntimeError("boom")
        sweeper = UploadSweeper(mock_transfer_service, max_age_seconds=120)

        assert sweeper.sweep_once() == 0
        assert "Upload sweep failed" in caplog.text

    def test_start_and_stop(self, mock_transfer_service):
        swept = threading.Event()
        mock_transfer_service.purge_abandoned.side_effect = lambda ttl: swept.set() or 0
        sweeper = UploadSweeper(
            mock_transfer_service, max_age_seconds=60, interval_seconds=0.01
        )

        sweeper.start()
        try:
            assert sweeper.running
            assert swept.wait(timeout=5)
        finally:
            sweeper.stop()

        assert not sweeper.running

    def test_start_twice_keeps_one_thread(self, mock_transfer_service):
        sweeper = UploadSweeper(mock_transfer_service, max_age_seconds=60, interval_seconds=60)
        sweeper.start()
        try:
            first = sweeper._thread
            sweeper.start()
            assert sweeper._thread is first
        finally:
            sweeper.stop()
