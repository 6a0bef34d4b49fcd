"""
Logging Configuration

Sets up the root logger for the process.
"""

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """
    Configure root logging with a single stream handler.

    Safe to call more than once; existing handlers are replaced.

    Args:
        level: Log level name (e.g. "DEBUG", "INFO")
    """
    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO

    logging.basicConfig(level=numeric_level, format=LOG_FORMAT, force=True)
