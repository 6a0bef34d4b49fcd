"""
FileDrop Configuration

Environment-based configuration for the relay.
Provides centralized configuration management with sensible defaults.
"""

import logging
import os
from dataclasses import dataclass
from typing import Optional

logger = logging.getLogger(__name__)

BYTES_PER_MB = 1024 * 1024


@dataclass(frozen=True)
class FileDropConfig:
    """
    Relay configuration from environment variables.

    Read once at startup; the transfer service treats the storage path and
    upload ceiling as immutable for its lifetime.
    """

    host: str = "0.0.0.0"
    port: int = 8080
    base_url: str = "http://localhost:8080"
    storage_path: str = "./uploads"
    max_file_size: int = 5 * BYTES_PER_MB
    api_key: str = ""
    allowed_user_agent: str = ""
    token_bytes: int = 8
    upload_ttl_seconds: int = 0
    sweep_interval_seconds: int = 300
    recover_on_startup: bool = True
    log_level: str = "INFO"
    debug: bool = False

    @classmethod
    def from_env(cls) -> 'FileDropConfig':
        """
        Load configuration from environment variables.

        Invalid numeric values fall back to their defaults with a warning.

        Returns:
            FileDropConfig instance with loaded configuration
        """
        return cls(
            host=os.getenv('FLASK_HOST', '0.0.0.0'),
            port=_get_env_int('PORT', 8080, minimum=1),
            base_url=os.getenv('BASE_URL', 'http://localhost:8080').rstrip('/'),
            storage_path=os.getenv('STORAGE_PATH', './uploads'),
            max_file_size=_get_env_int('MAX_FILE_SIZE_MB', 5, minimum=1) * BYTES_PER_MB,
            api_key=os.getenv('API_KEY', ''),
            allowed_user_agent=os.getenv('ALLOWED_USER_AGENT', ''),
            token_bytes=_get_env_int('TOKEN_BYTES', 8, minimum=1),
            upload_ttl_seconds=_get_env_int('UPLOAD_TTL_SECONDS', 0, minimum=0),
            sweep_interval_seconds=_get_env_int('SWEEP_INTERVAL_SECONDS', 300, minimum=1),
            recover_on_startup=_get_env_bool('RECOVER_ON_STARTUP', True),
            log_level=os.getenv('LOG_LEVEL', 'INFO').upper(),
            debug=_get_env_bool('FLASK_DEBUG', False),
        )

    @property
    def auth_enabled(self) -> bool:
        return bool(self.api_key)

    @property
    def max_file_size_mb(self) -> float:
        return self.max_file_size / BYTES_PER_MB

    @property
    def sweeper_enabled(self) -> bool:
        return self.upload_ttl_seconds > 0

    def log_summary(self) -> None:
        """Log the effective configuration without revealing secrets."""
        logger.info("FileDrop configuration:")
        logger.info(f"  port: {self.port}")
        logger.info(f"  base url: {self.base_url}")
        logger.info(f"  storage path: {self.storage_path}")
        logger.info(f"  max file size: {self.max_file_size_mb:.1f} MB")
        logger.info(f"  api key: {mask_api_key(self.api_key)}")
        if self.allowed_user_agent:
            logger.info(f"  allowed user agent: {self.allowed_user_agent}")
        if self.sweeper_enabled:
            logger.info(f"  upload ttl: {self.upload_ttl_seconds}s")
        if not self.auth_enabled:
            logger.warning("API_KEY is not set - uploads are NOT authenticated")


def mask_api_key(api_key: str) -> str:
    """
    Mask an API key for logging.

    Keys of 8 characters or fewer are fully masked; longer keys keep their
    first and last four characters.
    """
    if not api_key:
        return "not configured"
    if len(api_key) <= 8:
        return "****"
    return f"{api_key[:4]}****{api_key[-4:]}"


def _get_env_int(key: str, default: int, minimum: Optional[int] = None) -> int:
    value = os.getenv(key)
    if not value:
        return default
    try:
        parsed = int(value)
    except ValueError:
        logger.warning(f"Invalid value for {key}: {value!r}. Using default: {default}")
        return default
    if minimum is not None and parsed < minimum:
        logger.warning(
            f"Value for {key} must be at least {minimum}, got {parsed}. Using default: {default}"
        )
        return default
    return parsed


def _get_env_bool(key: str, default: bool) -> bool:
    value = os.getenv(key)
    if not value:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')
