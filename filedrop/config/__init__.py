from .logging_config import configure_logging
from .settings import FileDropConfig, mask_api_key

__all__ = ["FileDropConfig", "configure_logging", "mask_api_key"]
