"""Core infrastructure components for store-sanitizer."""

from .config import Config, PolicyConfig, ReportingConfig, StoreConfig, get_config
from .exceptions import (
    ReportingError,
    SanitizerError,
    StoreError,
    StoreUnreadableError,
    StoreWriteError,
    ValidationError,
)
from .logging import get_logger, log_context, setup_logging

__all__ = [
    "Config",
    "PolicyConfig",
    "ReportingConfig",
    "StoreConfig",
    "get_config",
    "ReportingError",
    "SanitizerError",
    "StoreError",
    "StoreUnreadableError",
    "StoreWriteError",
    "ValidationError",
    "log_context",
    "get_logger",
    "setup_logging",
]
