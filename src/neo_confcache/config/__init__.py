"""Configuration for neo-confcache."""

from .settings import (
    ConfCacheSettings,
    BackendType,
    ReloadMode,
    load_settings,
    DEFAULT_TEMPLATE_SUFFIX,
    DEFAULT_REDIS_TTL_SECONDS,
)
from .logging_config import LoggingConfig, setup_logging, get_logger

__all__ = [
    "ConfCacheSettings",
    "BackendType",
    "ReloadMode",
    "load_settings",
    "DEFAULT_TEMPLATE_SUFFIX",
    "DEFAULT_REDIS_TTL_SECONDS",
    "LoggingConfig",
    "setup_logging",
    "get_logger",
]
