"""Base exceptions for neo-confcache.

All library exceptions inherit from ConfCacheError and carry an error code
and a details dictionary so callers (e.g. an HTTP handler) can report them
in a structured way.
"""

from typing import Any, Dict, Optional


class ConfCacheError(Exception):
    """Base exception for all neo-confcache errors."""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for serialization."""
        return {
            "error_type": self.__class__.__name__,
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class ConfigurationError(ConfCacheError):
    """Raised when settings are missing or invalid."""

    def __init__(
        self,
        message: str = "Configuration error",
        config_key: Optional[str] = None,
        **kwargs
    ):
        super().__init__(message, **kwargs)
        if config_key:
            self.details["config_key"] = config_key
