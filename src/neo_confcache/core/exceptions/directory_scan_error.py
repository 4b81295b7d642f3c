"""Directory scan exception."""

from .base import ConfCacheError


class DirectoryScanError(ConfCacheError):
    """The template directory could not be listed (missing, not a directory,
    permission denied). The reload is aborted and prior state retained.
    """

    def __init__(self, directory: str, reason: str):
        self.directory = directory
        self.reason = reason
        super().__init__(
            f"Cannot scan template directory {directory}: {reason}",
            error_code="TEMPLATE_DIRECTORY_SCAN_ERROR",
            details={"directory": directory, "reason": reason},
        )
