"""Storage backend exception.

ONLY backend failures - raised when the underlying key-value store rejects
or fails an operation (connection loss, timeout, malformed TTL).
"""

from typing import Optional

from .base import ConfCacheError


class BackendError(ConfCacheError):
    """Storage backend operation failed.

    On the Redis backend a failed multi-key write may have partially
    persisted; retrying the same ``set_with_template`` call repairs it.
    """

    def __init__(self, operation: str, reason: str, key: Optional[str] = None):
        self.operation = operation
        self.key = key
        self.reason = reason

        message = f"Storage backend {operation} failed"
        if key:
            message += f" for key '{key}'"
        message += f": {reason}"

        super().__init__(
            message,
            error_code=f"BACKEND_{operation.upper()}_FAILED",
            details={"operation": operation, "key": key, "reason": reason},
        )

    @classmethod
    def from_exception(
        cls,
        operation: str,
        exc: Exception,
        key: Optional[str] = None,
    ) -> "BackendError":
        """Wrap a client-library exception."""
        return cls(operation=operation, reason=f"{exc.__class__.__name__}: {exc}", key=key)
