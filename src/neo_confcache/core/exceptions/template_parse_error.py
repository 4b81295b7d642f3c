"""Template parse exception.

ONLY template load errors - raised when a template file cannot be read
or compiled during a registry reload.
"""

from typing import Optional

from .base import ConfCacheError


class TemplateParseError(ConfCacheError):
    """A template file failed to load.

    The reload that hit it is aborted as a whole; the registry keeps
    serving the previous generation.
    """

    def __init__(
        self,
        path: str,
        reason: str,
        line: Optional[int] = None,
        error_code: Optional[str] = None,
    ):
        self.path = path
        self.reason = reason
        self.line = line

        location = f"{path}:{line}" if line else path
        super().__init__(
            f"Failed to parse template {location}: {reason}",
            error_code=error_code or "TEMPLATE_PARSE_ERROR",
            details={"path": path, "reason": reason, "line": line},
        )

    @classmethod
    def unreadable(cls, path: str, reason: str) -> "TemplateParseError":
        """Create exception for a template file that could not be read."""
        return cls(path=path, reason=reason, error_code="TEMPLATE_UNREADABLE")
