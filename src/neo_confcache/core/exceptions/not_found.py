"""Not found exception.

ONLY lookup misses - raised when an artifact, its provenance entry or a
template does not exist. TTL-expired artifacts are reported the same way.
"""

from .base import ConfCacheError


class NotFoundError(ConfCacheError):
    """Requested artifact, provenance entry or template does not exist."""

    def __init__(self, kind: str, identifier: str, message: str):
        self.kind = kind
        self.identifier = identifier
        super().__init__(
            message,
            error_code=f"{kind.upper()}_NOT_FOUND",
            details={"kind": kind, "identifier": identifier},
        )

    @classmethod
    def artifact(cls, artifact_id: str) -> "NotFoundError":
        """Create exception for a missing cached artifact."""
        return cls("artifact", artifact_id, f"Key (id) does not exist: {artifact_id}")

    @classmethod
    def provenance(cls, artifact_id: str) -> "NotFoundError":
        """Create exception for a missing provenance entry."""
        return cls(
            "provenance",
            artifact_id,
            f"Template information not found for config: {artifact_id}",
        )

    @classmethod
    def template(cls, template_name: str) -> "NotFoundError":
        """Create exception for a template that is not loaded."""
        return cls("template", template_name, f"Template not loaded: {template_name}")
