"""Artifact id invalid exception.

ONLY id validation errors - raised when a caller-chosen artifact id cannot
be stored without colliding with the provenance key space.
"""

from typing import Optional


class ArtifactIdInvalid(ValueError):
    """Artifact id validation error.

    Raised when an id is:
    - empty
    - prefixed with the provenance segment (``template:``), which would
      alias another artifact's provenance key
    """

    def __init__(self, artifact_id: str, reason: str, error_code: Optional[str] = None):
        self.artifact_id = artifact_id
        self.reason = reason
        self.error_code = error_code or "ARTIFACT_ID_INVALID"
        super().__init__(f"Invalid artifact id '{artifact_id}': {reason}")

    @classmethod
    def empty(cls) -> "ArtifactIdInvalid":
        return cls("", "Artifact id cannot be empty", error_code="ARTIFACT_ID_EMPTY")

    @classmethod
    def reserved_prefix(cls, artifact_id: str, prefix: str) -> "ArtifactIdInvalid":
        return cls(
            artifact_id,
            f"Artifact id cannot start with reserved prefix '{prefix}'",
            error_code="ARTIFACT_ID_RESERVED",
        )

    def to_dict(self) -> dict:
        return {
            "error_type": "ArtifactIdInvalid",
            "error_code": self.error_code,
            "artifact_id": self.artifact_id,
            "reason": self.reason,
        }
