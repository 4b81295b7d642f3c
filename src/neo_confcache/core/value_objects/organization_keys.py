"""Organization key schema value object.

ONLY key layout - derives the storage keys for artifacts and their
provenance entries inside one organization's namespace.

Key schema (shared with existing deployments, must not change):
    artifact key    {organization}:{id}
    provenance key  {organization}:template:{id}

The braces make the organization a Redis hash tag, so an artifact and its
provenance key always land in the same cluster slot.
"""

from dataclasses import dataclass
from typing import Optional

from ..exceptions.artifact_id_invalid import ArtifactIdInvalid


@dataclass(frozen=True)
class OrganizationKeys:
    """Key builder for one organization namespace."""

    organization: str

    PROVENANCE_SEGMENT = "template"

    def __post_init__(self):
        """Validate organization on creation."""
        if not self.organization:
            raise ValueError("Organization cannot be empty")
        if "{" in self.organization or "}" in self.organization:
            raise ValueError("Organization cannot contain braces")

    @property
    def prefix(self) -> str:
        """Prefix shared by every key of this organization."""
        return f"{{{self.organization}}}:"

    @property
    def provenance_prefix(self) -> str:
        return f"{self.prefix}{self.PROVENANCE_SEGMENT}:"

    def validate_id(self, artifact_id: str) -> str:
        """Reject ids that are empty or alias the provenance key space."""
        if not artifact_id:
            raise ArtifactIdInvalid.empty()
        reserved = f"{self.PROVENANCE_SEGMENT}:"
        if artifact_id.startswith(reserved):
            raise ArtifactIdInvalid.reserved_prefix(artifact_id, reserved)
        return artifact_id

    def artifact_key(self, artifact_id: str) -> str:
        return f"{self.prefix}{artifact_id}"

    def provenance_key(self, artifact_id: str) -> str:
        return f"{self.provenance_prefix}{artifact_id}"

    def is_provenance_key(self, key: str) -> bool:
        return key.startswith(self.provenance_prefix)

    def owns(self, key: str) -> bool:
        return key.startswith(self.prefix)

    def id_from_key(self, key: str) -> str:
        """Strip the organization prefix from an artifact key."""
        return key[len(self.prefix):] if self.owns(key) else key

    def provenance_key_for(self, key: str) -> Optional[str]:
        """Companion provenance key for an artifact key.

        Returns None for provenance keys and for keys outside this
        organization.
        """
        if not self.owns(key) or self.is_provenance_key(key):
            return None
        return self.provenance_key(self.id_from_key(key))

    def artifact_key_for(self, provenance_key: str) -> Optional[str]:
        """Artifact key a provenance key belongs to, None for other keys."""
        if not self.is_provenance_key(provenance_key):
            return None
        return self.artifact_key(provenance_key[len(self.provenance_prefix):])

    def __str__(self) -> str:
        return self.organization
