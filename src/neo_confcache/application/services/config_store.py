"""Config store service.

ONLY artifact caching - the cache-facing API for rendered configuration
artifacts of one organization, with provenance tracking and cascade
removal by template.
"""

import logging
from typing import List, Optional

from ...core.exceptions.not_found import NotFoundError
from ...core.protocols.storage_backend import StorageBackend, ScanCursor, SCAN_DONE
from ...core.value_objects.organization_keys import OrganizationKeys
from .provenance_index import ProvenanceIndex, UNKNOWN_TEMPLATE

logger = logging.getLogger(__name__)


class ConfigStore:
    """Organization-scoped artifact cache.

    Every artifact is written together with a provenance entry naming the
    template that produced it. On the memory backend the pair is atomic.
    On Redis it is pipelined but not transactional: if ``set_with_template``
    raises BackendError one of the two keys may already be written, and
    repeating the call with the same arguments restores a consistent pair.

    An artifact that expired (TTL) while its provenance entry survives is
    reported as not found.
    """

    def __init__(
        self,
        backend: StorageBackend,
        organization: str,
        ttl_seconds: Optional[int] = None,
        scan_count: int = 100
    ):
        """Initialize config store.

        Args:
            backend: Storage backend shared by artifacts and provenance
            organization: Tenant namespace for every key of this store
            ttl_seconds: Expiry applied to artifact and provenance, None for none
            scan_count: Page size for namespace scans
        """
        if not organization:
            raise ValueError("Organization cannot be empty")
        if ttl_seconds is not None and ttl_seconds <= 0:
            raise ValueError(f"TTL must be positive, got {ttl_seconds}")
        if scan_count <= 0:
            raise ValueError(f"Scan count must be positive, got {scan_count}")

        self._backend = backend
        self._keys = OrganizationKeys(organization)
        self._ttl_seconds = ttl_seconds
        self._scan_count = scan_count
        self._provenance = ProvenanceIndex(backend, self._keys, scan_count)

    @property
    def organization(self) -> str:
        return self._keys.organization

    @property
    def ttl_seconds(self) -> Optional[int]:
        return self._ttl_seconds

    @property
    def backend(self) -> StorageBackend:
        return self._backend

    async def set_with_template(self, artifact_id: str, content: str, template_name: str) -> None:
        """Store content under artifact_id and record template_name as its source.

        Raises:
            ArtifactIdInvalid: If artifact_id is empty or reserved
            BackendError: If the backend write fails (may be partial on Redis)
        """
        self._keys.validate_id(artifact_id)
        await self._backend.set_many(
            self._provenance.entries(artifact_id, content, template_name),
            ttl_seconds=self._ttl_seconds,
        )
        logger.debug(f"Cached {self._keys.artifact_key(artifact_id)} from template {template_name}")

    async def set(self, artifact_id: str, content: str) -> None:
        """Store content with provenance ``unknown``."""
        await self.set_with_template(artifact_id, content, UNKNOWN_TEMPLATE)

    async def get(self, artifact_id: str) -> str:
        """Get cached content.

        Raises:
            NotFoundError: If no artifact exists (or it expired)
        """
        self._keys.validate_id(artifact_id)
        value = await self._backend.get(self._keys.artifact_key(artifact_id))
        if value is None:
            raise NotFoundError.artifact(artifact_id)
        return value

    async def get_template(self, artifact_id: str) -> str:
        """Get the name of the template that produced artifact_id.

        Raises:
            NotFoundError: If no provenance entry exists
        """
        self._keys.validate_id(artifact_id)
        template_name = await self._provenance.lookup(artifact_id)
        if template_name is None:
            raise NotFoundError.provenance(artifact_id)
        return template_name

    async def delete(self, artifact_id: str) -> bool:
        """Delete one artifact and its provenance entry.

        Returns:
            True if the artifact existed
        """
        self._keys.validate_id(artifact_id)
        artifact_key = self._keys.artifact_key(artifact_id)
        existed = await self._backend.get(artifact_key) is not None
        await self._backend.delete(artifact_key, self._keys.provenance_key(artifact_id))
        return existed

    async def remove_by_template(self, template_name: str) -> int:
        """Delete every artifact produced by template_name, with its provenance.

        Individual pair deletions that fail are logged and skipped; only a
        failing namespace scan raises.

        Returns:
            Number of artifacts removed

        Raises:
            BackendError: If scanning the namespace fails
        """
        removed = await self._provenance.remove_template(template_name)
        if removed:
            logger.info(
                f"Removed {removed} configs generated from template {template_name} "
                f"in organization {self.organization}"
            )
        return removed

    async def get_all(self) -> List[str]:
        """List every artifact id in this organization (prefix stripped).

        Raises:
            BackendError: If scanning the namespace fails
        """
        ids: List[str] = []
        cursor: ScanCursor = SCAN_DONE
        while True:
            cursor, keys = await self._backend.scan(self._keys.prefix, cursor, self._scan_count)
            for key in keys:
                if self._keys.is_provenance_key(key):
                    continue
                ids.append(self._keys.id_from_key(key))
            if cursor == SCAN_DONE:
                break
        # Redis SCAN may return a key more than once
        return list(dict.fromkeys(ids))
