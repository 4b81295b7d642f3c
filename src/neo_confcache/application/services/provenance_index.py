"""Provenance index service.

ONLY provenance tracking - records which template produced each cached
artifact and removes artifacts by template. Stored in the same backend as
the artifacts, under ``{organization}:template:{id}``, so a pair is written
and deleted together.
"""

import logging
from typing import Dict, Optional

from ...core.exceptions.backend_error import BackendError
from ...core.protocols.storage_backend import StorageBackend, ScanCursor, SCAN_DONE
from ...core.value_objects.organization_keys import OrganizationKeys

logger = logging.getLogger(__name__)

UNKNOWN_TEMPLATE = "unknown"


class ProvenanceIndex:
    """Artifact id -> template name index built on a storage backend.

    There is no secondary index by template name: removal scans the
    organization namespace and checks each artifact's provenance key. That
    is O(namespace size), paged by ``scan_count``.
    """

    def __init__(
        self,
        backend: StorageBackend,
        keys: OrganizationKeys,
        scan_count: int = 100
    ):
        if scan_count <= 0:
            raise ValueError(f"Scan count must be positive, got {scan_count}")
        self._backend = backend
        self._keys = keys
        self._scan_count = scan_count

    def entries(self, artifact_id: str, content: str, template_name: str) -> Dict[str, str]:
        """Artifact and provenance key/value pair to be written together."""
        return {
            self._keys.artifact_key(artifact_id): content,
            self._keys.provenance_key(artifact_id): template_name or UNKNOWN_TEMPLATE,
        }

    async def lookup(self, artifact_id: str) -> Optional[str]:
        """Template name recorded for artifact_id, None if absent."""
        return await self._backend.get(self._keys.provenance_key(artifact_id))

    async def remove_template(self, template_name: str) -> int:
        """Delete every artifact produced by template_name and its provenance.

        Provenance entries left behind by artifacts that already expired are
        swept as well, but are not counted.

        Returns:
            Number of artifacts removed
        """
        removed = await self._backend.delete_paired(
            prefix=self._keys.prefix,
            companion_of=self._keys.provenance_key_for,
            expected=template_name,
            count=self._scan_count,
        )
        orphans = await self._sweep_orphans(template_name)
        logger.debug(
            f"Provenance sweep for template {template_name} in "
            f"{self._keys.organization}: {removed} artifacts removed, "
            f"{orphans} orphaned entries dropped"
        )
        return removed

    async def _sweep_orphans(self, template_name: str) -> int:
        """Delete provenance entries naming template_name whose artifact is gone.

        On Redis an artifact may expire a moment before its provenance entry.
        Unreadable pages and failed deletes are logged and skipped.
        """
        swept = 0
        cursor: ScanCursor = SCAN_DONE
        while True:
            cursor, keys = await self._backend.scan(
                self._keys.provenance_prefix, cursor, self._scan_count
            )
            if keys:
                artifact_keys = [self._keys.artifact_key_for(key) for key in keys]
                try:
                    values = await self._backend.get_many(list(keys) + artifact_keys)
                except BackendError as e:
                    logger.error(f"Error reading provenance page for template {template_name}: {e}")
                else:
                    tags, artifacts = values[:len(keys)], values[len(keys):]
                    orphans = [
                        key for key, tag, artifact in zip(keys, tags, artifacts)
                        if tag == template_name and artifact is None
                    ]
                    if orphans:
                        try:
                            swept += await self._backend.delete(*orphans)
                        except BackendError as e:
                            logger.error(f"Error deleting orphaned provenance entries {orphans}: {e}")
            if cursor == SCAN_DONE:
                break
        return swept
