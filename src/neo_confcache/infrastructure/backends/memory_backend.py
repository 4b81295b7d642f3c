"""Memory storage backend.

ONLY in-memory implementation - key-value storage in process memory for
development, testing, and single-instance deployments.

Following maximum separation architecture - one file = one purpose.
"""

import bisect
import logging
import threading
import time
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from ...core.protocols.storage_backend import ScanCursor, SCAN_DONE

logger = logging.getLogger(__name__)


class MemoryStorageBackend:
    """Memory-based storage backend implementation.

    Features:
    - One mutex over all keys, so artifacts and provenance entries written
      or deleted together are never observed half-applied
    - Optional per-key TTL (monotonic clock)
    - Cursor-based prefix scan with the same contract as Redis SCAN

    No critical section awaits, so the mutex is a ``threading.Lock`` and
    one backend may be shared across threads and event loops.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        """Initialize memory storage backend.

        Args:
            clock: Monotonic time source in seconds, injectable for tests
        """
        self._data: Dict[str, Tuple[str, Optional[float]]] = {}
        self._lock = threading.Lock()
        self._clock = clock
        self._stats = {
            "sets": 0,
            "deletes": 0,
            "expired_cleanups": 0,
        }

    def _expiry(self, ttl_seconds: Optional[int]) -> Optional[float]:
        if ttl_seconds is None:
            return None
        if ttl_seconds <= 0:
            raise ValueError(f"TTL must be positive, got {ttl_seconds}")
        return self._clock() + ttl_seconds

    def _read(self, key: str, now: float) -> Optional[str]:
        """Read a live value, purging it if expired. Caller holds the lock."""
        slot = self._data.get(key)
        if slot is None:
            return None
        value, expires_at = slot
        if expires_at is not None and expires_at <= now:
            del self._data[key]
            self._stats["expired_cleanups"] += 1
            return None
        return value

    async def get(self, key: str) -> Optional[str]:
        with self._lock:
            return self._read(key, self._clock())

    async def get_many(self, keys: Sequence[str]) -> List[Optional[str]]:
        with self._lock:
            now = self._clock()
            return [self._read(key, now) for key in keys]

    async def set(self, key: str, value: str, ttl_seconds: Optional[int] = None) -> None:
        expires_at = self._expiry(ttl_seconds)
        with self._lock:
            self._data[key] = (value, expires_at)
            self._stats["sets"] += 1

    async def set_many(
        self,
        items: Dict[str, str],
        ttl_seconds: Optional[int] = None
    ) -> None:
        expires_at = self._expiry(ttl_seconds)
        with self._lock:
            for key, value in items.items():
                self._data[key] = (value, expires_at)
            self._stats["sets"] += len(items)

    async def delete(self, *keys: str) -> int:
        with self._lock:
            now = self._clock()
            deleted = 0
            for key in keys:
                if self._read(key, now) is not None:
                    del self._data[key]
                    deleted += 1
            self._stats["deletes"] += deleted
            return deleted

    async def scan(
        self,
        prefix: str,
        cursor: ScanCursor = SCAN_DONE,
        count: int = 100
    ) -> Tuple[ScanCursor, List[str]]:
        """Return one page of live keys under prefix.

        The cursor is the last key returned, so keys deleted between pages
        never shift the position of the remaining ones.
        """
        if count <= 0:
            raise ValueError(f"Scan count must be positive, got {count}")

        with self._lock:
            now = self._clock()
            keys = sorted(
                key for key in list(self._data)
                if key.startswith(prefix) and self._read(key, now) is not None
            )

        start = bisect.bisect_right(keys, cursor) if cursor != SCAN_DONE else 0
        page = keys[start:start + count]
        if start + count >= len(keys):
            return SCAN_DONE, page
        return page[-1], page

    async def delete_paired(
        self,
        prefix: str,
        companion_of: Callable[[str], Optional[str]],
        expected: str,
        count: int = 100
    ) -> int:
        """Delete matching key pairs in a single pass under the mutex.

        ``count`` is accepted for protocol compatibility; the memory backend
        needs no pagination.
        """
        with self._lock:
            now = self._clock()
            victims = []
            for key in list(self._data):
                if not key.startswith(prefix):
                    continue
                companion = companion_of(key)
                if companion is None or self._read(key, now) is None:
                    continue
                if self._read(companion, now) == expected:
                    victims.append((key, companion))

            for key, companion in victims:
                self._data.pop(key, None)
                self._data.pop(companion, None)

            self._stats["deletes"] += 2 * len(victims)
            if victims:
                logger.debug(f"Deleted {len(victims)} key pairs under {prefix} tagged {expected}")
            return len(victims)

    async def ping(self) -> bool:
        return True

    async def close(self) -> None:
        """Nothing to release; present for lifecycle symmetry with Redis."""
        return None

    def get_stats(self) -> Dict[str, int]:
        with self._lock:
            return {**self._stats, "total_keys": len(self._data)}

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)


def create_memory_storage_backend(
    clock: Callable[[], float] = time.monotonic
) -> MemoryStorageBackend:
    """Create memory storage backend.

    Args:
        clock: Monotonic time source in seconds

    Returns:
        Configured memory storage backend
    """
    return MemoryStorageBackend(clock=clock)
