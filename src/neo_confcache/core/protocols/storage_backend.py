"""Storage backend protocol.

ONLY raw key-value storage contract - the primitives the config store and
provenance index are built on. Keys passed in are already organization
scoped; backends know nothing about artifacts or templates.
"""

from typing import Callable, Dict, List, Optional, Sequence, Tuple, Union
from typing_extensions import Protocol, runtime_checkable

ScanCursor = Union[int, str]

# Cursor value that starts a scan and that a backend returns once the
# scan is exhausted.
SCAN_DONE: int = 0


@runtime_checkable
class StorageBackend(Protocol):
    """Key-value storage backend protocol.

    Implementations:
    - MemoryStorageBackend: in-process, every call atomic under one mutex
    - RedisStorageBackend: remote, TTL-capable; atomic per key only
    """

    async def get(self, key: str) -> Optional[str]:
        """Get value by key, None if missing or expired."""
        ...

    async def get_many(self, keys: Sequence[str]) -> List[Optional[str]]:
        """Get several values; result is positionally aligned with keys."""
        ...

    async def set(self, key: str, value: str, ttl_seconds: Optional[int] = None) -> None:
        """Set value, with expiry applied in the same operation."""
        ...

    async def set_many(
        self,
        items: Dict[str, str],
        ttl_seconds: Optional[int] = None
    ) -> None:
        """Set several values with the same expiry.

        Atomic on the memory backend. On Redis the writes are pipelined but
        not transactional: a failure may leave some keys written.
        """
        ...

    async def delete(self, *keys: str) -> int:
        """Delete keys, returning how many existed."""
        ...

    async def scan(
        self,
        prefix: str,
        cursor: ScanCursor = SCAN_DONE,
        count: int = 100
    ) -> Tuple[ScanCursor, List[str]]:
        """Return one page of keys starting with prefix.

        Call with the returned cursor until it equals SCAN_DONE. Keys present
        for the whole iteration are returned at least once.
        """
        ...

    async def delete_paired(
        self,
        prefix: str,
        companion_of: Callable[[str], Optional[str]],
        expected: str,
        count: int = 100
    ) -> int:
        """Delete every key under prefix whose companion holds ``expected``.

        ``companion_of`` maps a key to its companion key, or None to skip
        the key. A matching key and its companion are deleted together.
        Returns the number of pairs deleted.
        """
        ...

    async def ping(self) -> bool:
        """Health check - True if the backend is responsive."""
        ...

    async def close(self) -> None:
        """Release connections held by the backend."""
        ...
