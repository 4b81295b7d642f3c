"""Redis storage backend implementation.

ONLY Redis implementation - key-value storage on a remote Redis with
per-key TTL, cursor-based SCAN and pipelined multi-key writes.

Following maximum separation architecture - one file = one purpose.
"""

import logging
import re
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from redis.exceptions import RedisError

from ...core.exceptions.backend_error import BackendError
from ...core.protocols.storage_backend import ScanCursor, SCAN_DONE

logger = logging.getLogger(__name__)

_GLOB_SPECIAL = re.compile(r"([\\*?\[\]])")


def escape_glob(text: str) -> str:
    """Escape Redis MATCH glob metacharacters so text matches literally."""
    return _GLOB_SPECIAL.sub(r"\\\1", text)


def _as_text(value) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, bytes):
        return value.decode("utf-8")
    return value


class RedisStorageBackend:
    """Redis storage backend implementation.

    Consistency is per key only. Multi-key writes (an artifact and its
    provenance entry) are pipelined without MULTI/EXEC, so a failure part
    way through can leave one key written; the caller reports the error and
    an idempotent retry repairs the pair. Hash-tagged keys keep both keys of
    a pair in one cluster slot.
    """

    def __init__(self, redis_client, scan_count: int = 100):
        """Initialize Redis storage backend.

        Args:
            redis_client: ``redis.asyncio.Redis`` instance (decode_responses
                recommended; bytes replies are decoded as UTF-8)
            scan_count: Default SCAN page size hint
        """
        if redis_client is None:
            raise ValueError("Redis client is required")
        if scan_count <= 0:
            raise ValueError(f"Scan count must be positive, got {scan_count}")
        self._redis = redis_client
        self._scan_count = scan_count

    @property
    def scan_count(self) -> int:
        return self._scan_count

    async def get(self, key: str) -> Optional[str]:
        try:
            return _as_text(await self._redis.get(key))
        except RedisError as e:
            raise BackendError.from_exception("get", e, key=key) from e

    async def get_many(self, keys: Sequence[str]) -> List[Optional[str]]:
        if not keys:
            return []
        try:
            values = await self._redis.mget(list(keys))
        except RedisError as e:
            raise BackendError.from_exception("mget", e, key=keys[0]) from e
        return [_as_text(value) for value in values]

    async def set(self, key: str, value: str, ttl_seconds: Optional[int] = None) -> None:
        try:
            await self._redis.set(key, value, ex=ttl_seconds)
        except RedisError as e:
            raise BackendError.from_exception("set", e, key=key) from e

    async def set_many(
        self,
        items: Dict[str, str],
        ttl_seconds: Optional[int] = None
    ) -> None:
        """Pipeline one SET per key, each carrying its own expiry.

        Value and TTL travel in the same SET command, so no key ever exists
        without its expiry.
        """
        if not items:
            return
        try:
            async with self._redis.pipeline(transaction=False) as pipe:
                for key, value in items.items():
                    pipe.set(key, value, ex=ttl_seconds)
                await pipe.execute()
        except RedisError as e:
            raise BackendError.from_exception("set", e, key=next(iter(items))) from e

    async def delete(self, *keys: str) -> int:
        if not keys:
            return 0
        try:
            return int(await self._redis.delete(*keys))
        except RedisError as e:
            raise BackendError.from_exception("delete", e, key=keys[0]) from e

    async def scan(
        self,
        prefix: str,
        cursor: ScanCursor = SCAN_DONE,
        count: int = 100
    ) -> Tuple[ScanCursor, List[str]]:
        try:
            next_cursor, keys = await self._redis.scan(
                cursor=int(cursor),
                match=f"{escape_glob(prefix)}*",
                count=count,
            )
        except RedisError as e:
            raise BackendError.from_exception("scan", e, key=prefix) from e
        return int(next_cursor), [_as_text(key) for key in keys]

    async def delete_paired(
        self,
        prefix: str,
        companion_of: Callable[[str], Optional[str]],
        expected: str,
        count: int = 100
    ) -> int:
        """Scan the whole prefix and delete matching key pairs.

        Scan failures abort with BackendError. A failure reading a page of
        companion keys, or deleting one pair, is logged and skipped; the next
        removal pass retries it.
        """
        cursor: ScanCursor = SCAN_DONE
        deleted = 0
        while True:
            cursor, keys = await self.scan(prefix, cursor, count)

            pairs = []
            for key in keys:
                companion = companion_of(key)
                if companion is not None:
                    pairs.append((key, companion))

            if pairs:
                try:
                    tags = await self.get_many([companion for _, companion in pairs])
                except BackendError as e:
                    logger.error(f"Error reading {len(pairs)} companion keys under {prefix}, skipping page: {e}")
                    tags = [None] * len(pairs)
                for (key, companion), tag in zip(pairs, tags):
                    if tag != expected:
                        continue
                    try:
                        await self._redis.delete(key, companion)
                        deleted += 1
                    except RedisError as e:
                        logger.error(f"Error deleting key pair {key} / {companion}: {e}")

            if cursor == SCAN_DONE:
                break

        return deleted

    async def ping(self) -> bool:
        """Health check - verify Redis is responsive."""
        try:
            response = await self._redis.ping()
            return response is True or response == b"PONG" or response == "PONG"
        except RedisError:
            return False

    async def close(self) -> None:
        """Close the underlying connection pool."""
        close = getattr(self._redis, "aclose", None) or getattr(self._redis, "close")
        await close()


def create_redis_storage_backend(
    redis_client,
    scan_count: int = 100
) -> RedisStorageBackend:
    """Create Redis storage backend.

    Args:
        redis_client: Redis client instance (async Redis connection)
        scan_count: SCAN page size hint

    Returns:
        Configured Redis storage backend instance
    """
    return RedisStorageBackend(redis_client=redis_client, scan_count=scan_count)
