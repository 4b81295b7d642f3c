"""Storage backend factory.

ONLY backend selection - builds the backend named by the settings.
"""

import logging

from redis.asyncio import Redis

from ...config.settings import BackendType, ConfCacheSettings
from ...core.protocols.storage_backend import StorageBackend
from .memory_backend import create_memory_storage_backend
from .redis_backend import create_redis_storage_backend

logger = logging.getLogger(__name__)


def create_storage_backend(settings: ConfCacheSettings) -> StorageBackend:
    """Create the storage backend selected by ``settings.use_redis``.

    The Redis client is created lazily connected; no I/O happens here.
    """
    if settings.backend is BackendType.REDIS:
        client = Redis.from_url(
            settings.get_redis_url(),
            **settings.get_redis_connection_params(),
        )
        logger.info(
            f"Using Redis storage backend for organization {settings.org_name} "
            f"(ttl={settings.redis_ttl}s, scan_count={settings.redis_scan_count})"
        )
        return create_redis_storage_backend(client, scan_count=settings.redis_scan_count)

    logger.info(f"Using memory storage backend for organization {settings.org_name}")
    return create_memory_storage_backend()
