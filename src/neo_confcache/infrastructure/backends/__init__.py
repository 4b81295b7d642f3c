"""Storage backend implementations."""

from .memory_backend import MemoryStorageBackend, create_memory_storage_backend
from .redis_backend import RedisStorageBackend, create_redis_storage_backend, escape_glob
from .factory import create_storage_backend

__all__ = [
    "MemoryStorageBackend",
    "create_memory_storage_backend",
    "RedisStorageBackend",
    "create_redis_storage_backend",
    "escape_glob",
    "create_storage_backend",
]
