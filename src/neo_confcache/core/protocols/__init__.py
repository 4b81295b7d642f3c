"""Protocols for neo-confcache."""

from .storage_backend import StorageBackend, ScanCursor, SCAN_DONE
from .reload_driver import ReloadDriver

__all__ = [
    "StorageBackend",
    "ScanCursor",
    "SCAN_DONE",
    "ReloadDriver",
]
