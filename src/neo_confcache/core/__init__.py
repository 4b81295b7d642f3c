"""Core domain of neo-confcache: entities, value objects, protocols and
exceptions shared by every layer.
"""

from .entities import Template, ReloadResult, ReloadState
from .value_objects import OrganizationKeys
from .protocols import StorageBackend, ReloadDriver, ScanCursor, SCAN_DONE
from .exceptions import (
    ConfCacheError,
    ConfigurationError,
    TemplateParseError,
    TemplateRenderError,
    DirectoryScanError,
    NotFoundError,
    BackendError,
    ArtifactIdInvalid,
)

__all__ = [
    "Template",
    "ReloadResult",
    "ReloadState",
    "OrganizationKeys",
    "StorageBackend",
    "ReloadDriver",
    "ScanCursor",
    "SCAN_DONE",
    "ConfCacheError",
    "ConfigurationError",
    "TemplateParseError",
    "TemplateRenderError",
    "DirectoryScanError",
    "NotFoundError",
    "BackendError",
    "ArtifactIdInvalid",
]
