"""Neo-ConfCache - template-driven configuration rendering cache.

Renders named configuration artifacts from on-disk templates, caches them
per organization in memory or Redis, records which template produced each
artifact, and removes those artifacts when their template disappears.
"""

from .__version__ import __version__

from .config import (
    ConfCacheSettings,
    BackendType,
    ReloadMode,
    load_settings,
    setup_logging,
)

from .core import (
    Template,
    ReloadResult,
    ReloadState,
    OrganizationKeys,
    StorageBackend,
    ReloadDriver,
    ConfCacheError,
    ConfigurationError,
    TemplateParseError,
    TemplateRenderError,
    DirectoryScanError,
    NotFoundError,
    BackendError,
    ArtifactIdInvalid,
)

from .application.services import (
    ProvenanceIndex,
    ConfigStore,
    TemplateRegistry,
    ReloadCoordinator,
    ConfigRenderer,
    UNKNOWN_TEMPLATE,
)

from .infrastructure.backends import (
    MemoryStorageBackend,
    RedisStorageBackend,
    create_storage_backend,
)
from .infrastructure.templates import JinjaTemplateLoader
from .infrastructure.watchers import FileEventReloadDriver, PollingReloadDriver

from .module import ConfCacheModule

__all__ = [
    "__version__",
    # Configuration
    "ConfCacheSettings",
    "BackendType",
    "ReloadMode",
    "load_settings",
    "setup_logging",
    # Core
    "Template",
    "ReloadResult",
    "ReloadState",
    "OrganizationKeys",
    "StorageBackend",
    "ReloadDriver",
    # Exceptions
    "ConfCacheError",
    "ConfigurationError",
    "TemplateParseError",
    "TemplateRenderError",
    "DirectoryScanError",
    "NotFoundError",
    "BackendError",
    "ArtifactIdInvalid",
    # Services
    "ProvenanceIndex",
    "ConfigStore",
    "TemplateRegistry",
    "ReloadCoordinator",
    "ConfigRenderer",
    "UNKNOWN_TEMPLATE",
    # Infrastructure
    "MemoryStorageBackend",
    "RedisStorageBackend",
    "create_storage_backend",
    "JinjaTemplateLoader",
    "FileEventReloadDriver",
    "PollingReloadDriver",
    # Wiring
    "ConfCacheModule",
]
