"""Config cache module wiring.

Builds the storage backend, config store, template registry, reload
coordinator, renderer and the configured reload driver from settings, and
owns their start/stop lifecycle. No process-wide state: every component is
created here and passed explicitly.
"""

import logging
from typing import Optional

from .application.services.config_renderer import ConfigRenderer
from .application.services.config_store import ConfigStore
from .application.services.reload_coordinator import ReloadCoordinator
from .application.services.template_registry import TemplateRegistry
from .config.settings import BackendType, ConfCacheSettings, ReloadMode
from .core.entities.reload_result import ReloadResult
from .core.protocols.reload_driver import ReloadDriver
from .core.protocols.storage_backend import StorageBackend
from .infrastructure.backends.factory import create_storage_backend
from .infrastructure.templates.jinja_loader import JinjaTemplateLoader
from .infrastructure.watchers.file_event_driver import FileEventReloadDriver
from .infrastructure.watchers.polling_driver import PollingReloadDriver

logger = logging.getLogger(__name__)


class ConfCacheModule:
    """Configuration cache module.

    Provides:
    - ConfigStore over the memory or Redis backend
    - TemplateRegistry loaded from ``settings.template_dir``
    - ReloadCoordinator plus one reload driver (watch or poll)
    - ConfigRenderer for render-and-cache requests
    """

    def __init__(
        self,
        settings: ConfCacheSettings,
        backend: Optional[StorageBackend] = None
    ):
        """Initialize module from settings.

        Args:
            settings: Module settings
            backend: Storage backend override, built from settings if None
        """
        self._settings = settings
        self._backend = backend if backend is not None else create_storage_backend(settings)

        ttl = settings.redis_ttl if settings.backend is BackendType.REDIS else None
        self._store = ConfigStore(
            self._backend,
            organization=settings.org_name,
            ttl_seconds=ttl,
            scan_count=settings.redis_scan_count,
        )
        self._loader = JinjaTemplateLoader(suffix=settings.template_suffix)
        self._registry = TemplateRegistry(self._loader)
        self._coordinator = ReloadCoordinator(self._registry, self._store, settings.template_dir)
        self._renderer = ConfigRenderer(self._registry, self._store)
        self._driver = self._create_driver()
        self._started = False

    def _create_driver(self) -> Optional[ReloadDriver]:
        mode = self._settings.reload_mode
        if mode is ReloadMode.WATCH:
            return FileEventReloadDriver(
                self._coordinator,
                self._loader,
                debounce_ms=self._settings.watch_debounce_ms,
            )
        if mode is ReloadMode.POLL:
            return PollingReloadDriver(self._coordinator, self._settings.reload_interval)
        return None

    @classmethod
    def from_settings(
        cls,
        settings: ConfCacheSettings,
        backend: Optional[StorageBackend] = None
    ) -> "ConfCacheModule":
        return cls(settings, backend=backend)

    @property
    def settings(self) -> ConfCacheSettings:
        return self._settings

    @property
    def backend(self) -> StorageBackend:
        return self._backend

    @property
    def store(self) -> ConfigStore:
        return self._store

    @property
    def registry(self) -> TemplateRegistry:
        return self._registry

    @property
    def coordinator(self) -> ReloadCoordinator:
        return self._coordinator

    @property
    def renderer(self) -> ConfigRenderer:
        return self._renderer

    @property
    def driver(self) -> Optional[ReloadDriver]:
        return self._driver

    async def start(self) -> ReloadResult:
        """Load templates, then start the coordinator and reload driver.

        Raises:
            TemplateParseError: If the initial load hits a bad template
            DirectoryScanError: If the template directory cannot be listed
        """
        result = await self._coordinator.reload_once()
        if result.error is not None:
            raise result.error

        logger.info(
            f"Loaded {len(self._registry)} templates from {self._settings.template_dir} "
            f"for organization {self._settings.org_name}"
        )

        await self._coordinator.start()
        if self._driver is not None:
            await self._driver.start()
        self._started = True
        return result

    async def stop(self) -> None:
        """Stop the driver, let any in-flight reload finish, close the backend."""
        if self._driver is not None:
            await self._driver.stop()
        await self._coordinator.stop()
        await self._backend.close()
        self._started = False

    async def __aenter__(self) -> "ConfCacheModule":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.stop()
