"""Filesystem event reload driver.

ONLY change-notification triggering - watches the template directory with
``watchfiles`` and requests a reload whenever a template file is created,
modified or deleted. Bursts of events are batched by the watcher's
debounce window, and repeated reloads are harmless.
"""

import asyncio
import logging
from typing import Optional, Set, Tuple

from watchfiles import Change, awatch

from ...application.services.reload_coordinator import ReloadCoordinator
from ..templates.jinja_loader import JinjaTemplateLoader

logger = logging.getLogger(__name__)


class FileEventReloadDriver:
    """Reload trigger driven by filesystem notifications."""

    def __init__(
        self,
        coordinator: ReloadCoordinator,
        loader: JinjaTemplateLoader,
        debounce_ms: int = 1600,
        force_polling: Optional[bool] = None
    ):
        """Initialize filesystem event driver.

        Args:
            coordinator: Coordinator that performs the reloads
            loader: Template loader deciding which files are templates
            debounce_ms: Window in which events are batched into one reload
            force_polling: Passed through to watchfiles
        """
        self._coordinator = coordinator
        self._loader = loader
        self._debounce_ms = debounce_ms
        self._force_polling = force_polling
        self._stop_event = asyncio.Event()
        self._task: Optional[asyncio.Task] = None
        self._batches = 0

    @property
    def name(self) -> str:
        return "watch"

    @property
    def batches(self) -> int:
        """Number of change batches that triggered a reload."""
        return self._batches

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def accepts(self, change: Change, path: str) -> bool:
        """watchfiles filter: template files only, any change type."""
        return change in (Change.added, Change.modified, Change.deleted) and self._loader.matches(path)

    async def start(self) -> None:
        if self.is_running:
            return
        self._stop_event.clear()
        self._task = asyncio.create_task(self._watch(), name="neo-confcache-watch")

    async def stop(self) -> None:
        if self._task is None:
            return
        self._stop_event.set()
        try:
            await self._task
        finally:
            self._task = None

    async def _watch(self) -> None:
        directory = self._coordinator.directory
        logger.info(f"Watching directory {directory} for template changes")
        try:
            async for changes in awatch(
                directory,
                watch_filter=self.accepts,
                debounce=self._debounce_ms,
                stop_event=self._stop_event,
                recursive=False,
                force_polling=self._force_polling,
            ):
                self._on_changes(changes)
        except (OSError, RuntimeError) as e:
            logger.error(f"Error watching template directory {directory}: {e}")

    def _on_changes(self, changes: Set[Tuple[Change, str]]) -> None:
        for change, path in sorted(changes, key=lambda item: item[1]):
            logger.info(f"Template file {change.name}: {path}")
        self._batches += 1
        self._coordinator.request_reload(self.name)
