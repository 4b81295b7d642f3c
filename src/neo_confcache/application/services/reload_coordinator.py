"""Reload coordinator service.

ONLY reload orchestration - the single owner of the
prepare -> cascade -> commit sequence. Drivers (filesystem watcher,
poller) only signal that a reload is wanted; the coordinator runs one
cycle at a time in its own task.
"""

import asyncio
import logging
from typing import Dict, FrozenSet, Optional, Set

from ...core.entities.reload_result import ReloadResult, ReloadState
from ...core.exceptions.base import ConfCacheError
from ...core.exceptions.directory_scan_error import DirectoryScanError
from ...core.exceptions.template_parse_error import TemplateParseError
from .config_store import ConfigStore
from .template_registry import ReloadPlan, TemplateRegistry

logger = logging.getLogger(__name__)


class ReloadCoordinator:
    """Serializes template reloads and cascades removals into the store.

    Cycle:
        SCANNING           build the new generation off-lock (worker thread)
        APPLYING_REMOVALS  hide vanished templates from the registry, then
                           remove_by_template for each of them
        commit             publish the new generation
    A scan or parse error ends the cycle in FAILED and keeps the previous
    templates and cache untouched. Either way the coordinator returns to
    IDLE.

    Templates whose cascade failed are retried on the next cycle unless
    they have reappeared on disk.

    A started cycle always runs to completion: cancelling a caller of
    ``reload_once`` or calling ``stop`` never interrupts a cascade.
    """

    def __init__(self, registry: TemplateRegistry, store: ConfigStore, directory: str):
        """Initialize reload coordinator.

        Args:
            registry: Template registry to reload
            store: Config store receiving cascade removals
            directory: Template directory to scan
        """
        self._registry = registry
        self._store = store
        self._directory = str(directory)

        self._state = ReloadState.IDLE
        self._last_result: Optional[ReloadResult] = None
        self._pending_removals: Set[str] = set()
        self._cycle_lock = asyncio.Lock()

        self._wakeup = asyncio.Event()
        self._stopping = False
        self._task: Optional[asyncio.Task] = None
        self._cycles = 0

    @property
    def directory(self) -> str:
        return self._directory

    @property
    def state(self) -> ReloadState:
        return self._state

    @property
    def last_result(self) -> Optional[ReloadResult]:
        return self._last_result

    @property
    def pending_removals(self) -> FrozenSet[str]:
        """Removed templates whose cascade has not yet succeeded."""
        return frozenset(self._pending_removals)

    @property
    def cycles(self) -> int:
        """Number of completed reload cycles."""
        return self._cycles

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def reload_once(self) -> ReloadResult:
        """Run one reload cycle and return its result.

        Cycles never overlap. The cycle is shielded, so cancellation of the
        awaiting caller lets it finish in the background.
        """
        cycle = asyncio.ensure_future(self._locked_cycle())
        return await asyncio.shield(cycle)

    async def _locked_cycle(self) -> ReloadResult:
        async with self._cycle_lock:
            try:
                result = await self._run_cycle()
            finally:
                self._state = ReloadState.IDLE
            self._last_result = result
            self._cycles += 1
            return result

    async def _run_cycle(self) -> ReloadResult:
        self._state = ReloadState.SCANNING
        try:
            plan = await asyncio.to_thread(self._registry.prepare, self._directory)
        except (TemplateParseError, DirectoryScanError) as e:
            self._state = ReloadState.FAILED
            logger.error(f"Error reloading templates from {self._directory}: {e}")
            return ReloadResult.failed(self._directory, e)

        self._state = ReloadState.APPLYING_REMOVALS
        self._registry.retire(plan.removed)
        removed_artifacts, failures = await self._cascade(plan)

        self._registry.commit(plan)

        if plan.changed:
            logger.info(
                f"Templates reloaded: {len(plan.added)} added, {len(plan.updated)} changed, "
                f"{len(plan.removed)} removed, {removed_artifacts} cached configs invalidated"
            )
        else:
            logger.debug("Templates reloaded, no changes")

        return ReloadResult(
            directory=self._directory,
            added=plan.added,
            removed=plan.removed,
            updated=plan.updated,
            removed_artifacts=removed_artifacts,
            failed_removals=failures,
        )

    async def _cascade(self, plan: ReloadPlan):
        # Retry earlier failures unless the template came back.
        self._pending_removals -= set(plan.templates)
        targets = sorted(set(plan.removed) | self._pending_removals)

        removed_artifacts = 0
        failures: Dict[str, str] = {}
        for name in targets:
            try:
                removed_artifacts += await self._store.remove_by_template(name)
            except ConfCacheError as e:
                failures[name] = str(e)
                self._pending_removals.add(name)
                logger.error(f"Error removing configs for template {name}: {e}")
            else:
                self._pending_removals.discard(name)
        return removed_artifacts, failures

    def request_reload(self, reason: str = "manual") -> None:
        """Ask the background task for a reload.

        Requests arriving while one is already pending are coalesced.
        Must be called from the coordinator's event loop.
        """
        if self._wakeup.is_set():
            logger.debug(f"Reload already pending, coalescing request ({reason})")
            return
        logger.debug(f"Reload requested ({reason})")
        self._wakeup.set()

    async def start(self) -> None:
        """Start the background task serving ``request_reload`` signals."""
        if self.is_running:
            return
        self._stopping = False
        self._task = asyncio.create_task(self._serve(), name="neo-confcache-reload")
        logger.debug(f"Reload coordinator started for {self._directory}")

    async def stop(self) -> None:
        """Stop the background task after any in-flight cycle completes."""
        if self._task is None:
            return
        self._stopping = True
        self._wakeup.set()
        try:
            await self._task
        finally:
            self._task = None
            self._wakeup.clear()
        logger.debug("Reload coordinator stopped")

    async def _serve(self) -> None:
        while True:
            await self._wakeup.wait()
            if self._stopping:
                return
            self._wakeup.clear()
            try:
                await self.reload_once()
            except Exception as e:
                logger.exception(f"Unexpected error during template reload: {e}")
