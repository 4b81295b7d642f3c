"""Polling reload driver.

ONLY interval triggering - requests a reload on a fixed interval whether
or not anything changed. For filesystems without reliable change
notifications (NFS, some container volumes).
"""

import asyncio
import logging
from typing import Optional

from ...application.services.reload_coordinator import ReloadCoordinator

logger = logging.getLogger(__name__)


class PollingReloadDriver:
    """Fixed-interval reload trigger."""

    def __init__(self, coordinator: ReloadCoordinator, interval_seconds: float):
        """Initialize polling driver.

        Args:
            coordinator: Coordinator that performs the reloads
            interval_seconds: Seconds between reload requests
        """
        if interval_seconds <= 0:
            raise ValueError(f"Interval must be positive, got {interval_seconds}")
        self._coordinator = coordinator
        self._interval = interval_seconds
        self._stop_event = asyncio.Event()
        self._task: Optional[asyncio.Task] = None
        self._ticks = 0

    @property
    def name(self) -> str:
        return "poll"

    @property
    def interval_seconds(self) -> float:
        return self._interval

    @property
    def ticks(self) -> int:
        return self._ticks

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def start(self) -> None:
        if self.is_running:
            return
        self._stop_event.clear()
        self._task = asyncio.create_task(self._loop(), name="neo-confcache-poll")
        logger.info(
            f"Polling {self._coordinator.directory} for template changes "
            f"every {self._interval}s"
        )

    async def stop(self) -> None:
        if self._task is None:
            return
        self._stop_event.set()
        try:
            await self._task
        finally:
            self._task = None

    async def _loop(self) -> None:
        while not self._stop_event.is_set():
            try:
                await asyncio.wait_for(self._stop_event.wait(), timeout=self._interval)
            except asyncio.TimeoutError:
                self._ticks += 1
                self._coordinator.request_reload(self.name)
