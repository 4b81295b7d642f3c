"""Reload drivers."""

from .polling_driver import PollingReloadDriver
from .file_event_driver import FileEventReloadDriver

__all__ = ["PollingReloadDriver", "FileEventReloadDriver"]
