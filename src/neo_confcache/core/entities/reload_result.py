"""Reload state and result entities."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Dict, FrozenSet, Optional


class ReloadState(str, Enum):
    """Reload cycle states.

    IDLE -> SCANNING -> APPLYING_REMOVALS -> IDLE
    IDLE -> SCANNING -> FAILED -> IDLE (previous templates retained)
    """

    IDLE = "idle"
    SCANNING = "scanning"
    APPLYING_REMOVALS = "applying_removals"
    FAILED = "failed"


@dataclass(frozen=True)
class ReloadResult:
    """Outcome of one reload cycle."""

    directory: str
    added: FrozenSet[str] = frozenset()
    removed: FrozenSet[str] = frozenset()
    updated: FrozenSet[str] = frozenset()
    removed_artifacts: int = 0
    failed_removals: Dict[str, str] = field(default_factory=dict)
    error: Optional[Exception] = None
    finished_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def succeeded(self) -> bool:
        """True when the new template set was committed."""
        return self.error is None

    @property
    def changed(self) -> bool:
        return bool(self.added or self.removed or self.updated)

    @classmethod
    def failed(cls, directory: str, error: Exception) -> "ReloadResult":
        return cls(directory=directory, error=error)
