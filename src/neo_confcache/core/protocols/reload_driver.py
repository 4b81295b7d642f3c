"""Reload driver protocol.

ONLY trigger contract - something that decides *when* templates should be
reloaded and signals the reload coordinator. Drivers never touch the
registry or store directly.
"""

from typing_extensions import Protocol, runtime_checkable


@runtime_checkable
class ReloadDriver(Protocol):
    """Background reload trigger (filesystem events or fixed interval)."""

    @property
    def name(self) -> str:
        """Short driver name used in logs."""
        ...

    @property
    def is_running(self) -> bool:
        ...

    async def start(self) -> None:
        """Start the background task."""
        ...

    async def stop(self) -> None:
        """Stop the background task and wait for it to exit."""
        ...
