"""Entities for neo-confcache."""

from .template import Template
from .reload_result import ReloadResult, ReloadState

__all__ = ["Template", "ReloadResult", "ReloadState"]
