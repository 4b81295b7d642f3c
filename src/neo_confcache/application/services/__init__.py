"""Application services for neo-confcache."""

from .provenance_index import ProvenanceIndex, UNKNOWN_TEMPLATE
from .config_store import ConfigStore
from .template_registry import TemplateRegistry, ReloadPlan
from .reload_coordinator import ReloadCoordinator
from .config_renderer import ConfigRenderer

__all__ = [
    "ProvenanceIndex",
    "UNKNOWN_TEMPLATE",
    "ConfigStore",
    "TemplateRegistry",
    "ReloadPlan",
    "ReloadCoordinator",
    "ConfigRenderer",
]
