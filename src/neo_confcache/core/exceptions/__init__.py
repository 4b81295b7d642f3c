"""Exceptions for neo-confcache.

One exception per file following maximum separation architecture.
"""

from .base import ConfCacheError, ConfigurationError
from .template_parse_error import TemplateParseError
from .template_render_error import TemplateRenderError
from .directory_scan_error import DirectoryScanError
from .not_found import NotFoundError
from .backend_error import BackendError
from .artifact_id_invalid import ArtifactIdInvalid

__all__ = [
    "ConfCacheError",
    "ConfigurationError",
    "TemplateParseError",
    "TemplateRenderError",
    "DirectoryScanError",
    "NotFoundError",
    "BackendError",
    "ArtifactIdInvalid",
]
