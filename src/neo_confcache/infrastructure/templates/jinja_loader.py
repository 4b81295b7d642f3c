"""Jinja2 template loader.

ONLY file discovery and compilation - lists template files in a directory
and compiles each one into a ``Template`` entity. Holds no state between
calls.
"""

import hashlib
import logging
from pathlib import Path
from typing import List, Optional

from jinja2 import Environment, StrictUndefined, TemplateSyntaxError

from ...config.settings import DEFAULT_TEMPLATE_SUFFIX
from ...core.entities.template import Template
from ...core.exceptions.directory_scan_error import DirectoryScanError
from ...core.exceptions.template_parse_error import TemplateParseError

logger = logging.getLogger(__name__)


def create_jinja_environment() -> Environment:
    """Create the Jinja2 environment used for configuration templates.

    Config files are not HTML, so autoescaping is off. Undefined variables
    fail the render instead of silently producing empty strings.
    """
    return Environment(
        autoescape=False,
        undefined=StrictUndefined,
        keep_trailing_newline=True,
        enable_async=True,
    )


class JinjaTemplateLoader:
    """Discovers and compiles ``*{suffix}`` files from a directory."""

    def __init__(
        self,
        suffix: str = DEFAULT_TEMPLATE_SUFFIX,
        environment: Optional[Environment] = None
    ):
        """Initialize template loader.

        Args:
            suffix: Recognized template file suffix
            environment: Jinja2 environment, a default one is created if None
        """
        if not suffix:
            raise ValueError("Template suffix cannot be empty")
        self._suffix = suffix
        self._environment = environment or create_jinja_environment()

    @property
    def suffix(self) -> str:
        return self._suffix

    @property
    def environment(self) -> Environment:
        return self._environment

    def matches(self, path: str) -> bool:
        """True if the file name carries the recognized suffix."""
        name = Path(path).name
        return name.endswith(self._suffix) and len(name) > len(self._suffix)

    def template_name(self, path: str) -> str:
        """Basename with the recognized suffix stripped."""
        return Path(path).name[:-len(self._suffix)]

    def discover(self, directory: str) -> List[Path]:
        """List template files in directory, sorted by name.

        Raises:
            DirectoryScanError: If the directory cannot be listed
        """
        root = Path(directory)
        try:
            entries = list(root.iterdir())
        except FileNotFoundError as e:
            raise DirectoryScanError(str(root), "directory does not exist") from e
        except NotADirectoryError as e:
            raise DirectoryScanError(str(root), "path is not a directory") from e
        except OSError as e:
            raise DirectoryScanError(str(root), str(e)) from e

        return sorted(
            (entry for entry in entries if self.matches(entry.name) and entry.is_file()),
            key=lambda entry: entry.name,
        )

    def load(self, path: Path) -> Template:
        """Read and compile one template file.

        Raises:
            TemplateParseError: If the file cannot be read or compiled
        """
        try:
            source = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise TemplateParseError.unreadable(str(path), str(e)) from e

        try:
            compiled = self._environment.from_string(source)
        except TemplateSyntaxError as e:
            raise TemplateParseError(str(path), e.message or str(e), line=e.lineno) from e

        return Template(
            name=self.template_name(path.name),
            source_path=str(path.resolve()),
            compiled=compiled,
            checksum=hashlib.sha256(source.encode("utf-8")).hexdigest(),
        )
