"""Template entity.

ONLY loaded template data - immutable record of one parsed template file.
A reload replaces the whole entry, never mutates it.
"""

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class Template:
    """A parsed, named template loaded from the template directory.

    Attributes:
        name: File basename with the template suffix stripped
        source_path: Absolute path the template was read from
        compiled: Engine-specific compiled template (a ``jinja2.Template``)
        checksum: SHA-256 of the source text, used to detect edits
    """

    name: str
    source_path: str
    compiled: Any = field(compare=False, repr=False)
    checksum: str = ""

    def same_source(self, other: "Template") -> bool:
        """True if ``other`` was built from identical source text."""
        return self.checksum == other.checksum and self.source_path == other.source_path
