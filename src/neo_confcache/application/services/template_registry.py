"""Template registry service.

ONLY template set ownership - holds the live name -> Template mapping and
replaces it wholesale on reload. Knows nothing about the artifact cache;
callers use the removed names it reports to drive cascade removal.
"""

import logging
import threading
from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, FrozenSet, Iterable, List, Mapping, Optional, Set

from ...core.entities.template import Template
from ...core.exceptions.not_found import NotFoundError
from ...infrastructure.templates.jinja_loader import JinjaTemplateLoader

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReloadPlan:
    """A fully built template generation, not yet published."""

    directory: str
    templates: Mapping[str, Template]
    added: FrozenSet[str]
    removed: FrozenSet[str]
    updated: FrozenSet[str]
    base_generation: int

    @property
    def changed(self) -> bool:
        return bool(self.added or self.removed or self.updated)


class TemplateRegistry:
    """Live set of loaded templates.

    The mapping is copy-on-write: readers grab the current reference
    without locking; ``commit`` swaps in a new read-only mapping under a
    short lock. Directory I/O and parsing in ``prepare`` happen outside
    the lock, and a parse failure never touches the live mapping.
    """

    def __init__(self, loader: Optional[JinjaTemplateLoader] = None):
        """Initialize template registry.

        Args:
            loader: Template loader, defaults to ``*.conf.tmpl`` via Jinja2
        """
        self._loader = loader or JinjaTemplateLoader()
        self._templates: Mapping[str, Template] = MappingProxyType({})
        self._directory: Optional[str] = None
        self._generation = 0
        self._retired: Set[str] = set()
        self._write_lock = threading.Lock()

    @property
    def loader(self) -> JinjaTemplateLoader:
        return self._loader

    @property
    def directory(self) -> Optional[str]:
        """Directory of the last committed reload."""
        return self._directory

    @property
    def generation(self) -> int:
        """Number of committed reloads."""
        return self._generation

    def get(self, name: str) -> Optional[Template]:
        """Look up a template by name, None if not loaded."""
        return self._templates.get(name)

    def require(self, name: str) -> Template:
        """Look up a template by name.

        Raises:
            NotFoundError: If the template is not loaded
        """
        template = self._templates.get(name)
        if template is None:
            raise NotFoundError.template(name)
        return template

    def names(self) -> List[str]:
        return sorted(self._templates)

    def snapshot(self) -> Mapping[str, Template]:
        """The current generation; never mutated after publication."""
        return self._templates

    def __contains__(self, name: object) -> bool:
        return name in self._templates

    def __len__(self) -> int:
        return len(self._templates)

    def prepare(self, directory: str) -> ReloadPlan:
        """Scan and parse directory into a new generation without publishing it.

        Raises:
            DirectoryScanError: If the directory cannot be listed
            TemplateParseError: If any template file fails to load
        """
        base_generation = self._generation
        current = self._templates

        candidate: Dict[str, Template] = {}
        for path in self._loader.discover(directory):
            template = self._loader.load(path)
            candidate[template.name] = template

        new_names: Set[str] = set(candidate)
        old_names: Set[str] = set(current)
        updated = {
            name for name in new_names & old_names
            if not candidate[name].same_source(current[name])
        }

        return ReloadPlan(
            directory=str(directory),
            templates=MappingProxyType(candidate),
            added=frozenset(new_names - old_names),
            removed=frozenset(old_names - new_names),
            updated=frozenset(updated),
            base_generation=base_generation,
        )

    def retire(self, names: Iterable[str]) -> FrozenSet[str]:
        """Stop serving names ahead of the next commit.

        Used before cascade removal, so no new artifact can be rendered
        from a template whose artifacts are being deleted. The generation
        is unchanged.

        Returns:
            Names that were live and are now hidden
        """
        with self._write_lock:
            hidden = frozenset(name for name in names if name in self._templates)
            if hidden:
                self._templates = MappingProxyType(
                    {name: template for name, template in self._templates.items() if name not in hidden}
                )
                self._retired |= hidden
        for name in sorted(hidden):
            logger.debug(f"Retired template: {name}")
        return hidden

    def commit(self, plan: ReloadPlan) -> FrozenSet[str]:
        """Publish a prepared generation.

        Returns:
            Names present before the swap, or retired since the last commit,
            and absent after it
        """
        with self._write_lock:
            previous = set(self._templates) | self._retired
            self._retired = set()
            if plan.base_generation != self._generation:
                logger.warning(
                    f"Committing template plan built on generation {plan.base_generation} "
                    f"over generation {self._generation}"
                )
            self._templates = plan.templates
            self._directory = plan.directory
            self._generation += 1

        removed = frozenset(set(previous) - set(plan.templates))
        for name in sorted(removed):
            logger.info(f"Removed template: {name}")
        for name in sorted(plan.added):
            logger.info(f"Loaded template: {name}")
        for name in sorted(plan.updated):
            logger.info(f"Reloaded changed template: {name}")
        return removed

    def reload(self, directory: str) -> FrozenSet[str]:
        """Rescan directory and replace the live template set.

        All-or-nothing: on any error the previous templates stay live.

        Returns:
            Names of templates that disappeared

        Raises:
            DirectoryScanError: If the directory cannot be listed
            TemplateParseError: If any template file fails to load
        """
        return self.commit(self.prepare(directory))
