"""Config renderer service.

ONLY render-and-cache - renders registry templates with caller data and
stores the result under a caller-chosen id, so repeated requests for the
same id are served from the cache.
"""

import logging
from typing import Any, Mapping, Optional

from jinja2 import TemplateError

from ...core.exceptions.not_found import NotFoundError
from ...core.exceptions.template_render_error import TemplateRenderError
from .config_store import ConfigStore
from .template_registry import TemplateRegistry

logger = logging.getLogger(__name__)


class ConfigRenderer:
    """Renders templates from the registry into the config store."""

    def __init__(self, registry: TemplateRegistry, store: ConfigStore):
        self._registry = registry
        self._store = store

    async def render(self, template_name: str, data: Optional[Mapping[str, Any]] = None) -> str:
        """Render a loaded template.

        Raises:
            NotFoundError: If the template is not loaded
            TemplateRenderError: If rendering fails (e.g. undefined variable)
        """
        template = self._registry.require(template_name)
        try:
            return await template.compiled.render_async(**dict(data or {}))
        except TemplateError as e:
            raise TemplateRenderError(template_name, str(e)) from e

    async def render_and_store(
        self,
        artifact_id: str,
        template_name: str,
        data: Optional[Mapping[str, Any]] = None
    ) -> str:
        """Render template_name and cache the output under artifact_id.

        If the template was removed while rendering or storing, the fresh
        artifact is deleted again and NotFoundError is raised, so a reload's
        cascade never misses it.
        """
        content = await self.render(template_name, data)
        await self._store.set_with_template(artifact_id, content, template_name)
        if template_name not in self._registry:
            await self._store.delete(artifact_id)
            logger.info(f"Dropped config {artifact_id}: template {template_name} was removed while rendering")
            raise NotFoundError.template(template_name)
        logger.debug(f"Rendered {template_name} into config {artifact_id}")
        return content

    async def get_or_render(
        self,
        artifact_id: str,
        template_name: str,
        data: Optional[Mapping[str, Any]] = None
    ) -> str:
        """Return the cached artifact, rendering it only on a cache miss."""
        try:
            return await self._store.get(artifact_id)
        except NotFoundError:
            return await self.render_and_store(artifact_id, template_name, data)
