"""Template render exception."""

from .base import ConfCacheError


class TemplateRenderError(ConfCacheError):
    """A loaded template failed while rendering caller data."""

    def __init__(self, template_name: str, reason: str):
        self.template_name = template_name
        self.reason = reason
        super().__init__(
            f"Failed to render template {template_name}: {reason}",
            error_code="TEMPLATE_RENDER_ERROR",
            details={"template_name": template_name, "reason": reason},
        )
