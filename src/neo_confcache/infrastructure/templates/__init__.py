"""Template loading."""

from .jinja_loader import JinjaTemplateLoader, create_jinja_environment

__all__ = ["JinjaTemplateLoader", "create_jinja_environment"]
