"""Value objects for neo-confcache."""

from .organization_keys import OrganizationKeys

__all__ = ["OrganizationKeys"]
