"""Application layer for neo-confcache."""

from .services import *  # noqa: F401,F403
from .services import __all__
