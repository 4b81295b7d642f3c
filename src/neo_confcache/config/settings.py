"""
Settings for neo-confcache.

Environment variable names match the existing deployments (ORG_NAME,
USE_REDIS, REDIS_URL, REDIS_TTL) so a service can switch implementations
without touching its environment.
"""
from enum import Enum
from typing import Any, Optional

from pydantic import Field, RedisDsn, ValidationError, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..core.exceptions import ConfigurationError

DEFAULT_TEMPLATE_SUFFIX = ".conf.tmpl"
DEFAULT_REDIS_TTL_SECONDS = 259200  # 3 days


class BackendType(str, Enum):
    """Supported storage backends."""
    MEMORY = "memory"
    REDIS = "redis"


class ReloadMode(str, Enum):
    """How template changes are picked up."""
    WATCH = "watch"   # filesystem notifications
    POLL = "poll"     # fixed-interval rescan
    OFF = "off"       # initial load only


class ConfCacheSettings(BaseSettings):
    """Configuration cache settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Tenant namespace
    org_name: str = Field(default="default", min_length=1)

    # Storage backend
    use_redis: bool = Field(default=False)
    redis_url: Optional[RedisDsn] = Field(default=None)
    redis_ttl: int = Field(default=DEFAULT_REDIS_TTL_SECONDS, gt=0)
    redis_scan_count: int = Field(default=100, gt=0)
    redis_socket_timeout: float = Field(default=5.0, gt=0)
    redis_health_check_interval: int = Field(default=5, ge=0)

    # Templates
    template_dir: str = Field(default="conf")
    template_suffix: str = Field(default=DEFAULT_TEMPLATE_SUFFIX)

    # Reloading
    reload_mode: ReloadMode = Field(default=ReloadMode.WATCH)
    reload_interval: float = Field(default=30.0, gt=0)
    watch_debounce_ms: int = Field(default=1600, gt=0)

    @field_validator("template_suffix")
    @classmethod
    def _suffix_not_empty(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("template_suffix cannot be empty")
        return value

    @model_validator(mode="after")
    def _redis_needs_url(self) -> "ConfCacheSettings":
        if self.use_redis and self.redis_url is None:
            raise ValueError("redis_url is required when use_redis is enabled")
        return self

    @property
    def backend(self) -> BackendType:
        return BackendType.REDIS if self.use_redis else BackendType.MEMORY

    def get_redis_url(self) -> Optional[str]:
        return str(self.redis_url) if self.redis_url is not None else None

    def get_redis_connection_params(self) -> dict:
        """Keyword arguments for ``redis.asyncio.Redis.from_url``."""
        return {
            "decode_responses": True,
            "socket_timeout": self.redis_socket_timeout,
            "health_check_interval": self.redis_health_check_interval,
        }


def load_settings(**overrides: Any) -> ConfCacheSettings:
    """Load settings from the environment (and ``.env``), applying overrides.

    Raises:
        ConfigurationError: If any value is missing or invalid
    """
    try:
        return ConfCacheSettings(**overrides)
    except ValidationError as e:
        first = e.errors()[0] if e.errors() else {}
        location = ".".join(str(part) for part in first.get("loc", ())) or None
        raise ConfigurationError(
            f"Invalid neo-confcache settings: {e}",
            config_key=location,
        ) from e
