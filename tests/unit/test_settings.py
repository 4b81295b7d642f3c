"""Tests for settings and logging configuration."""

import logging.config

import pytest

from neo_confcache.config import (
    BackendType,
    ConfCacheSettings,
    LoggingConfig,
    ReloadMode,
    load_settings,
    setup_logging,
)
from neo_confcache.config.logging_config import LogFormat, get_log_level_from_verbosity
from neo_confcache.core.exceptions import ConfigurationError

ENV_VARS = [
    "ORG_NAME", "USE_REDIS", "REDIS_URL", "REDIS_TTL", "REDIS_SCAN_COUNT",
    "TEMPLATE_DIR", "TEMPLATE_SUFFIX", "RELOAD_MODE", "RELOAD_INTERVAL", "WATCH_DEBOUNCE_MS",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    """Isolate from the host environment and any ``.env`` file."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


class TestConfCacheSettings:
    """Test environment-driven settings."""

    def test_defaults(self):
        settings = load_settings()

        assert settings.org_name == "default"
        assert settings.backend is BackendType.MEMORY
        assert settings.redis_ttl == 259200
        assert settings.template_suffix == ".conf.tmpl"
        assert settings.reload_mode is ReloadMode.WATCH
        assert settings.get_redis_url() is None

    def test_from_environment(self, monkeypatch):
        monkeypatch.setenv("ORG_NAME", "acme")
        monkeypatch.setenv("USE_REDIS", "true")
        monkeypatch.setenv("REDIS_URL", "redis://localhost:6379/0")
        monkeypatch.setenv("REDIS_TTL", "10")
        monkeypatch.setenv("RELOAD_MODE", "poll")
        monkeypatch.setenv("RELOAD_INTERVAL", "2.5")

        settings = ConfCacheSettings()

        assert settings.org_name == "acme"
        assert settings.backend is BackendType.REDIS
        assert settings.get_redis_url() == "redis://localhost:6379/0"
        assert settings.redis_ttl == 10
        assert settings.reload_mode is ReloadMode.POLL
        assert settings.reload_interval == 2.5
        assert settings.get_redis_connection_params()["decode_responses"] is True

    def test_env_file(self, tmp_path):
        (tmp_path / ".env").write_text("ORG_NAME=from-file\nTEMPLATE_DIR=/etc/templates\n")

        settings = load_settings()

        assert settings.org_name == "from-file"
        assert settings.template_dir == "/etc/templates"

    def test_redis_requires_url(self):
        with pytest.raises(ConfigurationError) as exc_info:
            load_settings(use_redis=True)
        assert "redis_url" in str(exc_info.value)

    @pytest.mark.parametrize("overrides, config_key", [
        ({"redis_ttl": 0}, "redis_ttl"),
        ({"template_suffix": " "}, "template_suffix"),
        ({"reload_mode": "sometimes"}, "reload_mode"),
        ({"org_name": ""}, "org_name"),
    ])
    def test_invalid_values(self, overrides, config_key):
        with pytest.raises(ConfigurationError) as exc_info:
            load_settings(**overrides)
        assert exc_info.value.details["config_key"] == config_key


class TestLoggingConfig:
    """Test logging configuration building."""

    @pytest.mark.parametrize("verbosity, level", [
        ("QUIET", "ERROR"),
        ("normal", "INFO"),
        ("VERBOSE", "INFO"),
        ("DEBUG", "DEBUG"),
        ("chatty", "INFO"),
    ])
    def test_verbosity_levels(self, verbosity, level):
        assert get_log_level_from_verbosity(verbosity) == level

    def test_explicit_level_wins(self):
        config = LoggingConfig.build("warning", "DEBUG", "simple")

        assert config["root"]["level"] == "WARNING"

    def test_invalid_level_falls_back_to_verbosity(self):
        config = LoggingConfig.build("loud", "QUIET", "simple")

        assert config["root"]["level"] == "ERROR"

    def test_noisy_modules(self):
        verbose = LoggingConfig.build("", "VERBOSE", "detailed")
        debug = LoggingConfig.build("", "DEBUG", "detailed")

        assert verbose["loggers"]["watchfiles"]["level"] == "WARNING"
        assert verbose["loggers"]["redis"]["propagate"] is False
        assert debug["loggers"]["watchfiles"]["level"] == "DEBUG"

    def test_format_selection(self):
        config = LoggingConfig.build("", "NORMAL", "JSON")

        assert config["formatters"]["default"]["format"] == LoggingConfig.FORMATS[LogFormat.JSON]

    def test_setup_logging_reads_environment(self, monkeypatch):
        applied = {}
        monkeypatch.delenv("LOG_LEVEL", raising=False)
        monkeypatch.setenv("LOG_VERBOSITY", "QUIET")
        monkeypatch.setenv("LOG_FORMAT", "detailed")
        monkeypatch.setattr(logging.config, "dictConfig", lambda config: applied.update(config))

        setup_logging()

        assert applied["root"]["level"] == "ERROR"
        assert "%(filename)s" in applied["formatters"]["default"]["format"]
