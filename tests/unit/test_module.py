"""Tests for module wiring and lifecycle."""

import pytest

from neo_confcache import ConfCacheModule
from neo_confcache.config import load_settings
from neo_confcache.core.exceptions import DirectoryScanError, TemplateParseError
from neo_confcache.infrastructure.backends import (
    MemoryStorageBackend,
    RedisStorageBackend,
    create_storage_backend,
)
from neo_confcache.infrastructure.watchers import FileEventReloadDriver, PollingReloadDriver


def make_settings(template_dir, **overrides):
    values = {
        "_env_file": None,
        "org_name": "acme",
        "template_dir": str(template_dir),
        "reload_mode": "off",
    }
    values.update(overrides)
    return load_settings(**values)


class TestBackendFactory:
    """Test backend selection from settings."""

    def test_memory_by_default(self, template_dir):
        assert isinstance(create_storage_backend(make_settings(template_dir)), MemoryStorageBackend)

    def test_redis_when_enabled(self, template_dir):
        settings = make_settings(template_dir, use_redis=True, redis_url="redis://localhost:6379/0")

        assert isinstance(create_storage_backend(settings), RedisStorageBackend)


class TestConfCacheModule:
    """Test module construction, start and stop."""

    @pytest.mark.parametrize("mode, driver_type", [
        ("watch", FileEventReloadDriver),
        ("poll", PollingReloadDriver),
        ("off", type(None)),
    ])
    def test_driver_selection(self, template_dir, mode, driver_type):
        module = ConfCacheModule.from_settings(make_settings(template_dir, reload_mode=mode))

        assert isinstance(module.driver, driver_type)

    def test_ttl_only_on_redis(self, template_dir, redis_backend):
        memory_module = ConfCacheModule.from_settings(make_settings(template_dir))
        redis_module = ConfCacheModule.from_settings(
            make_settings(template_dir, use_redis=True, redis_url="redis://localhost:6379/0", redis_ttl=30),
            backend=redis_backend,
        )

        assert memory_module.store.ttl_seconds is None
        assert redis_module.store.ttl_seconds == 30
        assert redis_module.backend is redis_backend

    def test_empty_backend_override_is_kept(self, template_dir, memory_backend):
        module = ConfCacheModule(make_settings(template_dir), backend=memory_backend)

        assert module.backend is memory_backend

    @pytest.mark.asyncio
    async def test_start_and_stop(self, template_dir, write_template, redis_backend, fake_redis):
        write_template("nginx", "server_name {{ host }};\n")
        module = ConfCacheModule(
            make_settings(template_dir, reload_mode="poll", reload_interval=60),
            backend=redis_backend,
        )

        result = await module.start()
        try:
            assert result.added == frozenset({"nginx"})
            assert module.registry.names() == ["nginx"]
            assert module.coordinator.is_running
            assert module.driver.is_running

            await module.renderer.render_and_store("site1", "nginx", {"host": "example.org"})
            assert await module.store.get_template("site1") == "nginx"
        finally:
            await module.stop()

        assert not module.coordinator.is_running
        assert not module.driver.is_running
        assert fake_redis.closed

    @pytest.mark.asyncio
    async def test_start_fails_on_missing_directory(self, tmp_path):
        module = ConfCacheModule(make_settings(tmp_path / "missing"))

        with pytest.raises(DirectoryScanError):
            await module.start()
        assert not module.coordinator.is_running

    @pytest.mark.asyncio
    async def test_start_fails_on_bad_template(self, template_dir, write_template):
        write_template("broken", "{% endif %}")
        module = ConfCacheModule(make_settings(template_dir))

        with pytest.raises(TemplateParseError):
            await module.start()
        assert len(module.registry) == 0

    @pytest.mark.asyncio
    async def test_async_context_manager(self, template_dir, write_template):
        write_template("a")

        async with ConfCacheModule(make_settings(template_dir)) as module:
            assert module.registry.names() == ["a"]
            assert module.driver is None

        assert not module.coordinator.is_running
