"""End-to-end reload and cascade scenarios on both backends."""

import pytest

from neo_confcache.application.services import ConfigStore
from neo_confcache.core.exceptions import NotFoundError


@pytest.fixture
def loaded(coordinator, write_template):
    """Directory holding ``a`` and ``b`` templates; load it before use."""
    write_template("a")
    write_template("b")
    return coordinator


class TestEndToEnd:
    """Load, cache, remove and expire as a service would."""

    @pytest.mark.asyncio
    async def test_cache_and_lookup_provenance(self, loaded, store, registry):
        await loaded.reload_once()
        assert registry.names() == ["a", "b"]

        await store.set_with_template("cfg1", "hello", "a")

        assert await store.get("cfg1") == "hello"
        assert await store.get_template("cfg1") == "a"

    @pytest.mark.asyncio
    async def test_deleted_template_invalidates_its_configs(self, loaded, store, template_dir):
        await loaded.reload_once()
        await store.set_with_template("cfg1", "hello", "a")

        (template_dir / "a.conf.tmpl").unlink()
        result = await loaded.reload_once()

        assert result.removed == frozenset({"a"})
        with pytest.raises(NotFoundError):
            await store.get("cfg1")

    @pytest.mark.asyncio
    async def test_removal_leaves_other_templates_configs(self, loaded, store):
        await loaded.reload_once()
        await store.set_with_template("cfg2", "x", "b")

        await store.remove_by_template("a")

        assert await store.get("cfg2") == "x"

    @pytest.mark.asyncio
    async def test_expired_config_disappears_from_listing(self, redis_backend, clock):
        store = ConfigStore(redis_backend, organization="acme", ttl_seconds=1)
        await store.set("cfg3", "y")
        assert await store.get_all() == ["cfg3"]

        clock.advance(1)

        with pytest.raises(NotFoundError):
            await store.get("cfg3")
        assert "cfg3" not in await store.get_all()

    @pytest.mark.asyncio
    async def test_get_all_strips_prefix(self, loaded, store):
        await loaded.reload_once()
        await store.set_with_template("cfg1", "hello", "a")

        assert set(await store.get_all()) == {"cfg1"}
