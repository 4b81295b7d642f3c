"""Pytest configuration and fixtures for neo-confcache tests."""

import re
from pathlib import Path
from typing import Dict, List, Optional, Set, Tuple

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from neo_confcache.application.services.config_store import ConfigStore
from neo_confcache.application.services.reload_coordinator import ReloadCoordinator
from neo_confcache.application.services.template_registry import TemplateRegistry
from neo_confcache.infrastructure.backends.memory_backend import MemoryStorageBackend
from neo_confcache.infrastructure.backends.redis_backend import RedisStorageBackend
from neo_confcache.infrastructure.templates.jinja_loader import JinjaTemplateLoader

ORGANIZATION = "acme"


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakePipeline:
    """Non-transactional pipeline supporting queued SET commands."""

    def __init__(self, redis: "FakeAsyncRedis"):
        self._redis = redis
        self._commands: List[Tuple[str, str, Optional[int]]] = []

    async def __aenter__(self) -> "FakePipeline":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        self._commands = []

    def set(self, key, value, ex=None) -> "FakePipeline":
        self._commands.append((key, value, ex))
        return self

    async def execute(self) -> List[bool]:
        self._redis.calls.append("pipeline")
        if self._redis.partial_pipeline_failures > 0:
            self._redis.partial_pipeline_failures -= 1
            key, value, ex = self._commands[0]
            self._redis.store(key, value, ex)
            raise RedisConnectionError("connection lost mid-pipeline")
        self._redis.check("pipeline")
        for key, value, ex in self._commands:
            self._redis.store(key, value, ex)
        return [True] * len(self._commands)


class FakeAsyncRedis:
    """In-process stand-in for ``redis.asyncio.Redis`` (decode_responses=True).

    SCAN cursors index a slot table that only grows, so keys deleted
    between pages never shift the remaining ones, matching the Redis
    guarantee that keys present for the whole iteration are returned.
    """

    def __init__(self, clock: FakeClock):
        self._clock = clock
        self._data: Dict[str, Tuple[str, Optional[float]]] = {}
        self._slots: List[str] = []
        self._slot_of: Dict[str, int] = {}
        self.fail_on: Set[str] = set()
        self.fail_delete_keys: Set[str] = set()
        self.partial_pipeline_failures = 0
        self.calls: List[str] = []
        self.closed = False

    def check(self, operation: str) -> None:
        if operation in self.fail_on:
            raise RedisConnectionError(f"injected {operation} failure")

    def store(self, key: str, value: str, ex: Optional[int]) -> None:
        if key not in self._slot_of:
            self._slot_of[key] = len(self._slots)
            self._slots.append(key)
        expires_at = self._clock() + ex if ex is not None else None
        self._data[key] = (value, expires_at)

    def live(self, key: str) -> Optional[str]:
        slot = self._data.get(key)
        if slot is None:
            return None
        value, expires_at = slot
        if expires_at is not None and expires_at <= self._clock():
            del self._data[key]
            return None
        return value

    def ttl_of(self, key: str) -> Optional[float]:
        slot = self._data.get(key)
        if slot is None or slot[1] is None:
            return None
        return slot[1] - self._clock()

    async def get(self, key):
        self.calls.append("get")
        self.check("get")
        return self.live(key)

    async def mget(self, keys):
        self.calls.append("mget")
        self.check("mget")
        return [self.live(key) for key in keys]

    async def set(self, key, value, ex=None):
        self.calls.append("set")
        self.check("set")
        self.store(key, value, ex)
        return True

    async def delete(self, *keys):
        self.calls.append("delete")
        self.check("delete")
        if self.fail_delete_keys.intersection(keys):
            raise RedisConnectionError("injected delete failure")
        deleted = 0
        for key in keys:
            if self.live(key) is not None:
                del self._data[key]
                deleted += 1
        return deleted

    async def scan(self, cursor=0, match=None, count=None):
        self.calls.append("scan")
        self.check("scan")
        prefix = ""
        if match is not None:
            prefix = re.sub(r"\\(.)", r"\1", match[:-1])
        end = min(cursor + (count or 10), len(self._slots))
        keys = [
            key for key in self._slots[cursor:end]
            if key.startswith(prefix) and self.live(key) is not None
        ]
        next_cursor = end if end < len(self._slots) else 0
        return next_cursor, keys

    def pipeline(self, transaction=True):
        assert transaction is False
        return FakePipeline(self)

    async def ping(self):
        self.check("ping")
        return True

    async def aclose(self):
        self.closed = True


@pytest.fixture
def clock():
    """Controllable clock shared by both backends."""
    return FakeClock()


@pytest.fixture
def fake_redis(clock):
    return FakeAsyncRedis(clock)


@pytest.fixture
def memory_backend(clock):
    return MemoryStorageBackend(clock=clock)


@pytest.fixture
def redis_backend(fake_redis):
    return RedisStorageBackend(fake_redis, scan_count=2)


@pytest.fixture(params=["memory", "redis"])
def backend(request):
    """Each storage backend in turn."""
    return request.getfixturevalue(f"{request.param}_backend")


@pytest.fixture
def store(backend):
    """Config store with a small scan page so pagination is exercised."""
    return ConfigStore(backend, organization=ORGANIZATION, scan_count=2)


@pytest.fixture
def template_dir(tmp_path) -> Path:
    directory = tmp_path / "conf"
    directory.mkdir()
    return directory


@pytest.fixture
def write_template(template_dir):
    """Write ``{name}.conf.tmpl`` into the template directory."""

    def _write(name: str, body: str = "key = {{ value }}\n", suffix: str = ".conf.tmpl") -> Path:
        path = template_dir / f"{name}{suffix}"
        path.write_text(body, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def loader():
    return JinjaTemplateLoader()


@pytest.fixture
def registry(loader):
    return TemplateRegistry(loader)


@pytest.fixture
def coordinator(registry, store, template_dir):
    return ReloadCoordinator(registry, store, str(template_dir))
