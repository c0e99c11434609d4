"""Pytest configuration and fixtures."""

import asyncio
from typing import Dict

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from config import Config
from linkstore.common.logging_config import setup_logging
from linkstore.database.memory import MemoryLinkBackend
from linkstore.errors import BackendUnavailableError
from linkstore.keycodec import KeyCodec
from linkstore.store import LinkStore


T0 = 1_700_000_000.0


class FakeClock:
    """Settable replacement for time.time."""
    
    def __init__(self, now: float = T0):
        self.now = now
    
    def __call__(self) -> float:
        return self.now
    
    def advance(self, seconds: float) -> None:
        self.now += seconds


class InterleavingBackend(MemoryLinkBackend):
    """Memory backend that yields to the event loop before every primitive."""
    
    async def allocate_id(self):
        await asyncio.sleep(0)
        return await super().allocate_id()
    
    async def fetch_record(self, link_id):
        await asyncio.sleep(0)
        return await super().fetch_record(link_id)
    
    async def increment_clicks(self, link_id):
        await asyncio.sleep(0)
        return await super().increment_clicks(link_id)


class FlakyBackend(MemoryLinkBackend):
    """Memory backend whose named primitives raise BackendUnavailableError."""
    
    def __init__(self, failing=(), **kwargs):
        super().__init__(**kwargs)
        self.failing = set(failing)
    
    def _check(self, name):
        if name in self.failing:
            raise BackendUnavailableError(f"{name} failed")
    
    async def allocate_id(self):
        self._check("allocate_id")
        return await super().allocate_id()
    
    async def write_record(self, record):
        self._check("write_record")
        return await super().write_record(record)
    
    async def fetch_record(self, link_id):
        self._check("fetch_record")
        return await super().fetch_record(link_id)
    
    async def increment_clicks(self, link_id):
        self._check("increment_clicks")
        return await super().increment_clicks(link_id)
    
    async def health_check(self):
        return "health_check" not in self.failing


class FakeRedis:
    """Dict backed stand-in for redis.asyncio.Redis with decode_responses=True."""
    
    def __init__(self, failing=()):
        self.data: Dict[str, object] = {}
        self.failing = set(failing)
        self.closed = False
    
    def _check(self, command):
        if command in self.failing:
            raise RedisConnectionError(f"{command}: connection refused")
    
    async def incr(self, name):
        self._check("incr")
        value = int(self.data.get(name, 0)) + 1
        self.data[name] = str(value)
        return value
    
    async def hset(self, name, mapping):
        self._check("hset")
        self.data.setdefault(name, {}).update({k: str(v) for k, v in mapping.items()})
        return len(mapping)
    
    async def hgetall(self, name):
        self._check("hgetall")
        return dict(self.data.get(name, {}))
    
    async def hincrby(self, name, key, amount=1):
        self._check("hincrby")
        fields = self.data.setdefault(name, {})
        fields[key] = str(int(fields.get(key, 0)) + amount)
        return int(fields[key])
    
    async def ping(self):
        self._check("ping")
        return True
    
    async def aclose(self):
        self.closed = True


@pytest.fixture
def logger():
    """Create test logger."""
    return setup_logging(level="DEBUG")


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def codec():
    return KeyCodec()


@pytest.fixture
def backend(logger):
    return MemoryLinkBackend(logger=logger)


@pytest.fixture
def store(backend, clock, logger) -> LinkStore:
    """Create store over the memory backend with a fake clock."""
    return LinkStore(backend=backend, clock=clock, logger=logger)


@pytest.fixture
def config():
    return Config(backend="memory", base_url="http://testserver", path_prefix="/s")


@pytest.fixture
def sample_urls():
    """Sample URLs for testing."""
    return [
        "https://example.org",
        "https://github.com/user/repo",
        "https://stackoverflow.com/questions/123456",
    ]
