"""Tests for the Redis backend."""

import pytest

from conftest import T0, FakeRedis
from linkstore.database.models import LinkRecord
from linkstore.database.redis_store import RedisLinkBackend
from linkstore.errors import BackendUnavailableError, ExpiredError, InvalidKeyError
from linkstore.store import LinkStore


@pytest.fixture
def fake_redis():
    return FakeRedis()


@pytest.fixture
def redis_backend(fake_redis, logger):
    return RedisLinkBackend(client=fake_redis, logger=logger)


class TestRedisLinkBackend:
    """Test Redis key layout and primitives."""
    
    async def test_allocate_uses_counter_key(self, redis_backend, fake_redis):
        assert await redis_backend.allocate_id() == 1
        assert await redis_backend.allocate_id() == 2
        assert fake_redis.data["linkstore/meta:count"] == "2"
    
    async def test_write_and_fetch(self, redis_backend, fake_redis):
        record = LinkRecord(link_id=7, url="https://example.org", created_at=T0, expires_at=T0 + 60)
        
        await redis_backend.write_record(record)
        
        stored = fake_redis.data["linkstore/link:7"]
        assert stored["url"] == "https://example.org"
        assert float(stored["created"]) == T0
        assert float(stored["until"]) == T0 + 60
        assert stored["count"] == "0"
        
        assert await redis_backend.fetch_record(7) == record
    
    async def test_fetch_missing(self, redis_backend):
        assert await redis_backend.fetch_record(99) is None
    
    async def test_fractional_timestamps_survive(self, redis_backend):
        record = LinkRecord(link_id=1, url="https://example.org", created_at=T0 + 0.123456, expires_at=0)
        
        await redis_backend.write_record(record)
        
        assert (await redis_backend.fetch_record(1)).created_at == T0 + 0.123456
    
    async def test_increment_clicks(self, redis_backend):
        await redis_backend.write_record(LinkRecord(link_id=1, url="https://example.org", created_at=T0))
        
        assert await redis_backend.increment_clicks(1) == 1
        assert await redis_backend.increment_clicks(1) == 2
        assert (await redis_backend.fetch_record(1)).click_count == 2
    
    async def test_custom_prefix(self, fake_redis):
        backend = RedisLinkBackend(client=fake_redis, prefix="tenant-a/")
        
        await backend.allocate_id()
        
        assert "tenant-a/meta:count" in fake_redis.data
        assert backend.record_key(3) == "tenant-a/link:3"
    
    @pytest.mark.parametrize("command, call", [
        ("incr", lambda b: b.allocate_id()),
        ("hset", lambda b: b.write_record(LinkRecord(link_id=1, url="u", created_at=T0))),
        ("hgetall", lambda b: b.fetch_record(1)),
        ("hincrby", lambda b: b.increment_clicks(1)),
    ])
    async def test_errors_become_backend_unavailable(self, logger, command, call):
        backend = RedisLinkBackend(client=FakeRedis(failing={command}), logger=logger)
        
        with pytest.raises(BackendUnavailableError):
            await call(backend)
    
    async def test_health_check(self, redis_backend, logger):
        assert await redis_backend.health_check()
        
        down = RedisLinkBackend(client=FakeRedis(failing={"ping"}), logger=logger)
        assert not await down.health_check()
    
    async def test_close(self, redis_backend, fake_redis):
        await redis_backend.close()
        
        assert fake_redis.closed


class TestStoreOverRedis:
    """Test the store on top of the Redis backend."""
    
    async def test_scenario(self, redis_backend, clock):
        store = LinkStore(backend=redis_backend, clock=clock)
        
        key = await store.save("https://example.org", ttl=0)
        assert key == "Ag"
        assert await store.lookup(key) == "https://example.org"
        
        info = await store.info(key)
        assert info.url == "https://example.org"
        assert info.ttl == 0
        assert info.clicked == 1
    
    async def test_expiry(self, redis_backend, clock):
        store = LinkStore(backend=redis_backend, clock=clock)
        key = await store.save("https://example.org", ttl=1)
        
        clock.advance(2)
        
        with pytest.raises(ExpiredError):
            await store.lookup(key)
    
    async def test_metadata_keys_cannot_be_probed(self, redis_backend, fake_redis, clock):
        store = LinkStore(backend=redis_backend, clock=clock)
        await store.save("https://example.org")
        
        for key in ("meta:count", "../meta:count", "linkstore/meta:count"):
            with pytest.raises(InvalidKeyError):
                await store.info(key)
    
    async def test_failed_write_leaves_no_record(self, logger, clock):
        fake = FakeRedis(failing={"hset"})
        store = LinkStore(backend=RedisLinkBackend(client=fake, logger=logger), clock=clock)
        
        with pytest.raises(BackendUnavailableError):
            await store.save("https://example.org")
        
        assert fake.data["linkstore/meta:count"] == "1"
        assert "linkstore/link:1" not in fake.data
