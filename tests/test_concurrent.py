"""Tests that concurrent callers share one store correctly.

Many coroutines save and resolve links at the same time. Identifiers must
stay unique and contiguous and no click may be lost.
"""

import asyncio

import pytest
from httpx import ASGITransport, AsyncClient

from conftest import FakeRedis, InterleavingBackend
from linkstore.database.redis_store import RedisLinkBackend
from linkstore.store import LinkStore
from web_app import create_app


@pytest.fixture(params=["memory", "redis"])
def shared_store(request, clock, logger):
    """Store over a backend that yields between operations."""
    if request.param == "redis":
        backend = RedisLinkBackend(client=FakeRedis(), logger=logger)
    else:
        backend = InterleavingBackend(logger=logger)
    return LinkStore(backend=backend, clock=clock, logger=logger)


class TestConcurrentStore:
    """Prove the store handles many simultaneous callers."""
    
    async def test_concurrent_saves_get_unique_identifiers(self, shared_store, codec):
        concurrency = 50
        urls = [f"https://example.com/page_{i}" for i in range(concurrency)]
        
        keys = await asyncio.gather(*(shared_store.save(url) for url in urls))
        
        ids = [codec.decode(key) for key in keys]
        assert len(set(ids)) == concurrency
        assert set(ids) == set(range(1, concurrency + 1))
    
    async def test_concurrent_saves_continue_from_counter(self, shared_store, codec):
        for i in range(5):
            await shared_store.save(f"https://example.com/before_{i}")
        
        keys = await asyncio.gather(
            *(shared_store.save(f"https://example.com/after_{i}") for i in range(20))
        )
        
        assert {codec.decode(key) for key in keys} == set(range(6, 26))
    
    async def test_each_key_resolves_to_its_url(self, shared_store):
        urls = [f"https://example.com/page_{i}" for i in range(30)]
        keys = await asyncio.gather(*(shared_store.save(url) for url in urls))
        
        resolved = await asyncio.gather(*(shared_store.lookup(key) for key in keys))
        
        assert resolved == urls
    
    async def test_concurrent_lookups_count_every_click(self, shared_store):
        key = await shared_store.save("https://example.com/popular")
        concurrency = 100
        
        results = await asyncio.gather(*(shared_store.lookup(key) for _ in range(concurrency)))
        
        assert results == ["https://example.com/popular"] * concurrency
        assert (await shared_store.info(key)).clicked == concurrency
    
    async def test_mixed_lookups_and_info(self, shared_store):
        key = await shared_store.save("https://example.com/mixed")
        
        tasks = [shared_store.lookup(key) for _ in range(25)]
        tasks += [shared_store.info(key) for _ in range(25)]
        await asyncio.gather(*tasks)
        
        assert (await shared_store.info(key)).clicked == 25


class TestConcurrentRequests:
    """Prove the HTTP layer keeps the same guarantees."""
    
    @pytest.fixture
    async def client(self, shared_store, config):
        app = create_app(backend=shared_store.backend, store=shared_store, config=config)
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as ac:
            yield ac
    
    async def test_concurrent_shorten_requests(self, client):
        concurrency = 30
        urls = [f"https://example.com/page_{i}" for i in range(concurrency)]
        
        responses = await asyncio.gather(
            *(client.post("/api/shorten", json={"url": url}) for url in urls)
        )
        
        keys = []
        for i, r in enumerate(responses):
            assert r.status_code == 200, f"Request {i}: status {r.status_code} body={r.text}"
            keys.append(r.json()["key"])
        
        assert len(keys) == len(set(keys)), "All keys must be unique under concurrency"
    
    async def test_concurrent_redirect_requests(self, client):
        create = await client.post("/api/shorten", json={"url": "https://example.com/target"})
        key = create.json()["key"]
        
        responses = await asyncio.gather(
            *(client.get(f"/s/{key}", follow_redirects=False) for _ in range(20))
        )
        
        for i, r in enumerate(responses):
            assert r.status_code == 302, f"Request {i}: status {r.status_code}"
            assert r.headers.get("location") == "https://example.com/target"
        
        info = await client.get(f"/api/info/{key}")
        assert info.json()["click_count"] == 20
