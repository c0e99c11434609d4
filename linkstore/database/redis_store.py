"""Redis implementation of the link store backend."""

import logging
from typing import Optional

import redis.asyncio as redis
from redis.exceptions import RedisError

from ..errors import BackendUnavailableError
from .base import LinkBackendBase
from .models import LinkRecord


# Hash field names of a link record
FIELD_URL = "url"
FIELD_CREATED = "created"
FIELD_UNTIL = "until"
FIELD_COUNT = "count"


class RedisLinkBackend(LinkBackendBase):
    """Link storage in Redis.
    
    Layout (with the default prefix):
    
        linkstore/meta:count     string counter, INCR allocates identifiers
        linkstore/link:<id>      hash with url, created, until, count
    
    Every primitive is a single Redis command and therefore atomic.
    """
    
    name = "redis"
    
    def __init__(
        self,
        redis_url: str = "redis://localhost:6379/0",
        prefix: str = "linkstore/",
        logger: Optional[logging.Logger] = None,
        client: Optional[redis.Redis] = None,
    ):
        """Initialize Redis backend.
        
        Args:
            redis_url: Redis connection URL (e.g., redis://localhost:6379/0)
            prefix: Namespace prepended to every key
            logger: Optional logger instance
            client: Optional ready client, used instead of redis_url
        """
        self.redis_url = redis_url
        self.prefix = prefix
        self.logger = logger or logging.getLogger(__name__)
        self.client = client if client is not None else redis.from_url(
            redis_url,
            encoding="utf-8",
            decode_responses=True,
        )
    
    @property
    def counter_key(self) -> str:
        return f"{self.prefix}meta:count"
    
    def record_key(self, link_id: int) -> str:
        return f"{self.prefix}link:{link_id}"
    
    async def allocate_id(self) -> int:
        try:
            return int(await self.client.incr(self.counter_key))
        except (RedisError, OSError) as e:
            self.logger.error(f"Redis INCR failed: {e}")
            raise BackendUnavailableError(f"Cannot allocate identifier: {e}") from e
    
    async def write_record(self, record: LinkRecord) -> None:
        mapping = {
            FIELD_URL: record.url,
            FIELD_CREATED: repr(float(record.created_at)),
            FIELD_UNTIL: repr(float(record.expires_at)),
            FIELD_COUNT: str(record.click_count),
        }
        try:
            await self.client.hset(self.record_key(record.link_id), mapping=mapping)
        except (RedisError, OSError) as e:
            self.logger.error(f"Redis HSET failed for {record.link_id}: {e}")
            raise BackendUnavailableError(f"Cannot write record: {e}") from e
    
    async def fetch_record(self, link_id: int) -> Optional[LinkRecord]:
        try:
            fields = await self.client.hgetall(self.record_key(link_id))
        except (RedisError, OSError) as e:
            self.logger.error(f"Redis HGETALL failed for {link_id}: {e}")
            raise BackendUnavailableError(f"Cannot fetch record: {e}") from e
        
        if not fields:
            return None
        
        return LinkRecord(
            link_id=link_id,
            url=fields[FIELD_URL],
            created_at=float(fields.get(FIELD_CREATED, 0)),
            expires_at=float(fields.get(FIELD_UNTIL, 0)),
            click_count=int(fields.get(FIELD_COUNT, 0)),
        )
    
    async def increment_clicks(self, link_id: int) -> int:
        try:
            return int(await self.client.hincrby(self.record_key(link_id), FIELD_COUNT, 1))
        except (RedisError, OSError) as e:
            self.logger.error(f"Redis HINCRBY failed for {link_id}: {e}")
            raise BackendUnavailableError(f"Cannot increment clicks: {e}") from e
    
    async def health_check(self) -> bool:
        try:
            await self.client.ping()
            return True
        except (RedisError, OSError) as e:
            self.logger.error(f"Health check failed: {e}")
            return False
    
    async def close(self) -> None:
        """Close Redis connection."""
        await self.client.aclose()
        self.logger.info("Redis connection closed")
