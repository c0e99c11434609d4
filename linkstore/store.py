"""Short link store: identifier allocation, expiry and click counting."""

import asyncio
import logging
import math
import time
from datetime import timedelta
from typing import Awaitable, Callable, Optional, TypeVar, Union

from .common.validators import DEFAULT_MAX_URL_LENGTH, is_valid_url
from .database.base import LinkBackendBase
from .database.models import LinkInfo, LinkRecord
from .errors import BackendUnavailableError, ExpiredError, NotFoundError, ValidationError
from .keycodec import KeyCodec


T = TypeVar("T")

TTL = Union[int, float, timedelta]


def ttl_to_seconds(ttl: Optional[TTL]) -> float:
    """Normalize a ttl to seconds; anything non-positive means no expiry."""
    if ttl is None:
        return 0
    if isinstance(ttl, timedelta):
        seconds = ttl.total_seconds()
    elif isinstance(ttl, (int, float)) and not isinstance(ttl, bool):
        try:
            seconds = float(ttl)
        except OverflowError:
            raise ValidationError("TTL is too large to represent in seconds")
    else:
        raise ValidationError(f"TTL must be a number of seconds or a timedelta, got {ttl!r}")
    if not math.isfinite(seconds):
        raise ValidationError(f"TTL must be finite, got {ttl!r}")
    return seconds if seconds > 0 else 0


class LinkStore:
    """Saves URLs under short keys and resolves them back.
    
    The store keeps no state of its own: the identifier counter and the
    records belong to the backend, and every mutation is a single atomic
    backend primitive. Many coroutines may share one store.
    """
    
    def __init__(
        self,
        backend: LinkBackendBase,
        codec: Optional[KeyCodec] = None,
        max_url_length: int = DEFAULT_MAX_URL_LENGTH,
        operation_timeout: Optional[float] = None,
        logger: Optional[logging.Logger] = None,
        clock: Callable[[], float] = time.time,
    ):
        """Initialize link store.
        
        Args:
            backend: Persistence backend
            codec: Optional key codec
            max_url_length: Maximum URL length in bytes
            operation_timeout: Default deadline in seconds for each operation
            logger: Optional logger
            clock: Source of the current Unix time
        """
        self.backend = backend
        self.codec = codec or KeyCodec()
        self.max_url_length = max_url_length
        self.operation_timeout = operation_timeout
        self.logger = logger or logging.getLogger(__name__)
        self.clock = clock
    
    async def save(self, url: str, ttl: Optional[TTL] = 0, timeout: Optional[float] = None) -> str:
        """Save a URL and return its key.
        
        Args:
            url: Destination URL
            ttl: Lifetime in seconds or as a timedelta; zero or negative
                means the link never expires
            timeout: Optional deadline in seconds, overriding the default
            
        Returns:
            The key of the new link
            
        Raises:
            ValidationError: If the URL is empty or too long. No identifier
                is allocated in that case.
            BackendUnavailableError: If the backend fails or the deadline
                passes. An identifier may have been consumed, but no record
                is visible.
        """
        is_valid, error = is_valid_url(url, self.max_url_length)
        if not is_valid:
            raise ValidationError(f"Invalid URL: {error}")
        
        ttl_seconds = ttl_to_seconds(ttl)
        return await self._run(self._save(url, ttl_seconds), timeout, "save")
    
    async def lookup(self, key: str, timeout: Optional[float] = None) -> str:
        """Resolve a key for a redirect and count the click.
        
        A failed click increment fails the whole lookup with
        BackendUnavailableError; the URL is only returned once the click is
        recorded.
        
        Args:
            key: Key returned by save
            timeout: Optional deadline in seconds, overriding the default
            
        Returns:
            Destination URL
            
        Raises:
            InvalidKeyError: If the key is malformed (no backend call is made)
            NotFoundError: If no record exists
            ExpiredError: If the record is past its expiry
            BackendUnavailableError: If the backend fails or the deadline passes
        """
        link_id = self.codec.decode(key)
        return await self._run(self._lookup(key, link_id), timeout, "lookup")
    
    async def info(self, key: str, timeout: Optional[float] = None) -> LinkInfo:
        """Describe a live link without counting a click.
        
        Raises the same errors as lookup; expired links are not described.
        """
        link_id = self.codec.decode(key)
        return await self._run(self._info(key, link_id), timeout, "info")
    
    async def health_check(self) -> bool:
        """Check backend health."""
        return await self.backend.health_check()
    
    async def close(self) -> None:
        """Close backend connections."""
        await self.backend.close()
    
    async def _save(self, url: str, ttl_seconds: float) -> str:
        link_id = await self.backend.allocate_id()
        
        now = self.clock()
        record = LinkRecord(
            link_id=link_id,
            url=url,
            created_at=now,
            expires_at=now + ttl_seconds if ttl_seconds > 0 else 0,
        )
        
        try:
            await self.backend.write_record(record)
        except BackendUnavailableError:
            self.logger.error(f"Identifier {link_id} consumed without a record")
            raise
        
        key = self.codec.encode(link_id)
        self.logger.info(f"Saved link {key} (id={link_id}, ttl={ttl_seconds:g}s) -> {url}")
        return key
    
    async def _lookup(self, key: str, link_id: int) -> str:
        record = await self._fetch_live(key, link_id)
        
        try:
            clicks = await self.backend.increment_clicks(link_id)
        except BackendUnavailableError:
            self.logger.error(f"Click count for {key} could not be incremented, lookup failed")
            raise
        
        self.logger.debug(f"Resolved {key} -> {record.url} (clicks={clicks})")
        return record.url
    
    async def _info(self, key: str, link_id: int) -> LinkInfo:
        record = await self._fetch_live(key, link_id)
        
        if record.expires_at == 0:
            ttl = 0
        else:
            # Round up so a live link never reports 0, which means unlimited
            ttl = max(1, math.ceil(record.expires_at - self.clock()))
        
        return LinkInfo.from_record(record, ttl)
    
    async def _fetch_live(self, key: str, link_id: int) -> LinkRecord:
        record = await self.backend.fetch_record(link_id)
        
        if record is None:
            self.logger.debug(f"Key not found: {key}")
            raise NotFoundError(f"Key '{key}' not found")
        
        if not record.is_live(self.clock()):
            self.logger.debug(f"Key expired: {key}")
            raise ExpiredError(f"Key '{key}' has expired")
        
        return record
    
    async def _run(self, operation: Awaitable[T], timeout: Optional[float], name: str) -> T:
        if timeout is None:
            timeout = self.operation_timeout
        if timeout is None:
            return await operation
        
        try:
            return await asyncio.wait_for(operation, timeout)
        except asyncio.TimeoutError as e:
            self.logger.error(f"{name} did not finish within {timeout}s")
            raise BackendUnavailableError(f"{name} timed out after {timeout}s") from e
