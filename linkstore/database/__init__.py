"""Persistence layer for the link store."""

from .base import LinkBackendBase
from .factory import LinkBackendKind, create_backend
from .memory import MemoryLinkBackend
from .models import LinkInfo, LinkRecord
from .postgres import PostgresLinkBackend
from .redis_store import RedisLinkBackend

__all__ = [
    "LinkBackendBase",
    "LinkBackendKind",
    "create_backend",
    "MemoryLinkBackend",
    "LinkInfo",
    "LinkRecord",
    "PostgresLinkBackend",
    "RedisLinkBackend",
]
