"""Factory for creating link store backends."""

import logging
from enum import Enum
from typing import Optional

from .base import LinkBackendBase
from .memory import MemoryLinkBackend
from .postgres import PostgresLinkBackend
from .redis_store import RedisLinkBackend


class LinkBackendKind(Enum):
    """Available persistence backends"""
    MEMORY = "memory"
    REDIS = "redis"
    POSTGRES = "postgres"


def create_backend(config, logger: Optional[logging.Logger] = None) -> LinkBackendBase:
    """Create the backend named by ``config.backend``.
    
    Args:
        config: Configuration instance
        logger: Optional logger handed to the backend
        
    Returns:
        A new backend instance
        
    Raises:
        ValueError: If the backend name is unknown
    """
    try:
        kind = LinkBackendKind(config.backend.lower())
    except ValueError:
        raise ValueError(f"Unknown storage backend: {config.backend}") from None
    
    if kind == LinkBackendKind.REDIS:
        return RedisLinkBackend(
            redis_url=config.redis_url,
            prefix=config.redis_prefix,
            logger=logger,
        )
    
    if kind == LinkBackendKind.POSTGRES:
        return PostgresLinkBackend(
            db_config=config.postgres_url,
            pool_max_size=config.postgres_pool_max_size,
            create_tables=config.postgres_create_tables,
            logger=logger,
        )
    
    return MemoryLinkBackend(logger=logger)
