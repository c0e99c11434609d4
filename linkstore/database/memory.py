"""In-process backend for tests and local development."""

import logging
from dataclasses import replace
from typing import Dict, Optional

from ..errors import NotFoundError
from .base import LinkBackendBase
from .models import LinkRecord


class MemoryLinkBackend(LinkBackendBase):
    """Dictionary backed link storage.
    
    None of the primitives awaits between reading and writing state, so each
    one runs to completion on the event loop without interleaving. Nothing
    survives the process.
    """
    
    name = "memory"
    
    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(__name__)
        self._counter = 0
        self._records: Dict[int, LinkRecord] = {}
    
    async def allocate_id(self) -> int:
        self._counter += 1
        return self._counter
    
    async def write_record(self, record: LinkRecord) -> None:
        self._records[record.link_id] = replace(record)
    
    async def fetch_record(self, link_id: int) -> Optional[LinkRecord]:
        record = self._records.get(link_id)
        # Hand out a copy so callers cannot mutate stored state
        return replace(record) if record else None
    
    async def increment_clicks(self, link_id: int) -> int:
        record = self._records.get(link_id)
        if record is None:
            raise NotFoundError(f"No record for identifier {link_id}")
        record.click_count += 1
        return record.click_count
    
    async def health_check(self) -> bool:
        return True
    
    async def close(self) -> None:
        self.logger.debug(f"Memory backend closed with {len(self._records)} records")
