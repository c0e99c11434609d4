"""Abstract base class for link store persistence backends."""

from abc import ABC, abstractmethod
from typing import Optional

from .models import LinkRecord


class LinkBackendBase(ABC):
    """Abstract base class for link persistence.
    
    A backend owns the identifier counter and the records. Each primitive
    must be atomic at the backend; callers never lock around them. Failures
    of the underlying client are raised as BackendUnavailableError.
    """
    
    name = "base"
    
    @abstractmethod
    async def allocate_id(self) -> int:
        """Atomically increment the identifier counter.
        
        Returns:
            The new counter value. Values start at 1 and are never reused.
        """
        pass
    
    @abstractmethod
    async def write_record(self, record: LinkRecord) -> None:
        """Write all fields of a record in one atomic operation.
        
        Args:
            record: The record to persist, keyed by ``record.link_id``
        """
        pass
    
    @abstractmethod
    async def fetch_record(self, link_id: int) -> Optional[LinkRecord]:
        """Fetch a record by identifier.
        
        Args:
            link_id: The identifier to lookup
            
        Returns:
            The record if found, None otherwise
        """
        pass
    
    @abstractmethod
    async def increment_clicks(self, link_id: int) -> int:
        """Atomically add one to the click counter of a record.
        
        Args:
            link_id: The identifier to update
            
        Returns:
            The new click count
        """
        pass
    
    @abstractmethod
    async def health_check(self) -> bool:
        """Check if the backend is reachable.
        
        Returns:
            True if healthy, False otherwise
        """
        pass
    
    @abstractmethod
    async def close(self) -> None:
        """Close backend connections."""
        pass
