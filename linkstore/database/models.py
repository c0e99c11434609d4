"""Data models for the link store."""

from dataclasses import dataclass
from datetime import datetime, timezone


@dataclass
class LinkRecord:
    """Represents a persisted short link."""
    
    link_id: int
    url: str
    created_at: float
    expires_at: float = 0
    click_count: int = 0
    
    def is_live(self, now: float) -> bool:
        """Check whether the link can still be followed at ``now``.
        
        Args:
            now: Current Unix timestamp
            
        Returns:
            True if the record never expires or expires after ``now``
        """
        return self.expires_at == 0 or self.expires_at > now


@dataclass
class LinkInfo:
    """Snapshot of a live link as reported by the info operation."""
    
    url: str
    ttl: int
    clicked: int
    created: datetime
    
    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "url": self.url,
            "ttl": self.ttl,
            "click_count": self.clicked,
            "created": self.created.isoformat(),
        }
    
    @classmethod
    def from_record(cls, record: LinkRecord, ttl: int) -> "LinkInfo":
        """Create from a stored record and its remaining lifetime."""
        return cls(
            url=record.url,
            ttl=ttl,
            clicked=record.click_count,
            created=datetime.fromtimestamp(record.created_at, tz=timezone.utc),
        )
