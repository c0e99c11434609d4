"""Pydantic schemas for API requests and responses."""

from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime, timezone


class ShortenRequest(BaseModel):
    """Request to shorten a URL."""
    
    url: str = Field(..., description="The URL to shorten", min_length=1)
    ttl: Optional[int] = Field(None, description="Seconds to live; takes precedence over expires")
    expires: Optional[datetime] = Field(None, description="Expiry date-time (RFC 3339)")
    
    model_config = {
        "json_schema_extra": {
            "examples": [
                {"url": "https://example.org"},
                {"url": "https://example.org/spring-sale", "ttl": 86400},
                {"url": "https://example.org/launch", "expires": "2030-01-01T00:00:00Z"},
            ]
        }
    }
    
    def ttl_seconds(self, now: Optional[datetime] = None) -> int:
        """Resolve the lifetime to hand to the store.
        
        ``ttl`` wins when both fields are set. A deadline already in the past
        and any negative ttl give 0, which the store treats as no expiry.
        """
        if self.ttl is not None:
            seconds = self.ttl
        elif self.expires is not None:
            now = now or datetime.now(timezone.utc)
            expires = self.expires
            if expires.tzinfo is None:
                expires = expires.replace(tzinfo=timezone.utc)
            seconds = int((expires - now).total_seconds())
        else:
            seconds = 0
        
        return max(seconds, 0)


class ShortenResponse(BaseModel):
    """Response after shortening a URL."""
    
    key: str = Field(..., description="The key of the new link")
    url: str = Field(..., description="The complete short URL")
    
    model_config = {
        "json_schema_extra": {
            "examples": [
                {"key": "Ag", "url": "https://short.link/s/Ag"}
            ]
        }
    }


class LinkInfoResponse(BaseModel):
    """Response with link information."""
    
    url: str
    ttl: int = Field(..., description="Remaining seconds to live, 0 means unlimited")
    click_count: int
    created: datetime


class HealthResponse(BaseModel):
    """Health check response."""
    
    status: str = Field(..., description="Overall status")
    backend: str = Field(..., description="Backend name")
    timestamp: datetime = Field(..., description="Check timestamp")


class ErrorResponse(BaseModel):
    """Error response."""
    
    detail: str = Field(..., description="Error message")
