"""JSON API routes."""

from .routes import router as api_router, info_router

__all__ = ["api_router", "info_router"]
