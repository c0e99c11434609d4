"""Middleware for the link store web app."""

from .logging import LoggingMiddleware

__all__ = ["LoggingMiddleware"]
