#!/usr/bin/env python3
"""
Main entry point for the link store service.

Usage:
    python app.py

Environment variables:
    BACKEND - 'memory', 'redis' or 'postgres'
    REDIS_URL - Redis connection URL (redis backend)
    POSTGRES_URL - PostgreSQL connection URL (postgres backend)
    BASE_URL - Base URL for short links
    PATH_PREFIX - Path prefix of the redirect route
    ENABLE_INFO - Expose /api/info/{key}
    PORT - Port to listen on
    WORKERS - Number of uvicorn worker processes (default 1)
    LOG_LEVEL - Logging level
"""

import signal
import sys
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from config import load_config
from linkstore.database.factory import create_backend
from linkstore.store import LinkStore
from linkstore.common.logging_config import setup_logging
from web_app import create_app


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create the backend and store on startup, close them on shutdown."""
    config = app.state.config
    logger = app.state.logger
    
    logger.info(f"Starting link store service with the {config.backend} backend...")
    
    backend = create_backend(config, logger=logger)
    store = LinkStore(
        backend=backend,
        max_url_length=config.max_url_length,
        operation_timeout=config.operation_timeout_seconds,
        logger=logger,
    )
    
    if not await store.health_check():
        logger.warning(f"Backend '{backend.name}' is not reachable yet")
    
    app.state.backend = backend
    app.state.store = store
    
    logger.info("Service started successfully")
    
    yield
    
    logger.info("Shutting down link store service...")
    await store.close()
    logger.info("Service stopped")


def main():
    """Main entry point."""
    config = load_config()
    
    logger = setup_logging(
        level=config.log_level,
        log_file=config.log_file,
        json_format=config.log_json,
    )
    
    logger.info(f"Configuration: {config.loggable_dump()}")
    
    app = create_app(backend=None, store=None, config=config)
    app.state.logger = logger
    app.router.lifespan_context = lifespan
    
    uvicorn_config = uvicorn.Config(
        app,
        host=config.host,
        port=config.port,
        workers=config.workers,
        log_level=config.log_level.lower(),
        access_log=True,
    )
    
    server = uvicorn.Server(uvicorn_config)
    
    def handle_signal(signum, frame):
        logger.info(f"Received signal {signum}, initiating graceful shutdown...")
        server.should_exit = True
    
    signal.signal(signal.SIGINT, handle_signal)
    signal.signal(signal.SIGTERM, handle_signal)
    
    try:
        logger.info(f"Starting server on {config.host}:{config.port}")
        server.run()
    except Exception as e:
        logger.error(f"Server error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
