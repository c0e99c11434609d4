"""FastAPI application factory."""

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .api import api_router, info_router
from .web import web_router
from .middleware.logging import LoggingMiddleware


def _redirect_prefix(path_prefix: str) -> str:
    prefix = (path_prefix or "").strip().strip("/")
    return "/" + prefix if prefix else ""


async def _bad_request(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": "Bad Data", "errors": jsonable_encoder(exc.errors())},
    )


def create_app(backend, store, config) -> FastAPI:
    """Create and configure FastAPI application.
    
    Args:
        backend: Persistence backend instance (may be set later in app.state)
        store: LinkStore instance (may be set later in app.state)
        config: Configuration instance
        
    Returns:
        Configured FastAPI app
    """
    app = FastAPI(
        title="linkstore",
        description="Short link service with expiring links and click counting",
        version="1.0.0",
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )
    
    app.state.backend = backend
    app.state.store = store
    app.state.config = config
    
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(LoggingMiddleware)
    
    app.add_exception_handler(RequestValidationError, _bad_request)
    
    app.include_router(api_router, prefix="/api", tags=["API"])
    if config.enable_info:
        app.include_router(info_router, prefix="/api", tags=["API"])
    app.include_router(web_router, prefix=_redirect_prefix(config.path_prefix), tags=["Redirect"])
    
    return app
