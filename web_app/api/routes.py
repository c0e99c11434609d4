"""API routes implementation."""

from fastapi import APIRouter, Request, HTTPException, status
from datetime import datetime, timezone

from .schemas import (
    ShortenRequest,
    ShortenResponse,
    LinkInfoResponse,
    HealthResponse,
    ErrorResponse,
)
from linkstore.errors import (
    BackendUnavailableError,
    ExpiredError,
    InvalidKeyError,
    LinkStoreError,
    NotFoundError,
    ValidationError,
)
from linkstore.common.url_builder import build_base_url, build_short_url

router = APIRouter()

# Mounted only when config.enable_info is set
info_router = APIRouter()


def to_http_exception(error: LinkStoreError) -> HTTPException:
    """Map a store error onto the HTTP status the client should see."""
    if isinstance(error, ValidationError):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(error))
    if isinstance(error, (InvalidKeyError, NotFoundError, ExpiredError)):
        # Malformed, missing and expired keys look the same from outside
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Wrong Path")
    if isinstance(error, BackendUnavailableError):
        return HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Storage backend unavailable",
        )
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(error))


@router.post(
    "/shorten",
    response_model=ShortenResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid request"},
        503: {"model": ErrorResponse, "description": "Storage backend unavailable"},
    },
    summary="Create short URL",
    description="Save a URL, optionally with a ttl in seconds or an expiry date-time.",
)
async def shorten_url(request: Request, body: ShortenRequest):
    """Create a shortened URL."""
    store = request.app.state.store
    config = request.app.state.config
    
    try:
        key = await store.save(body.url, body.ttl_seconds())
    except LinkStoreError as e:
        raise to_http_exception(e)
    
    base_url = build_base_url(
        headers=dict(request.headers),
        fallback_base_url=config.base_url,
        request_scheme=request.url.scheme,
        request_host=request.headers.get("host"),
    )
    
    return ShortenResponse(
        key=key,
        url=build_short_url(key=key, base_url=base_url, path_prefix=config.path_prefix),
    )


@info_router.get(
    "/info/{key}",
    response_model=LinkInfoResponse,
    responses={
        404: {"model": ErrorResponse, "description": "Key not found or expired"},
        503: {"model": ErrorResponse, "description": "Storage backend unavailable"},
    },
    summary="Get link information",
    description="Destination, remaining ttl, click count and creation time of a live link.",
)
async def get_link_info(request: Request, key: str):
    """Get information about a short link."""
    store = request.app.state.store
    
    try:
        info = await store.info(key)
    except LinkStoreError as e:
        raise to_http_exception(e)
    
    return LinkInfoResponse(
        url=info.url,
        ttl=info.ttl,
        click_count=info.clicked,
        created=info.created,
    )


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
    description="Check if the storage backend is reachable.",
)
async def health_check(request: Request):
    """Health check endpoint for load balancers and monitoring."""
    store = request.app.state.store
    
    healthy = await store.health_check()
    
    return HealthResponse(
        status="healthy" if healthy else "unhealthy",
        backend=store.backend.name,
        timestamp=datetime.now(timezone.utc),
    )
