"""Redirect route."""

from fastapi import APIRouter, Request, status
from fastapi.responses import RedirectResponse

from linkstore.errors import LinkStoreError
from ..api.routes import to_http_exception

router = APIRouter()


@router.get("/{key}", include_in_schema=False)
async def redirect_to_url(request: Request, key: str):
    """Redirect to the destination URL, counting the click."""
    store = request.app.state.store
    
    try:
        url = await store.lookup(key)
    except LinkStoreError as e:
        raise to_http_exception(e)
    
    # Temporary redirect so browsers come back and every click is counted
    return RedirectResponse(url=url, status_code=status.HTTP_302_FOUND)
