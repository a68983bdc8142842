from fastapi import APIRouter, Depends

from app.api.deps import get_content_cache, verify_webhook_secret
from app.core.exceptions import NotFoundError
from app.schemas.auth import ErrorResponse
from app.schemas.content import ContentChangeEvent, ContentItem, ContentResponse
from app.schemas.notification import SuccessResponse
from app.services.content_cache import SiteContentCache

router = APIRouter(tags=["Site Content"])


@router.get("", response_model=ContentResponse)
async def list_content(cache: SiteContentCache = Depends(get_content_cache)):
    """Every editable site string, keyed by content_key."""
    return ContentResponse(content=await cache.get_all())


@router.get(
    "/{content_key}",
    response_model=ContentItem,
    responses={404: {"model": ErrorResponse, "description": "Unknown key"}},
)
async def get_content(
    content_key: str,
    cache: SiteContentCache = Depends(get_content_cache),
):
    value = await cache.get(content_key)
    if value is None:
        raise NotFoundError("Content not found")
    return ContentItem(content_key=content_key, content_value=value)


@router.post(
    "/changes",
    response_model=SuccessResponse,
    dependencies=[Depends(verify_webhook_secret)],
)
async def content_changed(
    event: ContentChangeEvent,
    cache: SiteContentCache = Depends(get_content_cache),
):
    """
    Changefeed webhook for the site_content table.

    Called by the database on every row insert, update and delete.
    """
    cache.apply_change(event)
    return SuccessResponse()
