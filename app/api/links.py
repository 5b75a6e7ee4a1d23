"""
app/api/links.py

Purpose: SMS link endpoints

- POST /api/sms/generate: create a short SMS deep link
- GET /api/sms/analytics/{short_id}: click analytics for a link
"""

from fastapi import APIRouter, Depends

from app.api.deps import get_base_url, get_registry
from app.core.logging import get_logger
from app.schemas.link import GenerateLinkRequest, GeneratedLink, LinkAnalytics
from app.schemas.response import ApiResponse
from app.services.link_registry import LinkRegistry

logger = get_logger(__name__)
router = APIRouter()


@router.post("/generate")
async def generate_sms_link(
    payload: GenerateLinkRequest,
    registry: LinkRegistry = Depends(get_registry),
    base_url: str = Depends(get_base_url)
):
    """
    Generates a new SMS deep link with a short URL.

    Returns:
        {"success": true, "data": {shortUrl, deepLink, shortId, recipient, message}}
    """
    record = await registry.create(payload.phone, payload.message, base_url)
    return ApiResponse(data=GeneratedLink.from_record(record).model_dump(by_alias=True)).model_dump()


@router.get("/analytics/{short_id}")
async def get_link_analytics(
    short_id: str,
    registry: LinkRegistry = Depends(get_registry)
):
    """
    Returns click analytics for a short link. Does not count as a click.
    """
    view = await registry.get_analytics(short_id)
    return ApiResponse(data=LinkAnalytics.from_view(view).model_dump(by_alias=True)).model_dump()
