"""
app/api/redirect.py

Purpose: Short link redirect

When a user opens a short link:
1. The click is counted (atomically, in the link store)
2. The browser is redirected to the sms: deep link
3. The device opens its SMS composer with recipient and body pre-filled
"""

from fastapi import APIRouter, Depends
from fastapi.responses import RedirectResponse

from app.api.deps import get_registry
from app.services.link_registry import LinkRegistry

router = APIRouter()


@router.get("/s/{short_id}")
async def redirect_short_link(
    short_id: str,
    registry: LinkRegistry = Depends(get_registry)
):
    deep_link = await registry.resolve(short_id)
    return RedirectResponse(url=deep_link, status_code=302)
