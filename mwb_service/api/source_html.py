import logging

from fastapi import APIRouter, Depends

from ..core.dependencies import get_source_locator
from .responses import result_response

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/source-html", tags=["source-html"])


@router.get("/landing-html")
async def landing_html_handler(locator=Depends(get_source_locator)):
    """Landing page HTML in the configured language."""
    return result_response(await locator.fetch_landing_html(), wrap="html")


@router.post("/meeting-html")
async def meeting_html_handler(locator=Depends(get_source_locator)):
    """HTML of this week's meeting page."""
    return result_response(await locator.fetch_this_week_meeting_html(), wrap="html")


@router.get("/watchtower-article-html")
async def watchtower_article_html_handler(locator=Depends(get_source_locator)):
    return result_response(await locator.fetch_this_week_watchtower_article_html(), wrap="html")
