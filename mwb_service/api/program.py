import logging

from fastapi import APIRouter, Depends

from ..core.dependencies import get_scraper, get_source_locator
from .responses import error_response, result_response

logger = logging.getLogger(__name__)
router = APIRouter(tags=["program"])


@router.get("/this-week-program")
async def this_week_program_handler(locator=Depends(get_source_locator), scraper=Depends(get_scraper)):
    """Fetch this week's meeting page and extract its full program."""
    html_result = await locator.fetch_this_week_meeting_html()
    if not html_result.ok:
        logger.error(f"Failed to fetch this week's meeting HTML: {html_result.message}")
        return error_response(html_result.message)
    logger.info(f"Fetched this week's meeting HTML: {len(html_result.value)} characters")
    return result_response(await scraper.extract_full_program(html=html_result.value))
