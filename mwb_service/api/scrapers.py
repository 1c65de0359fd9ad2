import logging
from typing import Optional

from fastapi import APIRouter, Depends

from ..core.dependencies import get_scraper
from .models import HtmlPayload
from .responses import missing_html_response, result_response

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/scrapers", tags=["scrapers"])


@router.post("/week-program")
async def week_program_handler(payload: Optional[HtmlPayload] = None, scraper=Depends(get_scraper)):
    """Extract the whole weekly program from the posted page."""
    missing = missing_html_response(payload)
    if missing is not None:
        return missing
    logger.info(f"Extracting full week program from {len(payload.html)} characters of HTML")
    return result_response(await scraper.extract_full_program(html=payload.html))


@router.post("/week-date-span")
async def week_date_span_handler(payload: Optional[HtmlPayload] = None, scraper=Depends(get_scraper)):
    missing = missing_html_response(payload)
    if missing is not None:
        return missing
    return result_response(await scraper.extract_week_date_span(html=payload.html), wrap="weekDateSpan")


@router.post("/songs")
async def songs_handler(payload: Optional[HtmlPayload] = None, scraper=Depends(get_scraper)):
    missing = missing_html_response(payload)
    if missing is not None:
        return missing
    return result_response(await scraper.extract_songs(html=payload.html))


@router.post("/weekly-bible-read")
async def weekly_bible_read_handler(payload: Optional[HtmlPayload] = None, scraper=Depends(get_scraper)):
    missing = missing_html_response(payload)
    if missing is not None:
        return missing
    return result_response(await scraper.extract_weekly_bible_read(html=payload.html))


@router.post("/treasures-talk")
async def treasures_talk_handler(payload: Optional[HtmlPayload] = None, scraper=Depends(get_scraper)):
    missing = missing_html_response(payload)
    if missing is not None:
        return missing
    return result_response(await scraper.extract_treasures_talk(html=payload.html))


@router.post("/spiritual-gems")
async def spiritual_gems_handler(payload: Optional[HtmlPayload] = None, scraper=Depends(get_scraper)):
    missing = missing_html_response(payload)
    if missing is not None:
        return missing
    return result_response(await scraper.extract_spiritual_gems(html=payload.html))


@router.post("/bible-reading")
@router.post("/bible-read-details", include_in_schema=False)
async def bible_reading_handler(payload: Optional[HtmlPayload] = None, scraper=Depends(get_scraper)):
    missing = missing_html_response(payload)
    if missing is not None:
        return missing
    return result_response(await scraper.extract_bible_reading(html=payload.html))


@router.post("/field-ministry")
async def field_ministry_handler(payload: Optional[HtmlPayload] = None, scraper=Depends(get_scraper)):
    missing = missing_html_response(payload)
    if missing is not None:
        return missing
    return result_response(await scraper.extract_field_ministry(html=payload.html))


@router.post("/christian-living")
async def christian_living_handler(payload: Optional[HtmlPayload] = None, scraper=Depends(get_scraper)):
    missing = missing_html_response(payload)
    if missing is not None:
        return missing
    return result_response(await scraper.extract_christian_living(html=payload.html))


@router.post("/bible-study")
async def bible_study_handler(payload: Optional[HtmlPayload] = None, scraper=Depends(get_scraper)):
    missing = missing_html_response(payload)
    if missing is not None:
        return missing
    return result_response(await scraper.extract_bible_study(html=payload.html))
