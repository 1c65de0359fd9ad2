"""Locating and fetching the site pages the program is scraped from."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import List, Optional
from urllib.parse import urljoin, urlsplit

from bs4 import BeautifulSoup

from ..core import constants
from ..core.errors import StructuralError
from ..core.result import returns_result
from .retrievers import WolRetriever

logger = logging.getLogger(__name__)

WOL_HOST = "wol.jw.org"
_DIGITS = re.compile(r"^\d+$")


class SourcePageLocator:
    """Follows the site navigation from the landing page to this week's pages."""

    def __init__(self, retriever: WolRetriever, *, landing_language: str = "es"):
        self.retriever = retriever
        self.landing_language = landing_language

    def _url(self, href: str) -> str:
        return urljoin(f"{self.retriever.base_url}/", href)

    @staticmethod
    def _href(html: str, selector: str) -> str:
        element = BeautifulSoup(html, "html.parser").select_one(selector)
        href = element.get("href") if element is not None else None
        logger.debug(f"Value for href: [{href}]")
        if not href:
            logger.error(f"No href found for [{selector}]")
            raise StructuralError("No href found, website structure may have changed", selector=selector)
        return href

    @returns_result
    async def fetch_landing_html(self) -> str:
        """Landing page in the configured language, reached through its alternate link."""
        base_url = self.retriever.base_url
        logger.info(f"Fetching landing HTML from [{base_url}]")
        html = (await self.retriever.fetch_text(base_url)).unwrap()

        selector = constants.LANDING_LANGUAGE_LINK_CSS_SELECTOR.format(language=self.landing_language)
        landing_url = self._url(self._href(html, selector))
        logger.info(f"Fetching HTML content from [{landing_url}]")
        return (await self.retriever.fetch_text(landing_url)).unwrap()

    @returns_result
    async def fetch_this_week_meeting_html(self, base_html: Optional[str] = None) -> str:
        """This week's meeting page; the landing page is fetched when ``base_html`` is not given."""
        if not base_html:
            logger.debug("Base HTML missing, fetching landing HTML as default")
            base_html = (await self.fetch_landing_html()).unwrap()

        today_url = self._url(self._href(base_html, constants.TODAY_NAV_CSS_SELECTOR))
        logger.info(f"Fetching today's HTML content from [{today_url}]")
        return (await self.retriever.fetch_text(today_url)).unwrap()

    @returns_result
    async def extract_watchtower_article_url(self, meeting_html: Optional[str] = None) -> str:
        if not meeting_html:
            logger.debug("This week's HTML missing, fetching this week's HTML as default")
            meeting_html = (await self.fetch_this_week_meeting_html()).unwrap()
        return self._url(self._href(meeting_html, constants.WATCHTOWER_ITEM_CSS_SELECTOR))

    @returns_result
    async def fetch_this_week_watchtower_article_html(self, meeting_html: Optional[str] = None) -> str:
        """Inner HTML of this week's study article."""
        article_url = (await self.extract_watchtower_article_url(meeting_html)).unwrap()
        logger.info(f"Fetching weekly HTML content from [{article_url}]")
        html = (await self.retriever.fetch_text(article_url)).unwrap()

        article = BeautifulSoup(html, "html.parser").select_one(constants.ARTICLE_CSS_SELECTOR)
        if article is None:
            logger.error(f"No article found for [{constants.ARTICLE_CSS_SELECTOR}]")
            raise StructuralError("No article found, website structure may have changed")
        logger.info(f"Successfully fetched and extracted this week's watchtower article HTML from [{article_url}]")
        return article.decode_contents()


@dataclass(frozen=True, slots=True)
class ParsedUrl:
    host: str
    path_parts: List[str]


def parse_url(url: str) -> Optional[ParsedUrl]:
    """Host and ``/``-split path of an absolute URL, or None when it cannot be parsed."""
    try:
        parts = urlsplit(url)
    except ValueError as e:
        logger.error(f"Error parsing URL: [{url}] - {e}")
        return None
    if not parts.scheme or not parts.netloc:
        logger.error(f"Error parsing URL: [{url}] - not an absolute URL")
        return None
    return ParsedUrl(host=parts.netloc, path_parts=parts.path.split("/"))


def is_wol_jw_org(parsed_url: Optional[ParsedUrl]) -> bool:
    return parsed_url is not None and parsed_url.host == WOL_HOST


def is_valid_wol_bible_book_url(url: str) -> bool:
    """
    Whether ``url`` is a per-chapter study bible page.

    The expected shape is ``/<lang>/wol/b/<r>/lp-<x>/nwtsty/<book>/<chapter>``
    on the publication host.
    """
    parsed_url = parse_url(url)
    if parsed_url is None:
        logger.warning(f"Failed to parse URL: [{url}]")
        return False
    if not is_wol_jw_org(parsed_url):
        logger.debug(f"URL is not from {WOL_HOST}, skipping: [{url}]")
        return False

    parts = parsed_url.path_parts
    valid = (
        len(parts) == 9
        and parts[0] == ""
        and len(parts[1]) == 2
        and parts[-4].startswith("lp")
        and parts[-3] == constants.PUB_CODE_BIBLE.removeprefix("pub-")
        and bool(_DIGITS.match(parts[-2]))
        and bool(_DIGITS.match(parts[-1]))
    )
    if not valid:
        logger.warning(f"Invalid WOL Bible book URL structure: [{url}]")
        return False
    logger.info(f"URL is a valid WOL Bible book URL: [{url}]")
    return True
