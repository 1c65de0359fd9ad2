from __future__ import annotations

import asyncio
import functools
import logging
import time
from typing import Any, Awaitable, Callable, List, Mapping, Optional, TypeVar

from bs4 import BeautifulSoup

from ...core.errors import InputError, ScraperError
from ...core.result import returns_result
from . import extractors
from . import logging as program_logging
from .models import (
    Assignment,
    BibleReadingRange,
    Gems,
    LivingSection,
    ReadingAssignment,
    SongReference,
    StudySection,
    Talk,
    WeeklyProgram,
)
from .resolver import ReferenceResolver
from .selection import (
    DocumentSelection,
    Landmark,
    LandmarkRole,
    Selection,
    build_christian_living_selections,
    build_field_ministry_selection,
    build_program_groups,
    build_song_selections,
    build_treasures_selections,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _traced(section: str) -> Callable[[Callable[..., Awaitable[T]]], Callable[..., Awaitable[T]]]:
    """Log start, duration and failure of one section extraction."""

    def decorator(func: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
        @functools.wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> T:
            program_logging.log_extraction_started(section)
            start = time.perf_counter()
            try:
                value = await func(*args, **kwargs)
            except ScraperError as exc:
                program_logging.log_section_failed(section, exc.kind, exc.message)
                raise
            program_logging.log_section_extracted(section, round((time.perf_counter() - start) * 1000, 2))
            return value

        return wrapper

    return decorator


class ProgramScraper:
    """
    Public surface of the program extraction engine.

    Every ``extract_*`` method accepts raw ``html`` or an already parsed
    ``document``; section methods also accept a prebuilt ``selection``. They
    return ``Ok(value)`` or ``Err(error)`` and never raise ``ScraperError``.
    """

    def __init__(self, resolver: ReferenceResolver, landmarks: Optional[Mapping[LandmarkRole, Landmark]] = None):
        self.resolver = resolver
        self.landmarks = landmarks

    @property
    def base_url(self) -> str:
        return self.resolver.retriever.base_url

    def document_selection(
        self, *, html: Optional[str] = None, document: Optional[BeautifulSoup] = None
    ) -> DocumentSelection:
        if document is not None:
            return DocumentSelection(document, landmarks=self.landmarks)
        if html is not None:
            return DocumentSelection.from_html(html, landmarks=self.landmarks)
        message = "Either html or a parsed document must be provided"
        logger.error(message)
        raise InputError(message)

    def _selection_or(
        self,
        selection: Optional[Any],
        build: Callable[[DocumentSelection], Any],
        html: Optional[str],
        document: Optional[BeautifulSoup],
    ) -> Any:
        if selection is not None:
            return selection
        return build(self.document_selection(html=html, document=document))

    @returns_result
    @_traced("week_date_span")
    async def extract_week_date_span(
        self, *, html: Optional[str] = None, document: Optional[BeautifulSoup] = None
    ) -> str:
        return extractors.extract_week_date_span(self.document_selection(html=html, document=document))

    @returns_result
    @_traced("songs")
    async def extract_songs(
        self,
        *,
        html: Optional[str] = None,
        document: Optional[BeautifulSoup] = None,
        selection: Optional[Selection] = None,
    ) -> List[SongReference]:
        songs = self._selection_or(selection, lambda doc: build_song_selections(doc).songs, html, document)
        return await extractors.extract_songs(songs, self.resolver)

    @returns_result
    @_traced("weekly_bible_read")
    async def extract_weekly_bible_read(
        self, *, html: Optional[str] = None, document: Optional[BeautifulSoup] = None
    ) -> BibleReadingRange:
        return await extractors.extract_weekly_bible_read(
            self.document_selection(html=html, document=document), self.resolver
        )

    @returns_result
    @_traced("treasures_talk")
    async def extract_treasures_talk(
        self,
        *,
        html: Optional[str] = None,
        document: Optional[BeautifulSoup] = None,
        selection: Optional[Selection] = None,
    ) -> Talk:
        talk = self._selection_or(
            selection, lambda doc: build_treasures_selections(doc).treasures_talk, html, document
        )
        return await extractors.extract_treasures_talk(talk, self.resolver)

    @returns_result
    @_traced("spiritual_gems")
    async def extract_spiritual_gems(
        self,
        *,
        html: Optional[str] = None,
        document: Optional[BeautifulSoup] = None,
        selection: Optional[Selection] = None,
    ) -> Gems:
        gems = self._selection_or(
            selection, lambda doc: build_treasures_selections(doc).spiritual_gems, html, document
        )
        return await extractors.extract_spiritual_gems(gems, self.resolver)

    @returns_result
    @_traced("bible_reading")
    async def extract_bible_reading(
        self,
        *,
        html: Optional[str] = None,
        document: Optional[BeautifulSoup] = None,
        selection: Optional[Selection] = None,
    ) -> ReadingAssignment:
        reading = self._selection_or(
            selection, lambda doc: build_treasures_selections(doc).bible_reading, html, document
        )
        return await extractors.extract_bible_reading(reading, self.resolver)

    @returns_result
    @_traced("field_ministry")
    async def extract_field_ministry(
        self,
        *,
        html: Optional[str] = None,
        document: Optional[BeautifulSoup] = None,
        selection: Optional[Selection] = None,
    ) -> List[Assignment]:
        ministry = self._selection_or(selection, build_field_ministry_selection, html, document)
        return await extractors.extract_field_ministry(ministry, self.resolver)

    @returns_result
    @_traced("christian_living")
    async def extract_christian_living(
        self,
        *,
        html: Optional[str] = None,
        document: Optional[BeautifulSoup] = None,
        selection: Optional[Selection] = None,
    ) -> List[LivingSection]:
        living = self._selection_or(
            selection, lambda doc: build_christian_living_selections(doc).christian_living, html, document
        )
        return extractors.extract_christian_living(living)

    @returns_result
    @_traced("bible_study")
    async def extract_bible_study(
        self,
        *,
        html: Optional[str] = None,
        document: Optional[BeautifulSoup] = None,
        selection: Optional[Selection] = None,
    ) -> StudySection:
        study = self._selection_or(
            selection, lambda doc: build_christian_living_selections(doc).bible_study, html, document
        )
        return extractors.extract_bible_study(study, self.base_url)

    @returns_result
    @_traced("full_program")
    async def extract_full_program(
        self, *, html: Optional[str] = None, document: Optional[BeautifulSoup] = None
    ) -> WeeklyProgram:
        """
        Assemble the whole week.

        The page is partitioned once. Sections without lookups run inline;
        sections that resolve references run concurrently and the first
        failure aborts the assembly.
        """
        doc = self.document_selection(html=html, document=document)
        groups = build_program_groups(doc)

        week_date_span = extractors.extract_week_date_span(doc)
        christian_living = extractors.extract_christian_living(groups.christian_living)
        bible_study = extractors.extract_bible_study(groups.bible_study, self.base_url)

        songs, weekly_bible_read, treasures_talk, spiritual_gems, bible_reading, field_ministry = (
            await asyncio.gather(
                extractors.extract_songs(groups.songs.songs, self.resolver),
                extractors.extract_weekly_bible_read(doc, self.resolver),
                extractors.extract_treasures_talk(groups.treasures_talk, self.resolver),
                extractors.extract_spiritual_gems(groups.spiritual_gems, self.resolver),
                extractors.extract_bible_reading(groups.bible_reading, self.resolver),
                extractors.extract_field_ministry(groups.field_ministry, self.resolver),
            )
        )
        starting_song, middle_song, closing_song = songs

        return WeeklyProgram(
            week_date_span=week_date_span,
            starting_song=starting_song,
            middle_song=middle_song,
            closing_song=closing_song,
            weekly_bible_read=weekly_bible_read,
            treasures_talk=treasures_talk,
            spiritual_gems=spiritual_gems,
            bible_reading=bible_reading,
            field_ministry_items=field_ministry,
            christian_living_items=christian_living,
            bible_study=bible_study,
        )


__all__ = ["ProgramScraper"]
