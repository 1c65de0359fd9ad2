"""Section extractors for the weekly program page.

Each extractor takes the selection produced by ``selection.py`` and returns a
value record from ``models.py``. Extractors raise ``ScraperError`` subclasses;
``ProgramScraper`` turns those into ``Result`` values at the public boundary.
"""

from __future__ import annotations

import asyncio
import logging
import re
from typing import Any, Dict, List, Optional, Sequence
from urllib.parse import urljoin

from bs4 import Tag

from ...core import constants
from ..html_retriever import is_valid_wol_bible_book_url
from . import logging as program_logging
from .models import (
    AnswerSource,
    Assignment,
    BibleReadingRange,
    Gems,
    LivingSection,
    PrintedQuestion,
    ReadingAssignment,
    SongReference,
    StudyPoint,
    StudySection,
    Talk,
    TalkPoint,
)
from .primitives import (
    FootnoteWeaver,
    HeadingGroup,
    expect_count,
    first_text_after,
    format_error,
    group_by_heading,
    is_student_task,
    is_time_box_line,
    section_number_from,
    select_within,
    selection_text,
    strip_headline_number,
    structural_error,
    text_between_parentheses,
    time_box_from,
)
from .reference_parsers import PublicationKind, detect_publication_kind, parse_songbook_entry
from .resolver import ReferenceResolver, resolve_text
from .selection import DocumentSelection, Selection
from .text import clean_text

logger = logging.getLogger(__name__)

SONG_NUMBER_PATTERN = re.compile(r"\d+")
CHAPTER_CAPTION_PATTERN = re.compile(r"\d+:")


def extract_week_date_span(doc: DocumentSelection) -> str:
    elements = doc.select(constants.WEEK_DATE_SPAN_CSS_SELECTOR)
    if not elements:
        raise structural_error(f"No selection found for selector [{constants.WEEK_DATE_SPAN_CSS_SELECTOR}]")
    return clean_text(selection_text(elements)).lower()


# --- songs -----------------------------------------------------------------


def _song_anchor(song: Tag) -> Tag:
    anchor = song.find("a")
    if anchor is None:
        raise structural_error(f"Song heading [{clean_text(song.get_text())}] has no anchor")
    return anchor


async def _song_reference(anchor: Tag, resolver: ReferenceResolver) -> SongReference:
    label = clean_text(anchor.get_text())
    match = SONG_NUMBER_PATTERN.search(label)
    if not match:
        raise format_error(f"Song number not found in [{label}]")

    item = (await resolver.fetch_item(anchor)).unwrap()
    kind = detect_publication_kind(item["articleClasses"])
    if kind is not PublicationKind.SONG:
        logger.debug(f"Song [{label}] resolved to a {kind.value} publication")
    entry = parse_songbook_entry(item["content"])
    return SongReference(
        song_number=int(match.group(0)),
        title=entry.title,
        theme_scripture=entry.theme_scripture,
        lyrics=entry.lyrics,
        closing_reference=entry.closing_reference,
    )


async def extract_songs(songs: Sequence[Tag], resolver: ReferenceResolver) -> List[SongReference]:
    """Resolve the three song headings, in page order."""
    expect_count(songs, 3, "songs")
    anchors = [_song_anchor(song) for song in songs]
    return list(await asyncio.gather(*(_song_reference(anchor, resolver) for anchor in anchors)))


# --- weekly bible read -----------------------------------------------------


def _int_field(item: Dict[str, Any], key: str) -> int:
    value = item.get(key)
    if isinstance(value, bool) or not isinstance(value, (int, str)) or not str(value).isdigit():
        raise format_error(f"Reference item field [{key}] is not a number: {value!r}")
    return int(value)


def _str_field(item: Dict[str, Any], key: str) -> str:
    value = item.get(key)
    if not isinstance(value, str) or not clean_text(value):
        raise format_error(f"Reference item field [{key}] is missing or empty: {value!r}")
    return value


def _book_name(caption: str) -> str:
    text = clean_text(caption)
    match = CHAPTER_CAPTION_PATTERN.search(text)
    return clean_text(text[: match.start()]) if match else text


async def extract_weekly_bible_read(doc: DocumentSelection, resolver: ReferenceResolver) -> BibleReadingRange:
    """
    Resolve the weekly reading anchors and summarize their chapter range.

    Anchors are resolved one after another. Every one of them must point at
    the study bible; the book comes from the first one, and the range covers
    the smallest first chapter to the largest last chapter seen.
    """
    anchors = doc.select(constants.WEEKLY_BIBLE_READ_ANCHORS_CSS_SELECTOR)
    if not anchors:
        raise structural_error(
            f"No selection found for selector [{constants.WEEKLY_BIBLE_READ_ANCHORS_CSS_SELECTOR}]"
        )

    first_item: Dict[str, Any] = {}
    first_anchor: Optional[Tag] = None
    first_chapter = last_chapter = 0
    for anchor in anchors:
        item = (await resolver.fetch_item(anchor)).unwrap()
        if detect_publication_kind(item["articleClasses"]) is not PublicationKind.SCRIPTURE:
            raise structural_error(
                f"Unexpected anchor reference data extracted from anchor [{clean_text(anchor.get_text())}]"
            )
        item_first, item_last = _int_field(item, "first_chapter"), _int_field(item, "last_chapter")
        if not first_item:
            first_item, first_anchor = item, anchor
            first_chapter, last_chapter = item_first, item_last
        else:
            first_chapter = min(first_chapter, item_first)
            last_chapter = max(last_chapter, item_last)

    program_logging.log_chapter_bounds(first_chapter, last_chapter)
    language_prefix = resolver.anchor_reference(first_anchor).language_prefix
    chapter_url = _str_field(first_item, "url")
    if "/" not in chapter_url:
        raise format_error(f"Reference item url [{chapter_url}] has no path segments")
    url_parts = chapter_url.split("/")
    links = []
    for chapter in range(first_chapter, last_chapter + 1):
        link = resolver.retriever.absolute("/".join([*url_parts[:-1], str(chapter)]), language_prefix)
        if not is_valid_wol_bible_book_url(link):
            raise format_error(f"Synthesized chapter link [{link}] is not a bible book URL")
        links.append(link)

    return BibleReadingRange(
        book_name=_book_name(_str_field(first_item, "caption")),
        book_number=_int_field(first_item, "book"),
        first_chapter=first_chapter,
        last_chapter=last_chapter,
        links=links,
    )


# --- treasures from god's word ---------------------------------------------


async def extract_treasures_talk(selection: Selection, resolver: ReferenceResolver) -> Talk:
    """Talk heading, timed points with ``[^N]`` footnote markers, and resolved footnotes."""
    expect_count(selection, 1, "treasures talk")
    heading = select_within(selection, constants.LINE_WITH_SECTION_NUMBER_CSS_SELECTOR)
    if not heading:
        raise structural_error("Treasures talk has no heading")

    weaver = FootnoteWeaver()
    points = [
        TalkPoint(text=woven.text, footnote_ids=woven.footnote_ids)
        for woven in (
            weaver.weave(paragraph)
            for paragraph in select_within(selection, constants.TALK_POINTS_CSS_SELECTOR)
            if not is_time_box_line(paragraph)
        )
    ]
    footnotes = await weaver.resolve(resolver)

    return Talk(
        section_number=section_number_from(heading),
        time_box_minutes=time_box_from(selection),
        heading=clean_text(selection_text(heading)),
        points=points,
        footnotes=footnotes,
    )


def _printed_question_text(scripture_anchor: Tag) -> str:
    raw = first_text_after(scripture_anchor)
    if raw is None:
        raise format_error("Spiritual gems question text not found next to the scripture reference")
    # The text node reads ". <question> (" around the question itself.
    return clean_text(raw[2:-2])


async def _answer_source(anchor: Tag, resolver: ReferenceResolver) -> AnswerSource:
    return AnswerSource(mnemonic=clean_text(anchor.get_text()), text=await resolve_text(resolver, anchor))


async def extract_spiritual_gems(selection: Selection, resolver: ReferenceResolver) -> Gems:
    expect_count(selection, 2, "spiritual gems")
    heading, content = selection

    scripture_anchors = content.select(constants.SCRIPTURE_ANCHOR_CSS_SELECTOR)
    expect_count(scripture_anchors, 1, "spiritual gems scripture reference")
    scripture_anchor = scripture_anchors[0]
    answer_anchors = [anchor for anchor in content.find_all("a") if anchor is not scripture_anchor]

    scripture_text, answer_sources = await asyncio.gather(
        resolve_text(resolver, scripture_anchor),
        asyncio.gather(*(_answer_source(anchor, resolver) for anchor in answer_anchors)),
    )

    return Gems(
        section_number=section_number_from(heading),
        time_box_minutes=time_box_from(content),
        printed_question=PrintedQuestion(
            question=_printed_question_text(scripture_anchor),
            scripture_mnemonic=clean_text(scripture_anchor.get_text()),
            scripture_text=scripture_text,
            answer_sources=list(answer_sources),
        ),
        open_ended_question=clean_text(
            selection_text(content.select(constants.OPEN_ENDED_QUESTION_CSS_SELECTOR))
        ),
    )


async def extract_bible_reading(selection: Selection, resolver: ReferenceResolver) -> ReadingAssignment:
    expect_count(selection, 2, "bible reading")
    heading, content = selection
    anchors = content.find_all("a")
    expect_count(anchors, 2, "bible reading references")
    scripture_anchor, study_point_anchor = anchors

    scripture_text, study_point_text = await asyncio.gather(
        resolve_text(resolver, scripture_anchor),
        resolve_text(resolver, study_point_anchor),
    )
    return ReadingAssignment(
        section_number=section_number_from(heading),
        time_box_minutes=time_box_from(content),
        scripture_mnemonic=clean_text(scripture_anchor.get_text()),
        scripture_text=scripture_text,
        study_point=StudyPoint(mnemonic=clean_text(study_point_anchor.get_text()), text=study_point_text),
    )


# --- apply yourself to the field ministry ----------------------------------


async def _assignment(group: HeadingGroup, resolver: ReferenceResolver) -> Assignment:
    if not group.contents:
        raise structural_error(f"Assignment [{clean_text(group.heading.get_text())}] has no content")
    contents = group.contents[0]
    heading_text = clean_text(group.heading.get_text())
    text = clean_text(contents.get_text())
    student_task = is_student_task(text)

    study_point = None
    if student_task:
        anchors = contents.find_all("a")
        if not anchors:
            raise structural_error(f"Student task [{heading_text}] has no study point reference")
        anchor = anchors[-1]
        study_point = StudyPoint(mnemonic=clean_text(anchor.get_text()), text=await resolve_text(resolver, anchor))

    return Assignment(
        section_number=section_number_from(group.heading),
        time_box_minutes=time_box_from(contents),
        is_student_task=student_task,
        headline=strip_headline_number(heading_text),
        body=text_between_parentheses(text) if student_task else text,
        study_point=study_point,
    )


async def extract_field_ministry(selection: Selection, resolver: ReferenceResolver) -> List[Assignment]:
    """One assignment per heading group, in page order."""
    groups = group_by_heading(selection)
    return list(await asyncio.gather(*(_assignment(group, resolver) for group in groups)))


# --- living as christians --------------------------------------------------


def _living_section(group: HeadingGroup) -> LivingSection:
    if not group.contents:
        raise structural_error(f"Section [{clean_text(group.heading.get_text())}] has no content")
    text = "\n".join(clean_text(element.get_text()) for element in group.contents)
    _, separator, body = text.partition(")")
    if not separator:
        raise format_error(f"Section [{clean_text(group.heading.get_text())}] has no time box")
    return LivingSection(
        section_number=section_number_from(group.heading),
        time_box_minutes=time_box_from(group.contents[0]),
        body=body.strip(),
    )


def extract_christian_living(selection: Selection) -> List[LivingSection]:
    return [_living_section(group) for group in group_by_heading(selection)]


def extract_bible_study(selection: Selection, base_url: str) -> StudySection:
    if len(selection) < 2:
        raise structural_error(
            f"Unexpected number of elements for bible study. expected at least 2, got {len(selection)}"
        )
    references = [
        urljoin(f"{base_url.rstrip('/')}/", anchor["href"])
        for anchor in selection[1].find_all("a")
        if anchor.get("href")
    ]
    return StudySection(
        section_number=section_number_from(selection[0]),
        time_box_minutes=time_box_from(selection),
        body=clean_text(selection_text(selection)),
        references=references,
    )


__all__ = [
    "extract_bible_reading",
    "extract_bible_study",
    "extract_christian_living",
    "extract_field_ministry",
    "extract_songs",
    "extract_spiritual_gems",
    "extract_treasures_talk",
    "extract_week_date_span",
    "extract_weekly_bible_read",
]
