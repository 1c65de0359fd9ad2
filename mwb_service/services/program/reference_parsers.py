"""Publication classification and per-publication text normalizers."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict

from bs4 import BeautifulSoup

from ...core import constants
from ...core.errors import FormatError
from .text import clean_text, collapse_line_breaks, tighten_line_breaks

_PARENTHESIZED = re.compile(r"\(([\s\S]+?)\)")


class PublicationKind(str, Enum):
    TALK = "talk"            # study articles (pub-w)
    SCRIPTURE = "scripture"  # study bible ranges (pub-nwtsty)
    SONG = "song"            # songbook entries (pub-sjj)
    GENERIC = "generic"


_KIND_PATTERNS = (
    (PublicationKind.TALK, re.compile(rf"\b{re.escape(constants.PUB_CODE_WATCHTOWER)}\b", re.IGNORECASE)),
    (PublicationKind.SCRIPTURE, re.compile(rf"\b{re.escape(constants.PUB_CODE_BIBLE)}\b", re.IGNORECASE)),
    (PublicationKind.SONG, re.compile(rf"\b{re.escape(constants.PUB_CODE_SONGBOOK)}\b", re.IGNORECASE)),
)


def detect_publication_kind(article_classes: str) -> PublicationKind:
    """Classify a payload from its ``articleClasses`` tag; first matching code wins."""
    for kind, pattern in _KIND_PATTERNS:
        if pattern.search(article_classes or ""):
            return kind
    return PublicationKind.GENERIC


def _soup(content: str) -> BeautifulSoup:
    return BeautifulSoup(content, "html.parser")


def parse_talk_publication(content: str) -> str:
    soup = _soup(content)
    paragraphs = []
    for paragraph in soup.select("p.sb"):
        for marker in paragraph.select(".parNum"):
            marker.decompose()
        paragraphs.append(clean_text(paragraph.get_text()))
    return "\n".join(paragraphs)


def parse_scripture_publication(content: str) -> str:
    soup = _soup(content)
    for marker in soup.select("a.fn, a.b"):
        marker.decompose()
    for boundary in soup.select(".sl, .sz"):
        spacer = soup.new_tag("span")
        spacer.string = " "
        boundary.append(spacer)
    return tighten_line_breaks(clean_text(soup.get_text()))


def parse_generic_publication(content: str) -> str:
    return collapse_line_breaks(clean_text(_soup(content).get_text()))


NORMALIZERS: Dict[PublicationKind, Callable[[str], str]] = {
    PublicationKind.TALK: parse_talk_publication,
    PublicationKind.SCRIPTURE: parse_scripture_publication,
    PublicationKind.SONG: parse_generic_publication,
    PublicationKind.GENERIC: parse_generic_publication,
}


def normalize_publication(kind: PublicationKind, content: str) -> str:
    return NORMALIZERS[kind](content)


@dataclass(slots=True)
class SongbookEntry:
    title: str
    theme_scripture: str
    lyrics: str
    closing_reference: str


def _parenthesized(text: str, label: str) -> str:
    match = _PARENTHESIZED.search(text)
    if not match:
        raise FormatError(f"Expected a parenthesized {label} in songbook entry, found [{text}]")
    return match.group(1)


def _text_of(soup: BeautifulSoup, css: str) -> str:
    element = soup.select_one(css)
    return clean_text(element.get_text()) if element is not None else ""


def parse_songbook_entry(content: str) -> SongbookEntry:
    """Split a songbook payload into title, theme scripture, lyrics and closing reference."""
    soup = _soup(content)
    return SongbookEntry(
        title=_text_of(soup, "#p2"),
        theme_scripture=_parenthesized(_text_of(soup, "#p3"), "theme scripture"),
        lyrics=_text_of(soup, ".bodyTxt"),
        closing_reference=_parenthesized(_text_of(soup, ".closingContent"), "closing reference"),
    )
