"""Building blocks shared by the section extractors."""

from __future__ import annotations

import asyncio
import copy
import logging
import re
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence, Tuple, Union

from bs4 import Comment, NavigableString, Tag

from ...core import constants
from ...core.errors import FormatError, StructuralError
from . import logging as program_logging
from .resolver import ReferenceResolver, resolve_text
from .selection import Selection
from .text import clean_text

logger = logging.getLogger(__name__)

SECTION_NUMBER_PATTERN = re.compile(r"^(\d+)\.")
TIME_BOX_PATTERN = re.compile(r"\((\d+)\s*mins?\.\)")
STUDENT_TASK_PATTERN = re.compile(r"\(.*?\).*?\(.*?\)")
BETWEEN_PARENTHESES_PATTERN = re.compile(r"\)\s*(.*?)\s*(?=\s*\()")
HEADLINE_NUMBER_PREFIX = re.compile(r"^\d+\.\s*")

Node = Union[Tag, Sequence[Tag]]


def _as_selection(node: Node) -> Sequence[Tag]:
    return [node] if isinstance(node, Tag) else node


def select_within(node: Node, css: str) -> Selection:
    """Descendants of every element in ``node`` matching ``css``, in order."""
    found: Selection = []
    for element in _as_selection(node):
        found.extend(element.select(css))
    return found


def selection_text(node: Node) -> str:
    return "".join(element.get_text() for element in _as_selection(node))


def format_error(message: str, **context) -> FormatError:
    logger.error(message)
    return FormatError(message, **context)


def structural_error(message: str, **context) -> StructuralError:
    logger.error(message)
    return StructuralError(message, **context)


def expect_count(selection: Sequence[Tag], expected: int, label: str) -> None:
    if len(selection) != expected:
        raise structural_error(f"Unexpected number of elements for {label}. expected {expected}, got {len(selection)}")


def section_number_from(node: Node) -> int:
    """Read the leading ``N.`` of a heading."""
    text = clean_text(selection_text(node))
    match = SECTION_NUMBER_PATTERN.match(text)
    if not match:
        raise format_error(f"Unexpected section number for element [{text}].")
    section_number = int(match.group(1))
    logger.debug(f"Extracted section number: [{section_number}]")
    return section_number


def parse_time_box(text: str) -> int:
    """Minutes from the first ``(N min.)`` / ``(N mins.)`` in ``text``."""
    match = TIME_BOX_PATTERN.search(clean_text(text))
    if not match or int(match.group(1)) <= 0:
        raise format_error(f"No time box found in [{clean_text(text)}]")
    return int(match.group(1))


def is_time_box_line(element: Tag) -> bool:
    classes = element.get("class") or []
    return constants.LINE_WITH_TIME_BOX_CSS_SELECTOR.lstrip(".") in classes


def time_box_from(node: Node) -> int:
    """Minutes from the subdued time-box line somewhere inside ``node``."""
    lines = select_within(node, constants.LINE_WITH_TIME_BOX_CSS_SELECTOR)
    if not lines:
        raise format_error(f"No selection found for selector [{constants.LINE_WITH_TIME_BOX_CSS_SELECTOR}]")
    time_box = parse_time_box(selection_text(lines))
    logger.debug(f"Extracted time box: [{time_box}] minutes")
    return time_box


def is_student_task(text: str) -> bool:
    # Student tasks carry the time box and the study point, both parenthesized.
    return STUDENT_TASK_PATTERN.search(text) is not None


def text_between_parentheses(text: str) -> str:
    """Text strictly between the first ``)`` and the following ``(``; ``text`` if absent."""
    match = BETWEEN_PARENTHESES_PATTERN.search(text)
    return match.group(1) if match else text


def strip_headline_number(text: str) -> str:
    return HEADLINE_NUMBER_PREFIX.sub("", text, count=1)


@dataclass(slots=True)
class HeadingGroup:
    heading: Tag
    contents: List[Tag] = field(default_factory=list)


def group_by_heading(selection: Iterable[Tag]) -> List[HeadingGroup]:
    """Rebuild ``heading + body`` pairs from a flat sibling list; elements before the first h3 are dropped."""
    groups: List[HeadingGroup] = []
    for element in selection:
        if element.name == "h3":
            groups.append(HeadingGroup(heading=element))
        elif groups:
            groups[-1].contents.append(element)
    return groups


@dataclass(slots=True)
class WovenParagraph:
    text: str
    footnote_ids: List[int]


class FootnoteWeaver:
    """
    Numbers reference anchors in document order and splices ``[^N]`` markers.

    Ids start at 1 and only need to be unique within one weaver, i.e. within
    one extracted section. Paragraphs are copied before marking so the
    caller's document is never modified.
    """

    def __init__(self) -> None:
        self._next_id = 0
        self._pending: List[Tuple[int, Tag]] = []

    def weave(self, paragraph: Tag) -> WovenParagraph:
        marked = copy.copy(paragraph)
        footnote_ids: List[int] = []
        for anchor in marked.find_all("a"):
            self._next_id += 1
            anchor.insert_after(NavigableString(f"[^{self._next_id}]"))
            footnote_ids.append(self._next_id)
            self._pending.append((self._next_id, anchor))
            program_logging.log_footnote_added(self._next_id, clean_text(anchor.get_text()))
        return WovenParagraph(text=clean_text(marked.get_text()), footnote_ids=footnote_ids)

    async def resolve(self, resolver: ReferenceResolver) -> Dict[int, str]:
        # Footnotes are independent of each other: fan out, first failure wins.
        texts = await asyncio.gather(*(resolve_text(resolver, anchor) for _, anchor in self._pending))
        return {footnote_id: text for (footnote_id, _), text in zip(self._pending, texts)}


def first_text_after(element: Tag) -> Optional[str]:
    for sibling in element.next_siblings:
        if isinstance(sibling, NavigableString) and not isinstance(sibling, Comment):
            return str(sibling)
    return None
