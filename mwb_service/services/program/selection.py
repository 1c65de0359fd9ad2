"""Landmark location and partitioning of the program page into named groups.

Every downstream extractor assumes exact shapes, so each landmark has to be
found exactly once and be of the expected kind. Anything else is reported
as a ``StructuralError`` rather than tolerated.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, List, Mapping, Optional

from bs4 import BeautifulSoup, Tag

from ...core import constants
from ...core.errors import StructuralError

logger = logging.getLogger(__name__)

Selection = List[Tag]


class LandmarkRole(str, Enum):
    STARTING_SONG = "starting_song"
    MIDDLE_SONG = "middle_song"
    CLOSING_SONG = "closing_song"
    TREASURES_TALK = "treasures_talk"
    FIELD_MINISTRY_HEADLINE = "field_ministry_headline"
    CHRISTIAN_LIVING_HEADLINE = "christian_living_headline"
    INTRODUCTION = "introduction"


class LandmarkKind(str, Enum):
    SONG = "song"          # must be an h3 heading
    HEADLINE = "headline"  # must wrap exactly one direct h2
    BLOCK = "block"        # any element


@dataclass(frozen=True, slots=True)
class Landmark:
    selector: str
    kind: LandmarkKind


LANDMARKS: Mapping[LandmarkRole, Landmark] = {
    LandmarkRole.STARTING_SONG: Landmark(constants.STARTING_SONG_CSS_SELECTOR, LandmarkKind.SONG),
    LandmarkRole.MIDDLE_SONG: Landmark(constants.MIDDLE_SONG_CSS_SELECTOR, LandmarkKind.SONG),
    LandmarkRole.CLOSING_SONG: Landmark(constants.FINAL_SONG_CSS_SELECTOR, LandmarkKind.SONG),
    LandmarkRole.TREASURES_TALK: Landmark(constants.TREASURES_TALK_CSS_SELECTOR, LandmarkKind.BLOCK),
    LandmarkRole.FIELD_MINISTRY_HEADLINE: Landmark(
        constants.FIELD_MINISTRY_HEADLINE_CSS_SELECTOR, LandmarkKind.HEADLINE
    ),
    LandmarkRole.CHRISTIAN_LIVING_HEADLINE: Landmark(
        constants.CHRISTIAN_LIVING_HEADLINE_CSS_SELECTOR, LandmarkKind.HEADLINE
    ),
    LandmarkRole.INTRODUCTION: Landmark(constants.INTRODUCTION_CSS_SELECTOR, LandmarkKind.BLOCK),
}


def _structural_error(message: str, **context) -> StructuralError:
    logger.error(message)
    return StructuralError(message, **context)


def _element_siblings(siblings: Iterable) -> Iterable[Tag]:
    return (node for node in siblings if isinstance(node, Tag))


class DocumentSelection:
    """Typed tree-selection interface over a parsed program page."""

    def __init__(self, document: BeautifulSoup, landmarks: Optional[Mapping[LandmarkRole, Landmark]] = None):
        self.document = document
        self.landmarks: Dict[LandmarkRole, Landmark] = dict(landmarks or LANDMARKS)

    @classmethod
    def from_html(cls, html: str, **kwargs) -> "DocumentSelection":
        return cls(BeautifulSoup(html, "html.parser"), **kwargs)

    def select(self, css: str) -> Selection:
        return self.document.select(css)

    def find_one(self, role: LandmarkRole) -> Tag:
        """Locate the single element playing ``role`` and check its kind."""
        landmark = self.landmarks[role]
        matches = self.document.select(landmark.selector)
        if len(matches) != 1:
            raise _structural_error(
                f"Expected exactly one element for landmark [{role.value}], got {len(matches)}",
                role=role.value,
            )
        element = matches[0]
        assert_landmark_kind(element, landmark.kind, role.value)
        return element

    def range_between(self, start: Tag, stop: Optional[Tag] = None) -> Selection:
        """Element siblings after ``start`` up to, not including, ``stop``."""
        result: Selection = []
        for sibling in _element_siblings(start.next_siblings):
            if sibling is stop:
                break
            result.append(sibling)
        return result

    def range_before(self, end: Tag, stop: Optional[Tag] = None) -> Selection:
        """Element siblings before ``end`` back to, not including, ``stop``; document order."""
        result: Selection = []
        for sibling in _element_siblings(end.previous_siblings):
            if sibling is stop:
                break
            result.append(sibling)
        result.reverse()
        return result

    def nearest_preceding(self, element: Tag, name: str) -> Optional[Tag]:
        for sibling in _element_siblings(element.previous_siblings):
            if sibling.name == name:
                return sibling
        return None


def assert_landmark_kind(element: Optional[Tag], kind: LandmarkKind, label: str) -> None:
    actual = element.name if element is not None else None
    if kind is LandmarkKind.SONG and actual != "h3":
        raise _structural_error(
            f"Unexpected element detected for [{label}]. Expected h3, got {actual}",
            role=label,
        )
    if kind is LandmarkKind.HEADLINE:
        headings = element.find_all("h2", recursive=False) if element is not None else []
        if len(headings) != 1:
            raise _structural_error(
                f"Unexpected element detected for [{label}]. Expected a headline with one h2, "
                f"got {actual} with {len(headings)} h2",
                role=label,
            )


@dataclass(slots=True)
class SongSelections:
    starting_song: Tag
    middle_song: Tag
    closing_song: Tag

    @property
    def songs(self) -> Selection:
        return [self.starting_song, self.middle_song, self.closing_song]


@dataclass(slots=True)
class HeadlineSelections:
    field_ministry_headline: Tag
    christian_living_headline: Tag


@dataclass(slots=True)
class TreasuresSelections:
    treasures_talk: Selection
    spiritual_gems: Selection
    bible_reading: Selection


@dataclass(slots=True)
class ChristianLivingSelections:
    christian_living: Selection
    bible_study: Selection


@dataclass(slots=True)
class ProgramGroups:
    introduction: Tag
    songs: SongSelections
    treasures_talk: Selection
    spiritual_gems: Selection
    bible_reading: Selection
    field_ministry: Selection
    christian_living: Selection
    bible_study: Selection


def build_song_selections(doc: DocumentSelection) -> SongSelections:
    return SongSelections(
        starting_song=doc.find_one(LandmarkRole.STARTING_SONG),
        middle_song=doc.find_one(LandmarkRole.MIDDLE_SONG),
        closing_song=doc.find_one(LandmarkRole.CLOSING_SONG),
    )


def build_headline_selections(doc: DocumentSelection) -> HeadlineSelections:
    return HeadlineSelections(
        field_ministry_headline=doc.find_one(LandmarkRole.FIELD_MINISTRY_HEADLINE),
        christian_living_headline=doc.find_one(LandmarkRole.CHRISTIAN_LIVING_HEADLINE),
    )


def _treasures_from(doc: DocumentSelection, headlines: HeadlineSelections) -> TreasuresSelections:
    treasures_talk = doc.find_one(LandmarkRole.TREASURES_TALK)
    points_two_and_three = doc.range_between(treasures_talk, headlines.field_ministry_headline)
    if len(points_two_and_three) != 4:
        raise _structural_error(
            "Unexpected number of elements for spiritual gems and bible reading. "
            f"expected 4, got {len(points_two_and_three)}"
        )
    return TreasuresSelections(
        treasures_talk=[treasures_talk],
        spiritual_gems=points_two_and_three[:2],
        bible_reading=points_two_and_three[2:4],
    )


def build_treasures_selections(doc: DocumentSelection) -> TreasuresSelections:
    return _treasures_from(doc, build_headline_selections(doc))


def build_field_ministry_selection(doc: DocumentSelection) -> Selection:
    headlines = build_headline_selections(doc)
    return doc.range_between(headlines.field_ministry_headline, headlines.christian_living_headline)


def _christian_living_from(doc: DocumentSelection, songs: SongSelections) -> ChristianLivingSelections:
    bible_study_heading = doc.nearest_preceding(songs.closing_song, "h3")
    assert_landmark_kind(bible_study_heading, LandmarkKind.SONG, "bible_study_heading")
    return ChristianLivingSelections(
        christian_living=doc.range_between(songs.middle_song, bible_study_heading),
        bible_study=[bible_study_heading, *doc.range_before(songs.closing_song, bible_study_heading)],
    )


def build_christian_living_selections(doc: DocumentSelection) -> ChristianLivingSelections:
    return _christian_living_from(doc, build_song_selections(doc))


def build_program_groups(doc: DocumentSelection) -> ProgramGroups:
    """Locate every landmark once and cut the page into its named groups."""
    headlines = build_headline_selections(doc)
    songs = build_song_selections(doc)
    treasures = _treasures_from(doc, headlines)
    living = _christian_living_from(doc, songs)

    groups = ProgramGroups(
        introduction=doc.find_one(LandmarkRole.INTRODUCTION),
        songs=songs,
        treasures_talk=treasures.treasures_talk,
        spiritual_gems=treasures.spiritual_gems,
        bible_reading=treasures.bible_reading,
        field_ministry=doc.range_between(headlines.field_ministry_headline, headlines.christian_living_headline),
        christian_living=living.christian_living,
        bible_study=living.bible_study,
    )
    logger.debug(
        "program.groups.built",
        extra={
            "field_ministry_elements": len(groups.field_ministry),
            "christian_living_elements": len(groups.christian_living),
            "bible_study_elements": len(groups.bible_study),
        },
    )
    return groups
