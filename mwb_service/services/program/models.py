"""Value records produced by the program extractors."""

from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ProgramRecord(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SongReference(ProgramRecord):
    song_number: int = Field(gt=0)
    title: str
    theme_scripture: str
    lyrics: str
    closing_reference: str


class TalkPoint(ProgramRecord):
    text: str
    footnote_ids: List[int] = Field(default_factory=list)


class Talk(ProgramRecord):
    section_number: int
    time_box_minutes: int = Field(gt=0)
    heading: str
    points: List[TalkPoint] = Field(default_factory=list)
    footnotes: Dict[int, str] = Field(default_factory=dict)


class AnswerSource(ProgramRecord):
    mnemonic: str
    text: str


class PrintedQuestion(ProgramRecord):
    question: str
    scripture_mnemonic: str
    scripture_text: str
    answer_sources: List[AnswerSource] = Field(default_factory=list)


class Gems(ProgramRecord):
    section_number: int
    time_box_minutes: int = Field(gt=0)
    printed_question: PrintedQuestion
    open_ended_question: str


class StudyPoint(ProgramRecord):
    mnemonic: str
    text: str


class ReadingAssignment(ProgramRecord):
    section_number: int
    time_box_minutes: int = Field(gt=0)
    scripture_mnemonic: str
    scripture_text: str
    study_point: StudyPoint


class BibleReadingRange(ProgramRecord):
    book_name: str
    book_number: int
    first_chapter: int
    last_chapter: int
    links: List[str] = Field(default_factory=list)


class Assignment(ProgramRecord):
    section_number: int
    time_box_minutes: int = Field(gt=0)
    is_student_task: bool
    headline: str
    body: str
    study_point: Optional[StudyPoint] = None


class LivingSection(ProgramRecord):
    section_number: int
    time_box_minutes: int = Field(gt=0)
    body: str


class StudySection(ProgramRecord):
    section_number: int
    time_box_minutes: int = Field(gt=0)
    body: str
    references: List[str] = Field(default_factory=list)


class WeeklyProgram(ProgramRecord):
    week_date_span: str
    starting_song: SongReference
    middle_song: SongReference
    closing_song: SongReference
    weekly_bible_read: BibleReadingRange
    treasures_talk: Talk
    spiritual_gems: Gems
    bible_reading: ReadingAssignment
    field_ministry_items: List[Assignment] = Field(default_factory=list)
    christian_living_items: List[LivingSection] = Field(default_factory=list)
    bible_study: StudySection
