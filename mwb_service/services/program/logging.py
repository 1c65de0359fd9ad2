"""Structured logging helpers for the program scraper."""

from __future__ import annotations

import logging
from typing import Any, Mapping, MutableMapping, Optional

_LOGGER = logging.getLogger("mwb_service.program")


def _emit(level: int, event: str, *, extra: Optional[Mapping[str, Any]] = None) -> None:
    payload: MutableMapping[str, Any] = {"event": event, "source": "program"}
    if extra:
        payload.update(extra)
    _LOGGER.log(level, event, extra=payload)


def log_extraction_started(section: str) -> None:
    _emit(logging.INFO, "program.section.started", extra={"section": section})


def log_section_extracted(section: str, duration_ms: float, **fields: Any) -> None:
    _emit(
        logging.INFO,
        "program.section.extracted",
        extra={"section": section, "duration_ms": duration_ms, **fields},
    )


def log_section_failed(section: str, kind: str, error: str) -> None:
    _emit(
        logging.ERROR,
        "program.section.failed",
        extra={"section": section, "error_kind": kind, "error": error},
    )


def log_reference_resolved(label: str, publication: str, length: int) -> None:
    _emit(
        logging.DEBUG,
        "program.reference.resolved",
        extra={"label": label, "publication": publication, "text_length": length},
    )


def log_footnote_added(footnote_id: int, label: str) -> None:
    _emit(logging.DEBUG, "program.footnote.added", extra={"footnote_id": footnote_id, "label": label})


def log_chapter_bounds(first_chapter: int, last_chapter: int) -> None:
    _emit(
        logging.DEBUG,
        "program.bible_read.bounds",
        extra={"first_chapter": first_chapter, "last_chapter": last_chapter},
    )
