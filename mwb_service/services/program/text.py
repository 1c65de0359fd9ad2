"""Whitespace helpers shared by every extractor and normalizer."""

from __future__ import annotations

import re
from typing import Any

_LINE_BREAK_RUN = re.compile(r"\n+")
_SPACE_AROUND_BREAK = re.compile(r"(\s\n|\n\s)")


def _as_str(value: Any) -> str:
    return value if isinstance(value, str) else ""


def clean_text(text: Any) -> str:
    """Trim and replace non-breaking spaces; non-strings become ``""``."""
    return _as_str(text).strip().replace("\u00a0", " ")


def collapse_line_breaks(text: Any) -> str:
    """Collapse runs of consecutive line breaks into one."""
    return _LINE_BREAK_RUN.sub("\n", _as_str(text))


def tighten_line_breaks(text: Any) -> str:
    """Drop a single whitespace character hugging either side of a line break."""
    return _SPACE_AROUND_BREAK.sub("\n", _as_str(text))
