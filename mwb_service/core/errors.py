"""Error taxonomy for the program scraper."""

from __future__ import annotations

from typing import Any, Dict, Optional


class ScraperError(Exception):
    """Base exception for every failure the scraper reports to callers."""

    kind = "scraper"

    def __init__(self, message: str, **context: Any) -> None:
        super().__init__(message)
        self.message = message
        self.context: Dict[str, Any] = context

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.message, "kind": self.kind}


class StructuralError(ScraperError):
    """A landmark, element count or element kind did not match the page template."""

    kind = "structural"


class RetrievalError(ScraperError):
    """A fetch failed or returned a payload that cannot be used."""

    kind = "retrieval"

    def __init__(self, message: str, *, url: Optional[str] = None, **context: Any) -> None:
        super().__init__(message, url=url, **context)
        self.url = url


class FormatError(ScraperError):
    """Text did not match an expected pattern."""

    kind = "format"


class InputError(ScraperError):
    """Neither raw HTML nor a parsed document was supplied."""

    kind = "input"
