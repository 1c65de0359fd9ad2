"""Program extraction engine: page partitioning, section extractors and reference resolution."""

from .models import WeeklyProgram
from .resolver import ReferenceResolver
from .scraper import ProgramScraper

__all__ = ["ProgramScraper", "ReferenceResolver", "WeeklyProgram"]
