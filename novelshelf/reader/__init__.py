"""Reader flows: updates feed, series details, and chapter navigation."""

from .chapter import ChapterReader, ChapterView
from .feed import UpdatesFeed
from .series import SeriesView

__all__ = ["ChapterReader", "ChapterView", "SeriesView", "UpdatesFeed"]
