"""Shared typed data models for novelshelf.

This package contains dataclasses exchanged between the API client, the
favorites library, and reader flows.
"""

from .datatypes import (
    ChapterPost,
    ChapterRef,
    FavoriteEntry,
    NovelDetails,
    NovelSummary,
    SeriesPage,
)

__all__ = [
    "ChapterPost",
    "ChapterRef",
    "FavoriteEntry",
    "NovelDetails",
    "NovelSummary",
    "SeriesPage",
]
