"""Series details view model."""

from __future__ import annotations

from dataclasses import dataclass, field

from ..errors import ReaderStageError
from ..library.favorites import FavoritesLibrary
from ..models.datatypes import ChapterRef, NovelDetails
from ..text.normalizer import normalize


@dataclass(slots=True)
class SeriesView:
    """Series details with cleaned description paragraphs and favorite state."""

    details: NovelDetails
    paragraphs: list[str] = field(default_factory=list)
    is_favorite: bool = False

    @classmethod
    def build(cls, details: NovelDetails, library: FavoritesLibrary) -> SeriesView:
        """Clean the description and read the favorite state from `library`."""

        return cls(
            details=details,
            paragraphs=normalize(details.description),
            is_favorite=library.contains(details.id),
        )

    @property
    def chapters(self) -> list[ChapterRef]:
        """Return the series chapter list in API order."""

        return self.details.chapters

    def first_chapter(self) -> ChapterRef:
        """Return the chapter a "start reading" action opens."""

        if not self.details.chapters:
            raise ReaderStageError(
                stage="series",
                detail=f"Series `{self.details.id}` has no chapters.",
                hint="No chapters have been published for this novel yet.",
            )
        return self.details.chapters[0]

    def toggle_favorite(self, library: FavoritesLibrary) -> bool:
        """Flip library membership and return the new favorite state."""

        self.is_favorite = library.toggle(self.details)
        return self.is_favorite
