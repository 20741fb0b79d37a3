"""Chapter reading and previous/next navigation.

Responsibilities:
- Load one chapter post and render its body as cleaned paragraphs.
- Resolve the chapter list from the caller or, when absent, from the post's
  first category ordered by publication date.
- Provide bounds-checked previous/next chapter lookup.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from ..api.client import ContentAPIError, LightNovelClient
from ..models.datatypes import ChapterPost, ChapterRef
from ..telemetry.logger import warn_stage
from ..text.normalizer import normalize


@dataclass(slots=True)
class ChapterView:
    """A loaded chapter with its position inside the series chapter list."""

    post: ChapterPost
    paragraphs: list[str]
    chapters: list[ChapterRef] = field(default_factory=list)

    @property
    def index(self) -> int:
        """Return the 0-based position in `chapters`, or -1 when not listed."""

        for position, chapter in enumerate(self.chapters):
            if chapter.id == self.post.id:
                return position
        return -1

    def chapter_at(self, index: int) -> ChapterRef | None:
        """Return the chapter at `index`, or `None` when out of range."""

        if index < 0 or index >= len(self.chapters):
            return None
        return self.chapters[index]

    def previous(self) -> ChapterRef | None:
        """Return the chapter before this one, or `None` at the start or when unlisted."""

        current = self.index
        if current < 0:
            return None
        return self.chapter_at(current - 1)

    def next(self) -> ChapterRef | None:
        """Return the chapter after this one, or `None` at the end or when unlisted."""

        current = self.index
        if current < 0:
            return None
        return self.chapter_at(current + 1)


class ChapterReader:
    """Load chapters through the WordPress posts API."""

    def __init__(self, client: LightNovelClient, category_page_size: int = 200) -> None:
        self.client = client
        self.category_page_size = category_page_size

    def open(self, chapter_id: int, chapters: list[ChapterRef] | None = None) -> ChapterView:
        """Load a chapter; a failed post fetch raises `ContentAPIError`."""

        post = self.client.get_post(chapter_id)
        resolved = list(chapters or [])
        if not resolved and post.categories:
            resolved = self._category_chapters(post.categories[0])
        return ChapterView(post=post, paragraphs=normalize(post.content), chapters=resolved)

    def _category_chapters(self, category_id: int) -> list[ChapterRef]:
        """Fetch the fallback chapter list; failures leave navigation empty."""

        try:
            return self.client.list_category_posts(category_id, per_page=self.category_page_size)
        except ContentAPIError as exc:
            warn_stage(
                "chapter",
                "category-fetch-failed",
                category=category_id,
                failure_kind=exc.failure_kind,
            )
            return []
