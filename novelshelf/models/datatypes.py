"""Core datatypes shared across novelshelf modules.

Responsibilities:
- Represent immutable records built from remote API payloads.
- Keep payload parsing tolerant: missing optional fields fall back to defaults.

Key types:
- `NovelSummary`, `SeriesPage`, `ChapterRef`, `NovelDetails`, `ChapterPost`,
  and `FavoriteEntry`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

from ..parsing import normalize_optional_string, parse_optional_int, rendered_field


def _require_id(payload: Mapping[str, Any], kind: str) -> int:
    """Read the integer `id` of a payload record or raise `ValueError`."""

    value = parse_optional_int(payload.get("id"))
    if value is None:
        raise ValueError(f"{kind} payload is missing an integer `id`.")
    return value


def _text(payload: Mapping[str, Any], key: str) -> str:
    return normalize_optional_string(payload.get(key)) or ""


@dataclass(frozen=True, slots=True)
class NovelSummary:
    """One novel row from the paginated updates feed.

    Attributes:
        id: Remote series identifier.
        name: Display title.
        cover_image: Cover image URL, empty when unknown.
        description: Raw HTML synopsis.
        last_update: Free-form last-update label from the API.
    """

    id: int
    name: str
    cover_image: str = ""
    description: str = ""
    last_update: str = ""

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> NovelSummary:
        """Build a feed row from one `novels` item; a missing `id` raises `ValueError`."""

        return cls(
            id=_require_id(payload, "Novel"),
            name=_text(payload, "name"),
            cover_image=_text(payload, "cover_image"),
            description=str(payload.get("description") or ""),
            last_update=_text(payload, "last_update"),
        )


@dataclass(frozen=True, slots=True)
class SeriesPage:
    """One page of the updates feed."""

    novels: list[NovelSummary]
    page: int
    total_pages: int = 1

    @property
    def has_more(self) -> bool:
        """Return whether pages after this one exist."""

        return self.page < self.total_pages


@dataclass(frozen=True, slots=True)
class ChapterRef:
    """Reference to one chapter post.

    Attributes:
        id: Remote post identifier.
        title: Chapter title (may contain HTML entities).
        date: ISO-8601 publication date, when known.
    """

    id: int
    title: str
    date: str | None = None

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> ChapterRef:
        """Build a chapter reference from a series `chapters` item."""

        return cls(
            id=_require_id(payload, "Chapter"),
            title=rendered_field(payload, "title").strip(),
            date=normalize_optional_string(payload.get("date")),
        )


@dataclass(frozen=True, slots=True)
class NovelDetails:
    """Full series record with its chapter list."""

    id: int
    name: str
    cover_image: str = ""
    description: str = ""
    chapters: list[ChapterRef] = field(default_factory=list)

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> NovelDetails:
        """Build series details; chapter items that are not objects are ignored."""

        raw_chapters = payload.get("chapters") or []
        chapters = [
            ChapterRef.from_payload(item) for item in raw_chapters if isinstance(item, Mapping)
        ]
        return cls(
            id=_require_id(payload, "Series"),
            name=_text(payload, "name"),
            cover_image=_text(payload, "cover_image"),
            description=str(payload.get("description") or ""),
            chapters=chapters,
        )


@dataclass(frozen=True, slots=True)
class ChapterPost:
    """A chapter post with raw HTML content."""

    id: int
    title: str
    content: str
    categories: list[int] = field(default_factory=list)
    date: str | None = None

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> ChapterPost:
        """Build a post from a WordPress record, unwrapping `rendered` fields."""

        raw_categories = payload.get("categories")
        categories: list[int] = []
        if isinstance(raw_categories, list):
            for item in raw_categories:
                parsed = parse_optional_int(item)
                if parsed is not None:
                    categories.append(parsed)
        return cls(
            id=_require_id(payload, "Post"),
            title=rendered_field(payload, "title").strip(),
            content=rendered_field(payload, "content"),
            categories=categories,
            date=normalize_optional_string(payload.get("date")),
        )


@dataclass(frozen=True, slots=True)
class FavoriteEntry:
    """Persisted favorites-library record."""

    id: int
    name: str
    cover_image: str = ""

    @classmethod
    def from_details(cls, details: NovelDetails) -> FavoriteEntry:
        """Snapshot the fields the library keeps for a series."""

        return cls(id=details.id, name=details.name, cover_image=details.cover_image)

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> FavoriteEntry:
        """Restore a stored record; a missing `id` raises `ValueError`."""

        return cls(
            id=_require_id(payload, "Favorite"),
            name=_text(payload, "name"),
            cover_image=_text(payload, "cover_image"),
        )

    def to_payload(self) -> dict[str, object]:
        """Return the JSON-serializable storage form."""

        return {"id": self.id, "name": self.name, "cover_image": self.cover_image}
