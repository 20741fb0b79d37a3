"""Local favorites library.

Responsibilities:
- Load and save the favorites list as JSON under one key-value store key.
- Keep newest favorites first and at most one entry per novel id.
- Treat storage failures as warnings so reading never breaks on a bad store.
"""

from __future__ import annotations

import json

from ..config import DEFAULT_FAVORITES_KEY
from ..models.datatypes import FavoriteEntry, NovelDetails
from ..telemetry.logger import warn_stage
from .storage import KeyValueStore


class FavoritesLibrary:
    """Favorites list persisted in a `KeyValueStore`."""

    def __init__(self, store: KeyValueStore, key: str = DEFAULT_FAVORITES_KEY) -> None:
        self.store = store
        self.key = key

    def load(self) -> list[FavoriteEntry]:
        """Return stored favorites; missing or unreadable data yields an empty list."""

        try:
            raw = self.store.get_item(self.key)
            if not raw:
                return []
            payload = json.loads(raw)
            if not isinstance(payload, list):
                raise ValueError("favorites payload must be a JSON list")
        except (OSError, ValueError) as exc:
            warn_stage("favorites", "load-failed", error_type=type(exc).__name__)
            return []
        return self._parse_entries(payload)

    def _parse_entries(self, payload: list[object]) -> list[FavoriteEntry]:
        """Parse stored records one by one; malformed records are skipped and logged.

        Skipped records are not written back, so the next `save` drops them
        while every valid favorite survives.
        """

        entries: list[FavoriteEntry] = []
        for position, item in enumerate(payload):
            if not isinstance(item, dict):
                warn_stage("favorites", "record-skipped", index=position, reason="not-an-object")
                continue
            try:
                entries.append(FavoriteEntry.from_payload(item))
            except ValueError:
                warn_stage("favorites", "record-skipped", index=position, reason="missing-id")
        return entries

    def save(self, entries: list[FavoriteEntry]) -> None:
        """Persist favorites; write failures are logged and not raised."""

        try:
            self.store.set_item(
                self.key,
                json.dumps([entry.to_payload() for entry in entries or []], ensure_ascii=False),
            )
        except (OSError, ValueError) as exc:
            warn_stage("favorites", "save-failed", error_type=type(exc).__name__)

    def contains(self, novel_id: int) -> bool:
        """Return whether a novel is in the library."""

        return any(entry.id == novel_id for entry in self.load())

    def add(self, details: NovelDetails) -> list[FavoriteEntry]:
        """Prepend a novel to the library and return the new list."""

        entry = FavoriteEntry.from_details(details)
        entries = [entry, *(item for item in self.load() if item.id != entry.id)]
        self.save(entries)
        return entries

    def remove(self, novel_id: int) -> list[FavoriteEntry]:
        """Remove a novel from the library and return the new list."""

        entries = [item for item in self.load() if item.id != novel_id]
        self.save(entries)
        return entries

    def toggle(self, details: NovelDetails) -> bool:
        """Add or remove a novel and return whether it is now a favorite."""

        if self.contains(details.id):
            self.remove(details.id)
            return False
        self.add(details)
        return True
