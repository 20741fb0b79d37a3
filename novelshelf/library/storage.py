"""Key-value storage abstraction.

Responsibilities:
- Persist string values under string keys in one JSON file.
- Mirror the `getItem`/`setItem`/`removeItem` contract of mobile key-value stores.
"""

from __future__ import annotations

import json
import tempfile
from pathlib import Path


class KeyValueStore:
    """Filesystem-backed key-value store holding all keys in one JSON object."""

    def __init__(self, path: Path) -> None:
        """Initialize the store with the JSON file path."""

        self.path = path

    def get_item(self, key: str) -> str | None:
        """Return the stored value for a key, or `None` when missing."""

        value = self._read_all().get(key)
        if value is None:
            return None
        return str(value)

    def set_item(self, key: str, value: str) -> None:
        """Store a string value under a key."""

        entries = self._read_all()
        entries[key] = value
        self._write_all(entries)

    def remove_item(self, key: str) -> None:
        """Delete a key; missing keys are ignored."""

        entries = self._read_all()
        if entries.pop(key, None) is not None:
            self._write_all(entries)

    def keys(self) -> list[str]:
        """Return stored keys in sorted order."""

        return sorted(self._read_all())

    def _read_all(self) -> dict[str, object]:
        """Load the whole store; a missing file is an empty store."""

        if not self.path.exists():
            return {}
        payload = json.loads(self.path.read_text(encoding="utf-8") or "{}")
        if not isinstance(payload, dict):
            raise ValueError(f"Key-value store `{self.path}` must contain a JSON object.")
        return payload

    def _write_all(self, entries: dict[str, object]) -> None:
        """Write through a uniquely named sibling temp file, then rename it over the store."""

        self.path.parent.mkdir(parents=True, exist_ok=True)
        with tempfile.NamedTemporaryFile(
            "w",
            encoding="utf-8",
            dir=self.path.parent,
            prefix=f"{self.path.name}.",
            suffix=".tmp",
            delete=False,
        ) as handle:
            temp_path = Path(handle.name)
            try:
                json.dump(entries, handle, ensure_ascii=False, indent=2, sort_keys=True)
            except Exception:
                handle.close()
                temp_path.unlink(missing_ok=True)
                raise
        temp_path.replace(self.path)
