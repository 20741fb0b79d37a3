"""Configuration model and loaders for novelshelf.

Responsibilities:
- Define reader settings as a typed dataclass.
- Provide loader entry points for YAML- and environment-based configuration.
- Validate typed values with actionable error messages.

Key types:
- `ReaderConfig`: normalized settings for one CLI invocation.
- `ConfigLoader`: static construction helpers for `ReaderConfig`.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
import os
from pathlib import Path
from typing import Any, Iterable, Mapping

import yaml

from .parsing import normalize_optional_string


DEFAULT_API_BASE_URL = "https://free.kolnovel.com/wp-json/lightnovel/v1"
DEFAULT_WP_BASE_URL = "https://free.kolnovel.com/wp-json/wp/v2"
DEFAULT_FAVORITES_KEY = "@ln_favorites_v1"
_DEFAULT_PER_PAGE = 20
_DEFAULT_TIMEOUT_SECONDS = 30.0
_DEFAULT_MIN_REQUEST_INTERVAL_SECONDS = 0.05
_DEFAULT_LOG_LEVEL = "WARNING"
_SUPPORTED_LOG_LEVELS = frozenset({"DEBUG", "INFO", "WARNING", "ERROR"})


def _default_data_dir() -> Path:
    return Path.home() / ".novelshelf"


@dataclass(slots=True)
class ReaderConfig:
    """Runtime configuration for reader commands.

    Attributes:
        api_base_url: Base URL of the light-novel series API.
        wp_base_url: Base URL of the WordPress posts API serving chapter bodies.
        data_dir: Directory holding the local key-value store file.
        per_page: Page size for the updates feed.
        timeout_seconds: HTTP request timeout.
        min_request_interval_seconds: Minimum spacing between requests per host.
        favorites_key: Storage key of the favorites list.
        log_level: Minimum loguru level emitted on stderr.
        extra: Additional free-form metadata.
    """

    api_base_url: str = DEFAULT_API_BASE_URL
    wp_base_url: str = DEFAULT_WP_BASE_URL
    data_dir: Path = field(default_factory=_default_data_dir)
    per_page: int = _DEFAULT_PER_PAGE
    timeout_seconds: float = _DEFAULT_TIMEOUT_SECONDS
    min_request_interval_seconds: float = _DEFAULT_MIN_REQUEST_INTERVAL_SECONDS
    favorites_key: str = DEFAULT_FAVORITES_KEY
    log_level: str = _DEFAULT_LOG_LEVEL
    extra: dict[str, str] = field(default_factory=dict)

    @property
    def store_path(self) -> Path:
        """Return the path of the JSON key-value store file."""

        return self.data_dir / "store.json"

    def validate(self) -> None:
        """Validate configuration values before any command runs."""

        self._require_http_url(self.api_base_url, "api_base_url")
        self._require_http_url(self.wp_base_url, "wp_base_url")
        if self.per_page <= 0:
            raise ValueError("`per_page` must be a positive integer.")
        if self.timeout_seconds <= 0:
            raise ValueError("`timeout_seconds` must be a positive number.")
        if self.min_request_interval_seconds < 0:
            raise ValueError("`min_request_interval_seconds` must not be negative.")
        if not self.favorites_key.strip():
            raise ValueError("`favorites_key` must be a non-empty string.")
        if self.log_level not in _SUPPORTED_LOG_LEVELS:
            supported = ", ".join(sorted(_SUPPORTED_LOG_LEVELS))
            raise ValueError(
                f"Unsupported `log_level` value `{self.log_level}`; supported: {supported}."
            )

    def with_overrides(self, **overrides: object) -> ReaderConfig:
        """Return a validated copy with non-`None` overrides applied."""

        applied = {key: value for key, value in overrides.items() if value is not None}
        updated = replace(self, extra=dict(self.extra), **applied)
        updated.validate()
        return updated

    def as_display_rows(self) -> list[tuple[str, str]]:
        """Return deterministic key/value rows for the `settings` command."""

        return [
            ("api_base_url", self.api_base_url),
            ("wp_base_url", self.wp_base_url),
            ("data_dir", str(self.data_dir)),
            ("per_page", str(self.per_page)),
            ("timeout_seconds", f"{self.timeout_seconds:g}"),
            ("min_request_interval_seconds", f"{self.min_request_interval_seconds:g}"),
            ("favorites_key", self.favorites_key),
            ("log_level", self.log_level),
        ]

    @staticmethod
    def _require_http_url(value: str, field_name: str) -> None:
        """Validate that a base URL is a non-empty http(s) URL."""

        if not isinstance(value, str) or not value.strip():
            raise ValueError(f"`{field_name}` must be a non-empty string.")
        if not value.startswith(("http://", "https://")):
            raise ValueError(f"`{field_name}` must start with `http://` or `https://`.")


@dataclass(frozen=True, slots=True)
class _ConfigField:
    """One configurable field: its `ReaderConfig` name and value kind."""

    name: str
    kind: str

    @property
    def env_key(self) -> str:
        return f"NOVELSHELF_{self.name.upper()}"


_CONFIG_FIELDS: tuple[_ConfigField, ...] = (
    _ConfigField("api_base_url", "string"),
    _ConfigField("wp_base_url", "string"),
    _ConfigField("data_dir", "path"),
    _ConfigField("per_page", "positive_int"),
    _ConfigField("timeout_seconds", "positive_number"),
    _ConfigField("min_request_interval_seconds", "non_negative_number"),
    _ConfigField("favorites_key", "string"),
    _ConfigField("log_level", "level"),
)
_YAML_ONLY_KEYS = frozenset({"extra"})


class ConfigLoader:
    """Factory methods for creating `ReaderConfig` from external sources.

    YAML files and `NOVELSHELF_*` variables share one field table, so a value
    is coerced the same way whichever source provides it. Blank values fall
    back to the defaults.
    """

    @staticmethod
    def load(config_path: Path | None, env: Mapping[str, str] | None = None) -> ReaderConfig:
        """Load from YAML when a path is given, otherwise from environment variables."""

        if config_path is not None:
            return ConfigLoader.from_yaml(config_path)
        return ConfigLoader.from_env(env)

    @staticmethod
    def from_yaml(path: Path) -> ReaderConfig:
        """Create a validated config from a YAML file."""

        label = f"YAML `{path}`"
        try:
            payload = yaml.safe_load(path.read_text(encoding="utf-8"))
        except yaml.YAMLError as exc:
            raise ValueError(f"{label} is not valid YAML: {exc}") from exc
        if payload is None:
            payload = {}
        if not isinstance(payload, Mapping):
            raise ValueError(f"{label} must contain a top-level mapping/object.")

        known = {item.name for item in _CONFIG_FIELDS} | _YAML_ONLY_KEYS
        unknown = sorted(str(key) for key in payload if key not in known)
        if unknown:
            raise ValueError(f"{label} includes unsupported key(s): {', '.join(unknown)}.")

        values = ConfigLoader._collect(
            (item, payload[item.name], f"{label} field `{item.name}`")
            for item in _CONFIG_FIELDS
            if item.name in payload
        )
        values["extra"] = ConfigLoader._string_map(payload.get("extra"), f"{label} field `extra`")
        return ConfigLoader._build(values)

    @staticmethod
    def from_env(env: Mapping[str, str] | None = None) -> ReaderConfig:
        """Create a validated config from `NOVELSHELF_*` environment variables."""

        env_map: Mapping[str, str] = os.environ if env is None else env
        values = ConfigLoader._collect(
            (item, env_map[item.env_key], f"Environment variable `{item.env_key}`")
            for item in _CONFIG_FIELDS
            if item.env_key in env_map
        )
        return ConfigLoader._build(values)

    @staticmethod
    def _build(values: dict[str, Any]) -> ReaderConfig:
        config = ReaderConfig(**values)
        config.validate()
        return config

    @staticmethod
    def _collect(items: Iterable[tuple[_ConfigField, object, str]]) -> dict[str, Any]:
        """Coerce raw source values, dropping blanks so dataclass defaults apply."""

        values: dict[str, Any] = {}
        for item, raw_value, label in items:
            coerced = ConfigLoader._coerce(item.kind, raw_value, label)
            if coerced is not None:
                values[item.name] = coerced
        return values

    @staticmethod
    def _coerce(kind: str, raw_value: object, label: str) -> object | None:
        """Convert one raw YAML/env value into the field's type."""

        if kind in {"positive_int", "positive_number", "non_negative_number"}:
            return ConfigLoader._number(kind, raw_value, label)
        text = normalize_optional_string(raw_value)
        if text is None:
            return None
        if kind == "path":
            return Path(text).expanduser()
        if kind == "level":
            return text.upper()
        return text

    @staticmethod
    def _number(kind: str, raw_value: object, label: str) -> int | float | None:
        requirement = {
            "positive_int": "a positive integer",
            "positive_number": "a positive number",
            "non_negative_number": "a non-negative number",
        }[kind]
        if isinstance(raw_value, bool):
            raise ValueError(f"{label} must be {requirement}.")
        if isinstance(raw_value, int | float):
            parsed: int | float = raw_value
        else:
            text = normalize_optional_string(raw_value)
            if text is None:
                return None
            try:
                parsed = int(text) if kind == "positive_int" else float(text)
            except ValueError as exc:
                raise ValueError(f"{label} must be {requirement}.") from exc

        if kind == "positive_int":
            if isinstance(parsed, float) or parsed <= 0:
                raise ValueError(f"{label} must be {requirement}.")
            return parsed
        if parsed < 0 or (parsed == 0 and kind == "positive_number"):
            raise ValueError(f"{label} must be {requirement}.")
        return float(parsed)

    @staticmethod
    def _string_map(raw: object, label: str) -> dict[str, str]:
        """Read an optional mapping with non-empty string keys and values."""

        if raw is None:
            return {}
        if not isinstance(raw, Mapping):
            raise ValueError(f"{label} must be a mapping/object.")

        normalized: dict[str, str] = {}
        for raw_key, raw_value in raw.items():
            key = normalize_optional_string(raw_key)
            value = normalize_optional_string(raw_value)
            if key is None:
                raise ValueError(f"{label} contains a blank key.")
            if value is None:
                raise ValueError(f"{label} has a blank value for `{key}`.")
            normalized[key] = value
        return normalized
