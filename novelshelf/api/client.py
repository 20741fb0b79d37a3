"""HTTP client for the light-novel content API.

Responsibilities:
- Send GET requests to the series API and the WordPress posts API.
- Convert JSON payloads into typed records from `novelshelf.models`.
- Raise actionable `ContentAPIError` exceptions for CLI-level error mapping.
"""

from __future__ import annotations

import json
import socket
from typing import Any, Mapping

import requests

from ..models.datatypes import ChapterPost, ChapterRef, NovelDetails, NovelSummary, SeriesPage
from ..parsing import parse_optional_int
from .rate_limiter import RateLimiter


class ContentAPIError(RuntimeError):
    """Raised when a content API request fails or returns a malformed payload."""

    def __init__(
        self,
        message: str,
        *,
        failure_kind: str = "unknown",
        status_code: int | None = None,
    ) -> None:
        """Initialize error metadata for stage-aware diagnostics."""

        super().__init__(message)
        self.failure_kind = failure_kind
        self.status_code = status_code


class LightNovelClient:
    """Minimal requests-based client for series listings, details, and chapter posts."""

    _MAX_ERROR_MESSAGE_CHARS = 180
    _USER_AGENT = "novelshelf/0.1"

    def __init__(
        self,
        *,
        api_base_url: str,
        wp_base_url: str,
        timeout_seconds: float = 30.0,
        rate_limiter: RateLimiter | None = None,
    ) -> None:
        """Initialize base URLs, timeout, and request pacing."""

        self.api_base_url = api_base_url.rstrip("/")
        self.wp_base_url = wp_base_url.rstrip("/")
        self.timeout_seconds = timeout_seconds
        self.rate_limiter = rate_limiter or RateLimiter(min_interval_seconds=0.0)

    def list_series(self, page: int = 1, per_page: int = 20) -> SeriesPage:
        """Return one page of the updates feed."""

        payload = self._get_json(
            f"{self.api_base_url}/series",
            params={"page": page, "per_page": per_page},
        )
        if not isinstance(payload, Mapping):
            raise ContentAPIError(
                "Series listing payload must be a JSON object.",
                failure_kind="invalid_payload",
            )
        raw_novels = payload.get("novels") or []
        if not isinstance(raw_novels, list):
            raise ContentAPIError(
                "Series listing field `novels` must be a list.",
                failure_kind="invalid_payload",
            )
        novels = self._build_records(
            NovelSummary.from_payload,
            (item for item in raw_novels if isinstance(item, Mapping)),
        )
        total_pages = parse_optional_int(payload.get("total_pages")) or 1
        return SeriesPage(novels=novels, page=page, total_pages=total_pages)

    def get_series(self, series_id: int) -> NovelDetails:
        """Return full details of one series, including its chapter list."""

        payload = self._get_json(f"{self.api_base_url}/series/{series_id}")
        if not isinstance(payload, Mapping):
            raise ContentAPIError(
                f"Series `{series_id}` payload must be a JSON object.",
                failure_kind="invalid_payload",
            )
        return self._build_records(NovelDetails.from_payload, [payload])[0]

    def get_post(self, post_id: int) -> ChapterPost:
        """Return one chapter post with raw HTML content."""

        payload = self._get_json(f"{self.wp_base_url}/posts/{post_id}")
        if not isinstance(payload, Mapping):
            raise ContentAPIError(
                f"Post `{post_id}` payload must be a JSON object.",
                failure_kind="invalid_payload",
            )
        return self._build_records(ChapterPost.from_payload, [payload])[0]

    def list_category_posts(self, category_id: int, per_page: int = 200) -> list[ChapterRef]:
        """Return chapter refs of one category, oldest first."""

        payload = self._get_json(
            f"{self.wp_base_url}/posts",
            params={"categories": category_id, "per_page": per_page},
        )
        if not isinstance(payload, list):
            raise ContentAPIError(
                f"Category `{category_id}` posts payload must be a JSON list.",
                failure_kind="invalid_payload",
            )
        refs = self._build_records(
            ChapterRef.from_payload,
            (item for item in payload if isinstance(item, Mapping)),
        )
        return sorted(refs, key=lambda ref: ref.date or "")

    def _get_json(self, url: str, params: dict[str, Any] | None = None) -> Any:
        """Execute a GET request and decode the JSON body, mapping failures consistently."""

        self.rate_limiter.acquire_for(url)
        try:
            response = requests.get(
                url,
                params=params,
                headers={"Accept": "application/json", "User-Agent": self._USER_AGENT},
                timeout=self.timeout_seconds,
            )
            response.raise_for_status()
            body = bytes(response.content)
        except requests.HTTPError as exc:
            raise self._http_error_to_api_error(exc, url) from exc
        except requests.RequestException as exc:
            failure_kind = self._classify_transport_failure(exc)
            if failure_kind == "timeout":
                detail = f"Request to `{url}` timed out."
            else:
                detail = f"Request to `{url}` failed: {self._short_message(str(exc))}"
            raise ContentAPIError(detail, failure_kind=failure_kind) from exc

        try:
            return json.loads(body.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise ContentAPIError(
                f"Response from `{url}` is not valid JSON.",
                failure_kind="invalid_payload",
            ) from exc

    @staticmethod
    def _build_records(factory, items) -> list:
        """Build typed records, mapping payload shape errors to `ContentAPIError`."""

        try:
            return [factory(item) for item in items]
        except ValueError as exc:
            raise ContentAPIError(str(exc), failure_kind="invalid_payload") from exc

    @classmethod
    def _short_message(cls, text: str) -> str:
        """Normalize and cap user-facing error message length."""

        compact = " ".join(text.split())
        if len(compact) <= cls._MAX_ERROR_MESSAGE_CHARS:
            return compact
        return f"{compact[: cls._MAX_ERROR_MESSAGE_CHARS - 1]}..."

    @staticmethod
    def _classify_transport_failure(reason: object) -> str:
        """Classify network-layer failures into diagnostic kinds."""

        if isinstance(reason, TimeoutError | socket.timeout | requests.Timeout):
            return "timeout"
        return "transport"

    @staticmethod
    def _classify_http_failure(status_code: int) -> str:
        """Classify HTTP status codes into diagnostic kinds."""

        if status_code == 404:
            return "not_found"
        if status_code in {408, 504}:
            return "timeout"
        return "http_error"

    @classmethod
    def _http_error_to_api_error(cls, exc: requests.HTTPError, url: str) -> ContentAPIError:
        """Convert HTTP errors into normalized API exceptions with metadata."""

        status_code = exc.response.status_code if exc.response is not None else 0
        failure_kind = cls._classify_http_failure(status_code)
        headline = {
            "not_found": "Content not found",
            "timeout": "Content API timed out",
        }.get(failure_kind, "Content API request failed")
        return ContentAPIError(
            f"{headline} (HTTP {status_code}) for `{url}`.",
            failure_kind=failure_kind,
            status_code=status_code,
        )
