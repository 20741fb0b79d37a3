"""Infinite-scroll updates feed.

Responsibilities:
- Track page cursor, loaded novels, and whether more pages exist.
- Append pages on `load_more` and replace the list on `refresh`.
- Keep the last good state when a page fetch fails.
"""

from __future__ import annotations

from ..api.client import ContentAPIError, LightNovelClient
from ..models.datatypes import NovelSummary
from ..telemetry.logger import warn_stage
from ..text.normalizer import join


class UpdatesFeed:
    """Paginated novel list backed by the series listing endpoint."""

    def __init__(self, client: LightNovelClient, per_page: int = 20) -> None:
        self.client = client
        self.per_page = per_page
        self.page = 0
        self.novels: list[NovelSummary] = []
        self.has_more = True
        self.total_pages = 1
        self.loading = False
        self.last_error: ContentAPIError | None = None

    def start_at(self, page: int) -> None:
        """Position the cursor so the next `load_more` fetches `page`."""

        self.page = max(page, 1) - 1
        self.novels = []
        self.has_more = True

    def load_more(self) -> list[NovelSummary]:
        """Fetch the next page and return the novels it added."""

        if self.loading or not self.has_more:
            return []
        return self._fetch(self.page + 1, refresh=False)

    def refresh(self) -> list[NovelSummary]:
        """Reload page 1 and replace the loaded novels."""

        if self.loading:
            return []
        return self._fetch(1, refresh=True)

    def _fetch(self, page: int, refresh: bool) -> list[NovelSummary]:
        self.loading = True
        try:
            result = self.client.list_series(page=page, per_page=self.per_page)
        except ContentAPIError as exc:
            self.last_error = exc
            warn_stage("updates", "fetch-failed", page=page, failure_kind=exc.failure_kind)
            return []
        finally:
            self.loading = False

        self.last_error = None
        self.novels = list(result.novels) if refresh else [*self.novels, *result.novels]
        self.has_more = result.has_more
        self.total_pages = result.total_pages
        self.page = page
        return list(result.novels)

    @staticmethod
    def preview(novel: NovelSummary) -> str:
        """Return the cleaned synopsis used for short card previews."""

        return join(novel.description)
