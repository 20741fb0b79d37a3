"""Unit tests for the requests-based content API client."""

from __future__ import annotations

import pytest

from novelshelf.api import client as api_client
from novelshelf.api.client import ContentAPIError, LightNovelClient
from novelshelf.api.rate_limiter import RateLimiter
from tests.fake_api import API_BASE, WP_BASE, FakeContentAPI


def _client() -> LightNovelClient:
    return LightNovelClient(api_base_url=f"{API_BASE}/", wp_base_url=WP_BASE, timeout_seconds=5.0)


def test_list_series_parses_page_and_total_pages(fake_api: FakeContentAPI) -> None:
    """Series listing should map `novels` and `total_pages` into a typed page."""

    fake_api.add(
        f"{API_BASE}/series",
        {
            "novels": [
                {
                    "id": 7,
                    "name": "Sword Saint",
                    "cover_image": "https://img.test/7.jpg",
                    "description": "<p>Hero&nbsp;story</p>",
                    "last_update": "2 hours ago",
                },
                {"id": "8", "name": "Second"},
            ],
            "total_pages": 3,
        },
        params={"page": 2, "per_page": 20},
    )

    page = _client().list_series(page=2, per_page=20)

    assert [novel.id for novel in page.novels] == [7, 8]
    assert page.novels[0].description == "<p>Hero&nbsp;story</p>"
    assert page.novels[1].cover_image == ""
    assert page.page == 2
    assert page.total_pages == 3
    assert page.has_more is True
    assert fake_api.calls == [(f"{API_BASE}/series", {"page": 2, "per_page": 20})]


def test_list_series_defaults_missing_fields(fake_api: FakeContentAPI) -> None:
    """A payload without `novels`/`total_pages` should be an empty, final page."""

    fake_api.add(f"{API_BASE}/series", {}, params={"page": 1, "per_page": 20})

    page = _client().list_series()

    assert page.novels == []
    assert page.total_pages == 1
    assert page.has_more is False


def test_get_series_parses_chapters(fake_api: FakeContentAPI) -> None:
    """Series details should include chapter refs in API order."""

    fake_api.add(
        f"{API_BASE}/series/7",
        {
            "id": 7,
            "name": "Sword Saint",
            "description": "<p>Intro</p>",
            "chapters": [{"id": 101, "title": "Chapter 1"}, {"id": 102, "title": "Chapter 2"}],
        },
    )

    details = _client().get_series(7)

    assert details.name == "Sword Saint"
    assert [chapter.id for chapter in details.chapters] == [101, 102]
    assert details.chapters[0].title == "Chapter 1"


def test_get_post_reads_rendered_fields(fake_api: FakeContentAPI) -> None:
    """WordPress posts should expose `title.rendered` and `content.rendered`."""

    fake_api.add(
        f"{WP_BASE}/posts/101",
        {
            "id": 101,
            "title": {"rendered": " Chapter 1 "},
            "content": {"rendered": "<p>Once upon a time</p>"},
            "categories": [55, "x"],
            "date": "2024-01-01T10:00:00",
        },
    )

    post = _client().get_post(101)

    assert post.title == "Chapter 1"
    assert post.content == "<p>Once upon a time</p>"
    assert post.categories == [55]
    assert post.date == "2024-01-01T10:00:00"


def test_list_category_posts_sorts_by_date(fake_api: FakeContentAPI) -> None:
    """Category posts should be returned oldest first."""

    fake_api.add(
        f"{WP_BASE}/posts",
        [
            {"id": 3, "title": {"rendered": "C3"}, "date": "2024-03-01T00:00:00"},
            {"id": 1, "title": {"rendered": "C1"}, "date": "2024-01-01T00:00:00"},
            {"id": 2, "title": {"rendered": "C2"}, "date": "2024-02-01T00:00:00"},
        ],
        params={"categories": 55, "per_page": 200},
    )

    refs = _client().list_category_posts(55)

    assert [ref.id for ref in refs] == [1, 2, 3]
    assert [ref.title for ref in refs] == ["C1", "C2", "C3"]


def test_not_found_maps_to_content_api_error(fake_api: FakeContentAPI) -> None:
    """HTTP 404 should raise a `not_found` error with the status code."""

    with pytest.raises(ContentAPIError, match=r"Content not found \(HTTP 404\)") as exc_info:
        _client().get_series(999)

    assert exc_info.value.failure_kind == "not_found"
    assert exc_info.value.status_code == 404


def test_server_error_maps_to_http_error(fake_api: FakeContentAPI) -> None:
    """HTTP 5xx should raise a generic `http_error`."""

    fake_api.add(f"{API_BASE}/series/7", {"message": "boom"}, status_code=500)

    with pytest.raises(ContentAPIError) as exc_info:
        _client().get_series(7)

    assert exc_info.value.failure_kind == "http_error"
    assert exc_info.value.status_code == 500


def test_transport_failures_are_classified(fake_api: FakeContentAPI) -> None:
    """Timeouts and connection errors should map to distinct failure kinds."""

    fake_api.fail(f"{WP_BASE}/posts/1", api_client.requests.Timeout("slow"))
    fake_api.fail(f"{WP_BASE}/posts/2", api_client.requests.ConnectionError("network down"))

    with pytest.raises(ContentAPIError, match="timed out") as timeout_info:
        _client().get_post(1)
    with pytest.raises(ContentAPIError, match="network down") as transport_info:
        _client().get_post(2)

    assert timeout_info.value.failure_kind == "timeout"
    assert transport_info.value.failure_kind == "transport"


def test_invalid_payloads_raise_invalid_payload(fake_api: FakeContentAPI) -> None:
    """Non-JSON bodies and records without ids should be rejected."""

    fake_api.add(f"{WP_BASE}/posts/1", b"<html>maintenance</html>")
    fake_api.add(f"{WP_BASE}/posts/2", {"title": {"rendered": "no id"}})
    fake_api.add(f"{API_BASE}/series/3", ["not", "an", "object"])

    for call in (
        lambda: _client().get_post(1),
        lambda: _client().get_post(2),
        lambda: _client().get_series(3),
    ):
        with pytest.raises(ContentAPIError) as exc_info:
            call()
        assert exc_info.value.failure_kind == "invalid_payload"


def test_client_paces_requests_per_host(fake_api: FakeContentAPI) -> None:
    """The rate limiter should be acquired with the request host before each call."""

    acquired: list[str] = []

    class _RecordingLimiter(RateLimiter):
        def acquire(self, key: str) -> None:
            acquired.append(key)

    fake_api.add(f"{API_BASE}/series/7", {"id": 7, "name": "N"})
    client = LightNovelClient(
        api_base_url=API_BASE,
        wp_base_url=WP_BASE,
        rate_limiter=_RecordingLimiter(),
    )

    client.get_series(7)

    assert acquired == ["novels.test"]


def test_rate_limiter_sleeps_until_interval_elapsed() -> None:
    """Back-to-back acquisitions for one key should wait for the remaining interval."""

    now = [10.0]
    sleeps: list[float] = []

    def _sleep(seconds: float) -> None:
        sleeps.append(seconds)
        now[0] += seconds

    limiter = RateLimiter(min_interval_seconds=1.0, clock=lambda: now[0], sleeper=_sleep)

    limiter.acquire("host")
    now[0] += 0.25
    assert limiter.remaining("host") == 0.75
    assert limiter.remaining("other") == 0.0
    limiter.acquire("host")
    limiter.acquire_for("https://other.test/wp-json/wp/v2/posts/1")

    assert sleeps == [0.75]
    assert limiter.remaining("host") == 1.0
