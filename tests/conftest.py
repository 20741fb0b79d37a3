"""Shared pytest fixtures for the novelshelf test suite."""

from __future__ import annotations

from pathlib import Path

import pytest

from tests.fake_api import API_BASE, WP_BASE, FakeContentAPI


@pytest.fixture
def fake_api(monkeypatch: pytest.MonkeyPatch) -> FakeContentAPI:
    """Patch `requests.get` in the API client with an in-memory route table."""

    api = FakeContentAPI()
    monkeypatch.setattr("novelshelf.api.client.requests.get", api.get)
    return api


@pytest.fixture
def reader_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Path:
    """Point CLI configuration at the fake API hosts and a temporary data directory."""

    data_dir = tmp_path / "data"
    for key in (
        "NOVELSHELF_PER_PAGE",
        "NOVELSHELF_TIMEOUT_SECONDS",
        "NOVELSHELF_FAVORITES_KEY",
        "NOVELSHELF_LOG_LEVEL",
    ):
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("NOVELSHELF_API_BASE_URL", API_BASE)
    monkeypatch.setenv("NOVELSHELF_WP_BASE_URL", WP_BASE)
    monkeypatch.setenv("NOVELSHELF_DATA_DIR", str(data_dir))
    monkeypatch.setenv("NOVELSHELF_MIN_REQUEST_INTERVAL_SECONDS", "0")
    return data_dir
