"""Unit tests for CLI output and error rendering helpers."""

from __future__ import annotations

import pytest
import typer

from novelshelf.api.client import ContentAPIError
from novelshelf.cli_rendering import (
    echo_chapter,
    echo_library,
    exit_with_command_error,
    truncate_lines,
)
from novelshelf.errors import ReaderStageError
from novelshelf.models.datatypes import ChapterPost, ChapterRef, FavoriteEntry
from novelshelf.reader.chapter import ChapterView


def test_exit_with_command_error_renders_stage_error_with_hint(
    capsys: pytest.CaptureFixture[str],
) -> None:
    """Renderer should print stage diagnostics and hint before exiting with code 1."""

    error = ReaderStageError(
        stage="series",
        detail="Series `7` has no chapters.",
        hint="No chapters have been published for this novel yet.",
    )

    with pytest.raises(typer.Exit) as exc_info:
        exit_with_command_error("read", error)

    captured = capsys.readouterr()
    assert exc_info.value.exit_code == 1
    assert "read failed at stage `series`: Series `7` has no chapters." in captured.err
    assert "Hint: No chapters have been published for this novel yet." in captured.err


def test_exit_with_command_error_renders_content_api_failure_kind_hint(
    capsys: pytest.CaptureFixture[str],
) -> None:
    """API errors should be reported at the `api` stage with a kind-specific hint."""

    error = ContentAPIError(
        "Content not found (HTTP 404) for `https://novels.test/series/9`.",
        failure_kind="not_found",
        status_code=404,
    )

    with pytest.raises(typer.Exit) as exc_info:
        exit_with_command_error("series", error)

    captured = capsys.readouterr()
    assert exc_info.value.exit_code == 1
    assert "series failed at stage `api`: Content not found (HTTP 404)" in captured.err
    assert "Hint: Check the id; the content may have been removed." in captured.err


def test_exit_with_command_error_renders_non_stage_fallback(
    capsys: pytest.CaptureFixture[str],
) -> None:
    """Renderer should print fallback exception text for non-stage failures."""

    with pytest.raises(typer.Exit) as exc_info:
        exit_with_command_error("library", RuntimeError("disk on fire"))

    captured = capsys.readouterr()
    assert exc_info.value.exit_code == 1
    assert "library failed: disk on fire" in captured.err
    assert "Hint:" not in captured.err


@pytest.mark.parametrize(
    ("text", "max_lines", "expected"),
    [
        ("a\nb\nc", 2, "a\nb ..."),
        ("a\nb", 2, "a\nb"),
        ("a\nb\nc", 0, "a\nb\nc"),
    ],
)
def test_truncate_lines(text: str, max_lines: int, expected: str) -> None:
    """Previews longer than the line limit should be cut and marked."""

    assert truncate_lines(text, max_lines) == expected


def test_echo_chapter_prints_paragraphs_and_navigation(
    capsys: pytest.CaptureFixture[str],
) -> None:
    """Chapter output should separate paragraphs and list neighbours by id."""

    view = ChapterView(
        post=ChapterPost(id=2, title="Chapter 2", content=""),
        paragraphs=["First", "Second"],
        chapters=[
            ChapterRef(id=1, title="Chapter 1"),
            ChapterRef(id=2, title="Chapter 2"),
            ChapterRef(id=3, title="Chapter 3"),
        ],
    )

    echo_chapter(view)

    out = capsys.readouterr().out
    assert out == (
        "Chapter 2\n\nFirst\n\nSecond\n\n"
        "Previous: Chapter 1 [id=1]\nNext: Chapter 3 [id=3]\n"
    )


def test_echo_chapter_marks_empty_body(capsys: pytest.CaptureFixture[str]) -> None:
    """A chapter without text should say so and omit navigation when unlisted."""

    view = ChapterView(post=ChapterPost(id=5, title="", content=""), paragraphs=[])

    echo_chapter(view)

    assert capsys.readouterr().out == "Chapter 5\n\n(This chapter has no text.)\n"


def test_echo_library_lists_entries_or_empty_message(
    capsys: pytest.CaptureFixture[str],
) -> None:
    """Library output should keep stored order and explain an empty library."""

    echo_library([])
    echo_library([FavoriteEntry(id=2, name="Newer"), FavoriteEntry(id=1, name="Older")])

    assert capsys.readouterr().out == "No novels in the library yet.\n2. Newer\n1. Older\n"
