"""CLI output and error rendering helpers.

This module centralizes user-facing CLI presentation for command diagnostics,
feed rows, series details, chapter text, and the favorites library.
"""

from __future__ import annotations

from typing import NoReturn

import typer

from .api.client import ContentAPIError
from .errors import ReaderStageError
from .models.datatypes import ChapterRef, FavoriteEntry, NovelSummary
from .reader.chapter import ChapterView
from .reader.series import SeriesView


_CONTENT_API_HINTS = {
    "not_found": "Check the id; the content may have been removed.",
    "timeout": "The content service is slow; retry or raise `timeout_seconds`.",
    "transport": "Check your network connection and `api_base_url`/`wp_base_url`.",
    "invalid_payload": "The content service returned unexpected data; retry later.",
}


def exit_with_command_error(command_name: str, exc: Exception) -> NoReturn:
    """Print concise diagnostics for command failures and exit with code 1."""

    if isinstance(exc, ReaderStageError):
        typer.secho(exc.headline(command_name), fg=typer.colors.RED, err=True)
        if exc.hint:
            typer.secho(f"Hint: {exc.hint}", fg=typer.colors.YELLOW, err=True)
    elif isinstance(exc, ContentAPIError):
        typer.secho(
            f"{command_name} failed at stage `api`: {exc}",
            fg=typer.colors.RED,
            err=True,
        )
        hint = _CONTENT_API_HINTS.get(exc.failure_kind)
        if hint:
            typer.secho(f"Hint: {hint}", fg=typer.colors.YELLOW, err=True)
    else:
        typer.secho(f"{command_name} failed: {exc}", fg=typer.colors.RED, err=True)
    raise typer.Exit(code=1) from exc


def truncate_lines(text: str, max_lines: int) -> str:
    """Keep the first `max_lines` lines of a preview, marking cut text with an ellipsis."""

    if max_lines <= 0:
        return text
    lines = text.split("\n")
    if len(lines) <= max_lines:
        return text
    return "\n".join(lines[:max_lines]) + " ..."


def echo_paragraphs(paragraphs: list[str]) -> None:
    """Print paragraphs separated by one blank line."""

    for position, paragraph in enumerate(paragraphs):
        if position:
            typer.echo("")
        typer.echo(paragraph)


def echo_novel_row(novel: NovelSummary, preview: str, preview_lines: int) -> None:
    """Print one updates-feed card."""

    typer.secho(f"{novel.id}. {novel.name}", bold=True)
    if preview:
        for line in truncate_lines(preview, preview_lines).split("\n"):
            typer.echo(f"   {line}" if line else "")
    if novel.last_update:
        typer.echo(f"   Updated: {novel.last_update}")


def echo_series(view: SeriesView) -> None:
    """Print series header, description, and chapter list."""

    details = view.details
    typer.secho(details.name or f"Series {details.id}", bold=True)
    if details.cover_image:
        typer.echo(f"Cover: {details.cover_image}")
    typer.echo(f"In library: {'yes' if view.is_favorite else 'no'}")
    if view.paragraphs:
        typer.echo("")
        echo_paragraphs(view.paragraphs)
    typer.echo("")
    if not view.chapters:
        typer.echo("No chapters yet.")
        return
    typer.echo(f"Chapters ({len(view.chapters)}):")
    echo_chapter_list(view.chapters)


def echo_chapter_list(chapters: list[ChapterRef]) -> None:
    """Print 1-based chapter rows with their post ids."""

    for position, chapter in enumerate(chapters, start=1):
        typer.echo(f"{position}. {chapter.title} [id={chapter.id}]")


def echo_chapter(view: ChapterView) -> None:
    """Print chapter title, body paragraphs, and navigation hints."""

    typer.secho(view.post.title or f"Chapter {view.post.id}", bold=True)
    typer.echo("")
    if view.paragraphs:
        echo_paragraphs(view.paragraphs)
    else:
        typer.echo("(This chapter has no text.)")
    previous_chapter = view.previous()
    next_chapter = view.next()
    if previous_chapter is None and next_chapter is None:
        return
    typer.echo("")
    if previous_chapter is not None:
        typer.echo(f"Previous: {previous_chapter.title} [id={previous_chapter.id}]")
    if next_chapter is not None:
        typer.echo(f"Next: {next_chapter.title} [id={next_chapter.id}]")


def echo_library(entries: list[FavoriteEntry]) -> None:
    """Print favorites in stored order (newest first)."""

    if not entries:
        typer.echo("No novels in the library yet.")
        return
    for entry in entries:
        typer.echo(f"{entry.id}. {entry.name}")
