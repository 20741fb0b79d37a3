"""Command-line interface for novelshelf.

Responsibilities:
- Expose user-facing commands for browsing, reading, and the favorites library.
- Convert CLI arguments into `ReaderConfig` and wire the API client and store.

Key public functions:
- `app`: Typer application instance.
- `main`: invoke the Typer application.
"""

from __future__ import annotations

from pathlib import Path
import sys
from typing import Annotated

import typer

from .api.client import LightNovelClient
from .api.rate_limiter import RateLimiter
from .cli_rendering import (
    echo_chapter,
    echo_library,
    echo_novel_row,
    echo_paragraphs,
    echo_series,
    exit_with_command_error,
)
from .config import ConfigLoader, ReaderConfig
from .errors import ReaderStageError
from .library.favorites import FavoritesLibrary
from .library.storage import KeyValueStore
from .reader.chapter import ChapterReader
from .reader.feed import UpdatesFeed
from .reader.series import SeriesView
from .telemetry.logger import RunLogger, configure_logging
from .text.normalizer import join, normalize

app = typer.Typer(
    name="novelshelf",
    no_args_is_help=True,
    help="Light-novel reader CLI.",
)

ConfigFileOption = Annotated[
    Path | None,
    typer.Option("--config", help="Path to YAML config file with reader defaults."),
]
DataDirOption = Annotated[
    Path | None,
    typer.Option("--data-dir", help="Directory for the local library store."),
]
VerboseOption = Annotated[
    bool,
    typer.Option("--verbose", "-v", help="Emit stage logs on stderr."),
]


def _load_config(
    config_file: Path | None,
    data_dir: Path | None = None,
    verbose: bool = False,
    **overrides: object,
) -> ReaderConfig:
    """Load YAML or environment config, apply CLI overrides, and map failures to stage errors."""

    try:
        loaded = ConfigLoader.load(config_file)
        config = loaded.with_overrides(
            data_dir=data_dir,
            log_level="INFO" if verbose else None,
            **overrides,
        )
    except FileNotFoundError as exc:
        raise ReaderStageError(
            stage="config",
            detail=f"Config file not found: `{config_file}`.",
            hint="Provide an existing path via `--config <path.yaml>`.",
        ) from exc
    except ValueError as exc:
        source = f"config file `{config_file}`" if config_file is not None else "configuration"
        raise ReaderStageError(
            stage="config",
            detail=f"Invalid {source}: {exc}",
            hint="Fix config values (YAML keys or `NOVELSHELF_*` variables) and rerun.",
        ) from exc
    return config


def _build_client(config: ReaderConfig) -> LightNovelClient:
    return LightNovelClient(
        api_base_url=config.api_base_url,
        wp_base_url=config.wp_base_url,
        timeout_seconds=config.timeout_seconds,
        rate_limiter=RateLimiter(min_interval_seconds=config.min_request_interval_seconds),
    )


def _build_library(config: ReaderConfig) -> FavoritesLibrary:
    return FavoritesLibrary(KeyValueStore(config.store_path), key=config.favorites_key)


@app.command("updates")
def updates_command(
    page: Annotated[int, typer.Option("--page", min=1, help="First page to show.")] = 1,
    pages: Annotated[
        int, typer.Option("--pages", min=1, help="Number of consecutive pages to load.")
    ] = 1,
    per_page: Annotated[
        int | None, typer.Option("--per-page", min=1, help="Novels per page.")
    ] = None,
    preview_lines: Annotated[
        int,
        typer.Option("--preview-lines", min=0, help="Synopsis lines per novel (0 = full)."),
    ] = 3,
    config_file: ConfigFileOption = None,
    verbose: VerboseOption = False,
) -> None:
    """List recently updated novels with short synopsis previews."""

    run_logger: RunLogger | None = None
    try:
        config = _load_config(config_file, verbose=verbose, per_page=per_page)
        run_logger = RunLogger(level=config.log_level)
        run_logger.log_stage_start("updates", page=page, pages=pages)
        feed = UpdatesFeed(_build_client(config), per_page=config.per_page)
        feed.start_at(page)
        for _ in range(pages):
            if not feed.has_more:
                break
            feed.load_more()
            if feed.last_error is not None:
                raise feed.last_error
        run_logger.log_stage_complete("updates", novels=len(feed.novels))
    except Exception as exc:
        if run_logger is not None:
            run_logger.log_stage_failure("updates", type(exc).__name__)
        exit_with_command_error("updates", exc)

    if not feed.novels:
        typer.echo("No novels found.")
        return
    for novel in feed.novels:
        echo_novel_row(novel, feed.preview(novel), preview_lines)
    typer.echo("")
    typer.echo(f"Page {feed.page}/{feed.total_pages}")
    if feed.has_more:
        typer.echo(f"More: novelshelf updates --page {feed.page + 1}")


@app.command("series")
def series_command(
    series_id: Annotated[int, typer.Argument(help="Series id from `updates` or `library`.")],
    config_file: ConfigFileOption = None,
    data_dir: DataDirOption = None,
    verbose: VerboseOption = False,
) -> None:
    """Show series details, description, and chapter list."""

    run_logger: RunLogger | None = None
    try:
        config = _load_config(config_file, data_dir=data_dir, verbose=verbose)
        run_logger = RunLogger(level=config.log_level)
        run_logger.log_stage_start("series", series=series_id)
        details = _build_client(config).get_series(series_id)
        view = SeriesView.build(details, _build_library(config))
        run_logger.log_stage_complete("series", chapters=len(view.chapters))
    except Exception as exc:
        if run_logger is not None:
            run_logger.log_stage_failure("series", type(exc).__name__)
        exit_with_command_error("series", exc)

    echo_series(view)


@app.command("read")
def read_command(
    chapter_id: Annotated[
        int | None,
        typer.Argument(help="Chapter post id. Omit with `--series` to open the first chapter."),
    ] = None,
    series_id: Annotated[
        int | None,
        typer.Option("--series", help="Series id used for the chapter list and navigation."),
    ] = None,
    config_file: ConfigFileOption = None,
    verbose: VerboseOption = False,
) -> None:
    """Render one chapter as clean paragraphs with previous/next hints."""

    run_logger: RunLogger | None = None
    try:
        if chapter_id is None and series_id is None:
            raise ReaderStageError(
                stage="read-input",
                detail="Provide a chapter id or `--series <id>`.",
                hint="Use `novelshelf series <id>` to list chapter ids.",
            )
        config = _load_config(config_file, verbose=verbose)
        run_logger = RunLogger(level=config.log_level)
        run_logger.log_stage_start("read", chapter=chapter_id, series=series_id)
        client = _build_client(config)
        chapters = None
        if series_id is not None:
            details = client.get_series(series_id)
            chapters = details.chapters
            if chapter_id is None:
                chapter_id = SeriesView(details=details).first_chapter().id
        view = ChapterReader(client).open(chapter_id, chapters=chapters)
        run_logger.log_stage_complete(
            "read", chapter=view.post.id, paragraphs=len(view.paragraphs)
        )
    except Exception as exc:
        if run_logger is not None:
            run_logger.log_stage_failure("read", type(exc).__name__)
        exit_with_command_error("read", exc)

    echo_chapter(view)


@app.command("library")
def library_command(
    config_file: ConfigFileOption = None,
    data_dir: DataDirOption = None,
) -> None:
    """List novels saved in the local library."""

    try:
        config = _load_config(config_file, data_dir=data_dir)
        configure_logging(config.log_level)
        entries = _build_library(config).load()
    except Exception as exc:
        exit_with_command_error("library", exc)

    echo_library(entries)


@app.command("favorite")
def favorite_command(
    series_id: Annotated[int, typer.Argument(help="Series id to add or remove.")],
    config_file: ConfigFileOption = None,
    data_dir: DataDirOption = None,
    verbose: VerboseOption = False,
) -> None:
    """Toggle a novel in the local library."""

    try:
        config = _load_config(config_file, data_dir=data_dir, verbose=verbose)
        configure_logging(config.log_level)
        library = _build_library(config)
        details = _build_client(config).get_series(series_id)
        is_favorite = SeriesView.build(details, library).toggle_favorite(library)
    except Exception as exc:
        exit_with_command_error("favorite", exc)

    if is_favorite:
        typer.echo(f"Added to library: {details.name}")
    else:
        typer.echo(f"Removed from library: {details.name}")


@app.command("unfavorite")
def unfavorite_command(
    series_id: Annotated[int, typer.Argument(help="Series id to remove.")],
    config_file: ConfigFileOption = None,
    data_dir: DataDirOption = None,
) -> None:
    """Remove a novel from the local library without contacting the API."""

    try:
        config = _load_config(config_file, data_dir=data_dir)
        configure_logging(config.log_level)
        library = _build_library(config)
        present = library.contains(series_id)
        if present:
            library.remove(series_id)
    except Exception as exc:
        exit_with_command_error("unfavorite", exc)

    if present:
        typer.echo(f"Removed from library: {series_id}")
    else:
        typer.echo(f"Not in library: {series_id}")


@app.command("clean")
def clean_command(
    source: Annotated[
        Path | None,
        typer.Argument(help="HTML file to normalize. Reads stdin when omitted."),
    ] = None,
    joined: Annotated[
        bool,
        typer.Option("--join", help="Print one blank-line-joined preview string."),
    ] = False,
) -> None:
    """Convert HTML markup into plain-text paragraphs."""

    try:
        if source is None:
            raw = sys.stdin.read()
        else:
            try:
                raw = source.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as exc:
                reason = getattr(exc, "strerror", None) or exc
                raise ReaderStageError(
                    stage="clean-input",
                    detail=f"Cannot read `{source}`: {reason}",
                    hint="Pass an existing UTF-8 HTML file or pipe markup on stdin.",
                ) from exc
    except Exception as exc:
        exit_with_command_error("clean", exc)

    if joined:
        text = join(raw)
        if text:
            typer.echo(text)
        return
    echo_paragraphs(normalize(raw))


@app.command("settings")
def settings_command(
    config_file: ConfigFileOption = None,
    data_dir: DataDirOption = None,
) -> None:
    """Show the effective configuration."""

    try:
        config = _load_config(config_file, data_dir=data_dir)
    except Exception as exc:
        exit_with_command_error("settings", exc)

    for key, value in config.as_display_rows():
        typer.echo(f"{key}: {value}")


def main() -> None:
    """CLI entrypoint for console scripts."""
    app()


if __name__ == "__main__":
    main()
