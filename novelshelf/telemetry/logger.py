"""Structured stage logging for reader commands.

Responsibilities:
- Format `[stage] level=... stage=... event=...` lines with sorted, shell-safe
  context tokens and no content payloads (chapter text, descriptions).
- Route every line through `loguru` so library code and CLI commands share one
  sink and one level threshold.
"""

from __future__ import annotations

import sys
from typing import TextIO

from loguru import logger

_SAFE_PUNCTUATION = frozenset("-_.:/")


def _token(value: object) -> str:
    raw = str(value).strip()
    if not raw:
        return "none"
    return "".join(ch if ch.isalnum() or ch in _SAFE_PUNCTUATION else "_" for ch in raw)


def stage_line(level: str, stage: str, event: str, **context: object) -> str:
    """Render one stage log line; context keys are emitted in sorted order."""

    parts = [f"[stage] level={level} stage={stage} event={event}"]
    parts.extend(f"{key}={_token(context[key])}" for key in sorted(context))
    return " ".join(parts)


def configure_logging(level: str = "WARNING", sink: TextIO | None = None) -> None:
    """Replace loguru handlers with a single plain-message sink at `level`."""

    logger.remove()
    logger.add(sink or sys.stderr, format="{message}", level=level, colorize=False)


def warn_stage(stage: str, event: str, **context: object) -> None:
    """Log a recoverable problem; callers continue with a fallback value."""

    logger.warning(stage_line("WARNING", stage, event, **context))


class RunLogger:
    """Emit start, complete and failure events for one CLI command run."""

    def __init__(self, level: str = "INFO", sink: TextIO | None = None) -> None:
        """Install the shared loguru sink at `level` for this run."""

        configure_logging(level, sink)

    def log_stage_start(self, stage: str, **context: object) -> None:
        """Log that `stage` began."""

        logger.info(stage_line("INFO", stage, "start", **context))

    def log_stage_complete(self, stage: str, **context: object) -> None:
        """Log that `stage` finished successfully."""

        logger.info(stage_line("INFO", stage, "complete", **context))

    def log_stage_failure(self, stage: str, error_type: str) -> None:
        """Log that `stage` stopped with an exception of type `error_type`."""

        logger.error(stage_line("ERROR", stage, "failure", error_type=error_type))
