"""Runtime logging for reader commands."""

from .logger import RunLogger, configure_logging, stage_line, warn_stage

__all__ = ["RunLogger", "configure_logging", "stage_line", "warn_stage"]
