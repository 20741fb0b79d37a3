"""Domain exceptions for reader flows and CLI diagnostics."""

from __future__ import annotations


class ReaderStageError(RuntimeError):
    """Raised when a reader step fails in a way the user can act on.

    `stage` names the step (`config`, `series`, `read-input`, ...), `detail`
    says what went wrong, and `hint` is an optional next action.
    """

    def __init__(
        self,
        *,
        stage: str,
        detail: str,
        hint: str | None = None,
    ) -> None:
        super().__init__(detail)
        self.stage = stage
        self.detail = detail
        self.hint = hint

    def headline(self, command_name: str) -> str:
        """Return the one-line failure summary shown for a CLI command."""

        return f"{command_name} failed at stage `{self.stage}`: {self.detail}"
