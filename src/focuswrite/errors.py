"""FocusWrite failures and the process exit codes the CLI reports for them."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum


class ExitCode(IntEnum):
    SUCCESS = 0
    INVALID_ARGS = 2
    CONFIG_ERROR = 3
    RUNTIME_ERROR = 4
    STORAGE_ERROR = 5
    VALIDATION_ERROR = 6
    CANCELED = 7
    UNSUPPORTED_PLATFORM = 8


@dataclass
class FocusWriteError(Exception):
    """A failure the command surface turns into ``{success: false}``.

    The CLI prints ``message`` and ``hint`` and exits with ``code``.
    """

    message: str
    code: ExitCode = ExitCode.RUNTIME_ERROR
    hint: str = ""

    def __str__(self) -> str:
        if self.hint:
            return f"{self.message} Hint: {self.hint}"
        return self.message


def user_facing_error(message: str, *, hint: str = "") -> str:
    if hint:
        return f"Error: {message}. Next step: {hint}"
    return f"Error: {message}."
