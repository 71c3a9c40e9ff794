"""Document open/save/new operations backing the command surface."""

from __future__ import annotations

import logging as py_logging
from collections.abc import Callable

from focuswrite.errors import FocusWriteError
from focuswrite.history import RecentFileRegistry
from focuswrite.results import CommandResult
from focuswrite.storage import Pickers, StorageIO

logger = py_logging.getLogger(__name__)

UNTITLED_FILE_NAME = "untitled.txt"


class DocumentService:
    """Reads and writes whole documents and records them as recent files."""

    def __init__(
        self,
        registry: RecentFileRegistry,
        pickers: Pickers,
        storage: StorageIO,
    ) -> None:
        self._registry = registry
        self._pickers = pickers
        self._storage = storage

    def open(self) -> CommandResult:
        picked = self._pick("open", self._pickers.pick_open_file)
        if isinstance(picked, CommandResult):
            return picked
        return self.read_by_path(picked)

    def read_by_path(self, path: str) -> CommandResult:
        try:
            content = self._storage.read_text(path)
            file_name = self._storage.basename(path)
            self._registry.add_entry(path, file_name)
        except (OSError, UnicodeError, FocusWriteError) as exc:
            logger.warning("Failed to read document path=%s error=%s", path, exc)
            return CommandResult.failure(_describe(exc))
        return CommandResult.ok(filePath=path, fileName=file_name, content=content)

    def save(self, file_path: str, content: str) -> CommandResult:
        if not file_path:
            picked = self._pick(
                "save", lambda: self._pickers.pick_save_location(UNTITLED_FILE_NAME)
            )
            if isinstance(picked, CommandResult):
                return picked
            file_path = picked
        return self._write(file_path, content)

    def new(self) -> CommandResult:
        picked = self._pick("new", lambda: self._pickers.pick_save_location(UNTITLED_FILE_NAME))
        if isinstance(picked, CommandResult):
            return picked
        result = self._write(picked, "")
        if not result.success:
            return result
        return CommandResult.ok(**result.payload, content="")

    def _write(self, file_path: str, content: str) -> CommandResult:
        try:
            self._storage.write_text(file_path, content)
            file_name = self._storage.basename(file_path)
            self._registry.add_entry(file_path, file_name)
        except (OSError, UnicodeError, FocusWriteError) as exc:
            logger.error("Failed to save document path=%s error=%s", file_path, exc)
            return CommandResult.failure(_describe(exc))
        return CommandResult.ok(filePath=file_path, fileName=file_name)

    @staticmethod
    def _pick(action: str, picker: Callable[[], str | None]) -> str | CommandResult:
        try:
            picked = picker()
        except FocusWriteError as exc:
            logger.error("File picker for %s unavailable: %s", action, exc.message)
            return CommandResult.failure(exc.message)
        if not picked:
            logger.debug("File picker for %s cancelled", action)
            return CommandResult.cancelled()
        return picked


def _describe(exc: Exception) -> str:
    if isinstance(exc, FocusWriteError):
        return exc.message
    if isinstance(exc, OSError) and exc.strerror and exc.filename:
        return f"{exc.strerror}: {exc.filename}"
    return str(exc) or exc.__class__.__name__
