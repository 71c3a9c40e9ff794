"""Line-at-a-time writing session state machine."""

from __future__ import annotations

import logging as py_logging
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from enum import Enum

from focuswrite.config import ConfigStore
from focuswrite.documents import UNTITLED_FILE_NAME, DocumentService
from focuswrite.errors import FocusWriteError
from focuswrite.history import RecentFileDict, RecentFileRegistry
from focuswrite.results import CommandResult
from focuswrite.storage import StorageIO, parent_directory

logger = py_logging.getLogger(__name__)

FirstSaveHandler = Callable[[], CommandResult]


class SessionState(str, Enum):
    UNBOUND = "unbound"
    PENDING_FIRST_SAVE = "pending_first_save"
    BOUND = "bound"


def last_non_blank_line(content: str) -> str:
    lines = [line for line in content.splitlines() if line.strip()]
    return lines[-1] if lines else ""


class WritingSession:
    """A single document being written one committed line at a time.

    The session starts unbound. The first committed line hands control to a
    first-save handler that binds the document to a path; once bound, every
    commit writes the whole document back to that path.
    """

    def __init__(
        self,
        store: ConfigStore,
        registry: RecentFileRegistry,
        documents: DocumentService,
        storage: StorageIO,
    ) -> None:
        self._store = store
        self._registry = registry
        self._documents = documents
        self._storage = storage
        self.recent_files: list[RecentFileDict] = []
        self._negotiating = False
        self.is_loading = False
        self.clear_file()

    @property
    def state(self) -> SessionState:
        if self._negotiating:
            return SessionState.PENDING_FIRST_SAVE
        if self.file_path:
            return SessionState.BOUND
        return SessionState.UNBOUND

    @property
    def word_count(self) -> int:
        return sum(1 for char in self.full_content if not char.isspace())

    @property
    def display_file_name(self) -> str:
        return self.file_name or UNTITLED_FILE_NAME

    @property
    def has_unsaved_content(self) -> bool:
        return bool(self.full_content) and not self.file_path

    @property
    def work_directory(self) -> str:
        return self._store.get_work_directory()

    def snapshot(self) -> dict[str, object]:
        return {
            "filePath": self.file_path,
            "fileName": self.file_name,
            "fullContent": self.full_content,
            "previousLine": self.previous_line,
            "currentLine": self.current_line,
            "isFirstInput": self.is_first_input,
        }

    def commit_line(
        self,
        line: str | None = None,
        *,
        on_first_save: FirstSaveHandler | None = None,
    ) -> CommandResult:
        if line is not None:
            self.current_line = line
        trimmed = self.current_line.strip()
        if not trimmed:
            return CommandResult.empty()

        self.previous_line = trimmed
        self.full_content += trimmed + "\n"
        self.current_line = ""

        if self.is_first_input and not self.file_path:
            self.is_first_input = False
            if on_first_save is not None:
                return on_first_save()

        if self.file_path:
            self.auto_save()
        return CommandResult.ok()

    def negotiate_first_save(self, use_default: bool) -> CommandResult:
        self._negotiating = True
        try:
            if use_default:
                result = self._save_to_default_location()
            else:
                result = self._documents.save("", self.full_content)
            if not result.success:
                if not result.canceled:
                    logger.error("First save failed: %s", result.error)
                return result

            file_path = str(result.get("filePath"))
            file_name = str(result.get("fileName"))
            self.file_path = file_path
            self.file_name = file_name
            self._store.set_last_file(file_path)
            if not use_default:
                self._store.set_work_directory(parent_directory(file_path))
        except FocusWriteError as exc:
            logger.error("First save failed: %s", exc.message)
            return CommandResult.failure(exc.message)
        finally:
            self._negotiating = False

        logger.info("Session bound path=%s default_location=%s", file_path, use_default)
        self.refresh_recent_files()
        return CommandResult.ok(filePath=file_path, fileName=file_name)

    def _save_to_default_location(self) -> CommandResult:
        auto_name = self._store.generate_auto_file_name()
        work_dir = self._store.ensure_work_directory()
        if work_dir is None:
            logger.warning("Work directory unavailable for %s", auto_name.file_path)
        return self._documents.save(auto_name.file_path, self.full_content)

    def auto_save(self) -> bool:
        if not self.file_path:
            return False
        result = self._documents.save(self.file_path, self.full_content)
        if not result.success:
            logger.error("Autosave failed path=%s error=%s", self.file_path, result.error)
            return False
        return True

    def open_file(self) -> CommandResult:
        with self._loading():
            result = self._documents.open()
            if result.success:
                self._adopt_document(result)
            return result

    def open_file_at_path(self, path: str) -> CommandResult:
        with self._loading():
            result = self._documents.read_by_path(path)
            if result.success:
                self._adopt_document(result)
            return result

    def resume_last_file(self) -> CommandResult:
        last_file = self._store.get_last_file()
        if not last_file:
            return CommandResult.failure("No last file recorded")
        if not self._storage.path_exists(last_file):
            logger.info("Last file no longer exists path=%s", last_file)
            return CommandResult.failure(f"Last file no longer exists: {last_file}")
        return self.open_file_at_path(last_file)

    def new_file(self) -> CommandResult:
        with self._loading():
            result = self._documents.new()
            if result.success:
                self.file_path = str(result.get("filePath"))
                self.file_name = str(result.get("fileName"))
                self.full_content = ""
                self.previous_line = ""
                self.current_line = ""
                self.is_first_input = False
                self.refresh_recent_files()
            return result

    def save_file(self) -> CommandResult:
        with self._loading():
            if not self.file_path:
                return self.negotiate_first_save(use_default=False)
            result = self._documents.save(self.file_path, self.full_content)
            if result.success:
                self.file_path = str(result.get("filePath"))
                self.file_name = str(result.get("fileName"))
                self.refresh_recent_files()
            return result

    def refresh_recent_files(self) -> list[RecentFileDict]:
        self.recent_files = self._registry.list_formatted()
        return self.recent_files

    def remove_from_recent(self, path: str) -> CommandResult:
        self._registry.remove_entry(path)
        return CommandResult.ok(files=self.refresh_recent_files())

    def clear_file(self) -> None:
        self.file_path = ""
        self.file_name = ""
        self.full_content = ""
        self.previous_line = ""
        self.current_line = ""
        self.is_first_input = True

    def _adopt_document(self, result: CommandResult) -> None:
        content = str(result.get("content", ""))
        self.file_path = str(result.get("filePath"))
        self.file_name = str(result.get("fileName"))
        self.full_content = content
        self.is_first_input = False
        self.previous_line = last_non_blank_line(content)
        self.current_line = ""
        self.refresh_recent_files()

    @contextmanager
    def _loading(self) -> Iterator[None]:
        self.is_loading = True
        try:
            yield
        finally:
            self.is_loading = False
