"""Command surface exposed to a UI layer.

Every method returns a ``CommandResult``; domain and I/O errors are converted
at this boundary and never raised to the caller.
"""

from __future__ import annotations

import logging as py_logging
from collections.abc import Callable, Mapping

from focuswrite.config import AppConfig, ConfigStore
from focuswrite.documents import DocumentService
from focuswrite.errors import FocusWriteError
from focuswrite.history import RecentFileRegistry
from focuswrite.results import CommandResult
from focuswrite.storage import Pickers

logger = py_logging.getLogger(__name__)


class CommandSurface:
    def __init__(
        self,
        store: ConfigStore,
        registry: RecentFileRegistry,
        documents: DocumentService,
        pickers: Pickers,
    ) -> None:
        self._store = store
        self._registry = registry
        self._documents = documents
        self._pickers = pickers

    def open_file(self) -> CommandResult:
        return self._guard("open", self._documents.open)

    def save_file(self, file_path: str, content: str) -> CommandResult:
        return self._guard("save", lambda: self._documents.save(file_path, content))

    def new_file(self) -> CommandResult:
        return self._guard("new", self._documents.new)

    def read_file_by_path(self, file_path: str) -> CommandResult:
        return self._guard("read", lambda: self._documents.read_by_path(file_path))

    def get_config(self) -> CommandResult:
        return self._guard(
            "config-get", lambda: CommandResult.ok(config=self._store.get().to_record())
        )

    def set_config(self, key: str, value: object) -> CommandResult:
        return self._guard(
            "config-set", lambda: self._config_result(self._store.set(key, value))
        )

    def update_config(self, updates: Mapping[str, object]) -> CommandResult:
        return self._guard(
            "config-update", lambda: self._config_result(self._store.update(updates))
        )

    def get_work_directory(self) -> CommandResult:
        return self._guard(
            "workdir-get", lambda: CommandResult.ok(workDir=self._store.get_work_directory())
        )

    def set_work_directory(self) -> CommandResult:
        def action() -> CommandResult:
            work_dir = self._pickers.pick_directory()
            if not work_dir:
                logger.debug("Work directory selection cancelled")
                return CommandResult.cancelled()
            self._store.set_work_directory(work_dir)
            self._store.ensure_work_directory()
            return self._persisted_or_failure(CommandResult.ok(workDir=work_dir))

        return self._guard("workdir-set", action)

    def get_last_file(self) -> CommandResult:
        return self._guard(
            "last-file-get", lambda: CommandResult.ok(lastFile=self._store.get_last_file())
        )

    def set_last_file(self, file_path: str) -> CommandResult:
        def action() -> CommandResult:
            self._store.set_last_file(file_path)
            return self._persisted_or_failure(CommandResult.ok(lastFile=file_path))

        return self._guard("last-file-set", action)

    def clear_last_file(self) -> CommandResult:
        def action() -> CommandResult:
            self._store.clear_last_file()
            return self._persisted_or_failure(CommandResult.ok(lastFile=""))

        return self._guard("last-file-clear", action)

    def default_document_root(self) -> CommandResult:
        return self._guard(
            "workdir-default",
            lambda: CommandResult.ok(workDir=self._store.default_document_root()),
        )

    def generate_auto_file_name(self) -> CommandResult:
        return self._guard(
            "auto-name",
            lambda: CommandResult.ok(**self._store.generate_auto_file_name().to_dict()),
        )

    def ensure_work_directory(self) -> CommandResult:
        def action() -> CommandResult:
            work_dir = self._store.ensure_work_directory()
            if work_dir is None:
                return CommandResult.failure(
                    "No work directory is configured or it could not be created"
                )
            return CommandResult.ok(workDir=work_dir)

        return self._guard("workdir-ensure", action)

    def list_recent_files(self) -> CommandResult:
        return self._guard(
            "recent-list", lambda: CommandResult.ok(files=self._registry.list_formatted())
        )

    def add_recent_file(self, file_path: str, file_name: str = "") -> CommandResult:
        def action() -> CommandResult:
            if not file_path:
                return CommandResult.failure("A file path is required")
            name = file_name or self._store.storage.basename(file_path)
            entries = self._registry.add_entry(file_path, name)
            return self._persisted_or_failure(
                CommandResult.ok(files=[entry.to_wire() for entry in entries])
            )

        return self._guard("recent-add", action)

    def remove_recent_file(self, file_path: str) -> CommandResult:
        def action() -> CommandResult:
            entries = self._registry.remove_entry(file_path)
            return self._persisted_or_failure(
                CommandResult.ok(files=[entry.to_wire() for entry in entries])
            )

        return self._guard("recent-remove", action)

    def clear_recent_files(self) -> CommandResult:
        def action() -> CommandResult:
            self._registry.clear_all()
            return self._persisted_or_failure(CommandResult.ok(files=[]))

        return self._guard("recent-clear", action)

    def _config_result(self, config: AppConfig) -> CommandResult:
        return self._persisted_or_failure(CommandResult.ok(config=config.to_record()))

    def _persisted_or_failure(self, result: CommandResult) -> CommandResult:
        if self._store.persisted:
            return result
        return CommandResult.failure(
            f"Configuration could not be written to {self._store.path}", **result.payload
        )

    @staticmethod
    def _guard(operation: str, action: Callable[[], CommandResult]) -> CommandResult:
        try:
            return action()
        except FocusWriteError as exc:
            logger.error("Command %s failed: %s", operation, exc.message)
            return CommandResult.failure(exc.message)
        except (OSError, UnicodeError) as exc:
            logger.error("Command %s failed: %s", operation, exc, exc_info=True)
            return CommandResult.failure(str(exc) or exc.__class__.__name__)
