"""Native file dialogs backed by PySide6."""

from __future__ import annotations

from typing import Any

from focuswrite.errors import ExitCode, FocusWriteError

OPEN_FILTER = "Text files (*.txt *.md);;All files (*)"
SAVE_FILTER = "Text files (*.txt);;Markdown (*.md)"


class QtPickers:
    def __init__(self, parent: Any = None) -> None:
        self._parent = parent
        self._app: Any = None

    def _file_dialog(self) -> Any:
        try:
            from PySide6.QtWidgets import QApplication, QFileDialog
        except ImportError as exc:
            raise FocusWriteError(
                "PySide6 is not installed; native dialogs are unavailable.",
                code=ExitCode.UNSUPPORTED_PLATFORM,
                hint="Run `pip install PySide6` or use --dialogs console.",
            ) from exc
        if QApplication.instance() is None:
            self._app = QApplication([])
        return QFileDialog

    def pick_open_file(self) -> str | None:
        dialog = self._file_dialog()
        path, _ = dialog.getOpenFileName(self._parent, "Open document", "", OPEN_FILTER)
        return path or None

    def pick_save_location(self, default_name: str) -> str | None:
        dialog = self._file_dialog()
        path, _ = dialog.getSaveFileName(self._parent, "Save document", default_name, SAVE_FILTER)
        return path or None

    def pick_directory(self) -> str | None:
        dialog = self._file_dialog()
        path = dialog.getExistingDirectory(self._parent, "Choose default work directory")
        return path or None
