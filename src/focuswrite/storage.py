"""Storage, picker and platform path collaborators."""

from __future__ import annotations

from pathlib import Path
from typing import Protocol

from platformdirs import user_documents_dir


class StorageIO(Protocol):
    """File system capabilities the core needs.

    ``read_text`` raises ``FileNotFoundError`` for a missing path and other
    ``OSError`` subclasses for unreadable ones. ``write_text`` and
    ``make_directory`` raise ``OSError`` on failure; ``write_text`` may also
    raise ``UnicodeEncodeError`` for text the encoding cannot represent.
    """

    def read_text(self, path: str) -> str: ...

    def write_text(self, path: str, text: str) -> None: ...

    def path_exists(self, path: str) -> bool: ...

    def make_directory(self, path: str, *, recursive: bool = True) -> None: ...

    def basename(self, path: str) -> str: ...


class Pickers(Protocol):
    """Interactive choosers. ``None`` means the user cancelled."""

    def pick_open_file(self) -> str | None: ...

    def pick_save_location(self, default_name: str) -> str | None: ...

    def pick_directory(self) -> str | None: ...


class LocalStorage:
    """StorageIO over the local file system.

    Undecodable bytes are read as U+FFFD instead of failing the read.
    """

    encoding = "utf-8"

    def read_text(self, path: str) -> str:
        return Path(path).read_text(encoding=self.encoding, errors="replace")

    def write_text(self, path: str, text: str) -> None:
        Path(path).write_text(text, encoding=self.encoding)

    def path_exists(self, path: str) -> bool:
        if not path:
            return False
        return Path(path).exists()

    def make_directory(self, path: str, *, recursive: bool = True) -> None:
        if recursive:
            Path(path).mkdir(parents=True, exist_ok=True)
        else:
            Path(path).mkdir(exist_ok=True)

    def basename(self, path: str) -> str:
        return path.replace("\\", "/").rstrip("/").rpartition("/")[2] or path


def documents_root() -> str:
    """Return the platform's per-user documents directory."""
    return user_documents_dir()


def parent_directory(path: str) -> str:
    """Return the directory containing ``path`` for either separator style."""
    normalized = path.replace("\\", "/")
    head, _, _ = normalized.rpartition("/")
    if not head:
        return "/" if normalized.startswith("/") else ""
    if "\\" in path and "/" not in path:
        return path[: len(head)]
    return head
