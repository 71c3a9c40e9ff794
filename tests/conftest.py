from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

import pytest

from focuswrite.app import Application, build_application
from focuswrite.config import ConfigStore
from focuswrite.history import RecentFileRegistry
from focuswrite.storage import LocalStorage


class FakePickers:
    """Pickers returning queued answers; ``None`` means cancelled."""

    def __init__(
        self,
        *,
        open_files: Iterable[str | None] = (),
        save_locations: Iterable[str | None] = (),
        directories: Iterable[str | None] = (),
    ) -> None:
        self.open_files = list(open_files)
        self.save_locations = list(save_locations)
        self.directories = list(directories)
        self.save_defaults: list[str] = []

    def pick_open_file(self) -> str | None:
        return self.open_files.pop(0) if self.open_files else None

    def pick_save_location(self, default_name: str) -> str | None:
        self.save_defaults.append(default_name)
        return self.save_locations.pop(0) if self.save_locations else None

    def pick_directory(self) -> str | None:
        return self.directories.pop(0) if self.directories else None


class FailingWriteStorage(LocalStorage):
    """Local storage whose writes fail for paths containing ``marker``."""

    def __init__(self, marker: str) -> None:
        self.marker = marker

    def write_text(self, path: str, text: str) -> None:
        if self.marker in path:
            raise PermissionError(13, "Permission denied", path)
        super().write_text(path, text)


@pytest.hookimpl(trylast=True)
def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    del config
    for item in items:
        path = Path(str(getattr(item, "path", item.fspath)))
        if "integration" in path.parts:
            item.add_marker(pytest.mark.integration)
            item.add_marker(pytest.mark.slow)
        if "property" in path.parts:
            item.add_marker(pytest.mark.property)


@pytest.fixture
def config_path(tmp_path: Path) -> Path:
    return tmp_path / "appdata" / "config.json"


@pytest.fixture
def documents_dir(tmp_path: Path) -> Path:
    path = tmp_path / "Documents"
    path.mkdir()
    return path


@pytest.fixture
def store(config_path: Path, documents_dir: Path) -> ConfigStore:
    return ConfigStore(config_path, documents_dir=documents_dir)


@pytest.fixture
def registry(store: ConfigStore) -> RecentFileRegistry:
    return RecentFileRegistry(store)


@pytest.fixture
def pickers() -> FakePickers:
    return FakePickers()


@pytest.fixture
def app(config_path: Path, documents_dir: Path, pickers: FakePickers) -> Application:
    return build_application(pickers, config_path=config_path, documents_dir=documents_dir)


class CountingStorage(LocalStorage):
    """Local storage that records every written path."""

    def __init__(self) -> None:
        self.writes: list[str] = []

    def write_text(self, path: str, text: str) -> None:
        self.writes.append(path)
        super().write_text(path, text)


class StrictDecodingStorage(LocalStorage):
    """Local storage that refuses to read bytes which are not valid UTF-8."""

    def read_text(self, path: str) -> str:
        return Path(path).read_bytes().decode(self.encoding)
