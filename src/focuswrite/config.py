"""Configuration record loading, caching and persistence."""

from __future__ import annotations

import json
import logging as py_logging
import os
import threading
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from platformdirs import user_data_dir
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from focuswrite.errors import ExitCode, FocusWriteError
from focuswrite.storage import LocalStorage, StorageIO, documents_root

logger = py_logging.getLogger(__name__)

APP_NAME = "FocusWrite"
CONFIG_FILE_NAME = "config.json"
CONFIG_PATH_ENV = "FOCUSWRITE_CONFIG"
DOCUMENT_ROOT_NAME = "FocusWrite"
DEFAULT_MAX_RECENT_FILES = 10
DEFAULT_EXTENSION = "txt"
AUTO_NAME_PREFIX = "untitled_"
MAX_AUTO_NAME_ATTEMPTS = 9999


class RecentFileEntry(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    path: str
    name: str
    last_opened: str = Field(default="", alias="lastOpened")

    def to_wire(self) -> dict[str, str]:
        return self.model_dump(by_alias=True)


class AppConfig(BaseModel):
    model_config = ConfigDict(validate_assignment=True, populate_by_name=True)

    work_directory: str = Field(default="", alias="workDirectory")
    last_file: str = Field(default="", alias="lastFile")
    recent_files: list[RecentFileEntry] = Field(default_factory=list, alias="recentFiles")
    max_recent_files: int = Field(default=DEFAULT_MAX_RECENT_FILES, ge=1, alias="maxRecentFiles")

    @field_validator("recent_files")
    @classmethod
    def _unique_paths(cls, value: list[RecentFileEntry]) -> list[RecentFileEntry]:
        seen_paths: set[str] = set()
        unique: list[RecentFileEntry] = []
        for entry in value:
            if entry.path in seen_paths:
                continue
            seen_paths.add(entry.path)
            unique.append(entry)
        return unique

    def to_record(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


def enforce_capacity(cfg: AppConfig) -> AppConfig:
    """Drop the oldest recent files beyond ``max_recent_files``."""
    if len(cfg.recent_files) > cfg.max_recent_files:
        cfg.recent_files = cfg.recent_files[: cfg.max_recent_files]
    return cfg


@dataclass(frozen=True)
class AutoFileName:
    file_name: str
    file_path: str

    def to_dict(self) -> dict[str, str]:
        return {"fileName": self.file_name, "filePath": self.file_path}


_FIELD_BY_KEY: dict[str, str] = {}
for _name, _field in AppConfig.model_fields.items():
    _FIELD_BY_KEY[_name] = _name
    if _field.alias:
        _FIELD_BY_KEY[_field.alias] = _name


def resolve_config_key(key: str) -> str:
    """Map a camelCase record key or a field name to the model field name."""
    try:
        return _FIELD_BY_KEY[key]
    except KeyError:
        accepted = ", ".join(field.alias or name for name, field in AppConfig.model_fields.items())
        raise FocusWriteError(
            f"Unknown configuration key: {key}",
            code=ExitCode.CONFIG_ERROR,
            hint=f"Use one of: {accepted}.",
        ) from None


def get_config_path(path: str | Path | None = None) -> Path:
    if path is not None:
        return Path(path).expanduser()
    override = os.getenv(CONFIG_PATH_ENV, "").strip()
    if override:
        return Path(override).expanduser()
    return Path(user_data_dir(APP_NAME, appauthor=False)) / CONFIG_FILE_NAME


def _normalize_recent_files(value: object) -> list[RecentFileEntry]:
    if not isinstance(value, list):
        return []
    entries: list[RecentFileEntry] = []
    for item in value:
        if not isinstance(item, dict):
            continue
        path = item.get("path")
        name = item.get("name")
        last_opened = item.get("lastOpened", "")
        if not isinstance(path, str) or not path or not isinstance(name, str):
            continue
        if not isinstance(last_opened, str):
            last_opened = ""
        entries.append(RecentFileEntry(path=path, name=name, last_opened=last_opened))
    return entries


def merge_with_defaults(raw: Mapping[str, object]) -> AppConfig:
    """Fill absent or ill-typed top-level keys from the default record."""
    cfg = AppConfig()

    work_directory = raw.get("workDirectory", cfg.work_directory)
    if isinstance(work_directory, str):
        cfg.work_directory = work_directory

    last_file = raw.get("lastFile", cfg.last_file)
    if isinstance(last_file, str):
        cfg.last_file = last_file

    if "recentFiles" in raw:
        cfg.recent_files = _normalize_recent_files(raw["recentFiles"])

    max_recent_files = raw.get("maxRecentFiles", cfg.max_recent_files)
    if (
        isinstance(max_recent_files, int)
        and not isinstance(max_recent_files, bool)
        and max_recent_files >= 1
    ):
        cfg.max_recent_files = max_recent_files

    return enforce_capacity(cfg)


class ConfigStore:
    """Owns the persisted configuration record and its in-memory cache.

    The record is read lazily on first access and served from the cache
    afterwards. Every mutation happens under one re-entrant lock, so callers
    that need a read-modify-write sequence (the recent-file registry) hold
    ``lock`` across it. A failed write leaves the cache ahead of disk and is
    reported through ``persisted``.
    """

    def __init__(
        self,
        path: str | Path | None = None,
        *,
        storage: StorageIO | None = None,
        documents_dir: str | Path | None = None,
    ) -> None:
        self.path = get_config_path(path)
        self.storage: StorageIO = storage or LocalStorage()
        self._documents_dir = documents_dir
        self._config: AppConfig | None = None
        self.lock = threading.RLock()
        self.persisted = True

    def load(self) -> AppConfig:
        with self.lock:
            return self._ensure_loaded().model_copy(deep=True)

    def get(self) -> AppConfig:
        return self.load()

    def set(self, key: str, value: object) -> AppConfig:
        field_name = resolve_config_key(key)
        with self.lock:
            updated = self._ensure_loaded().model_copy(deep=True)
            try:
                setattr(updated, field_name, value)
            except ValidationError as exc:
                raise self._invalid_value(key, exc) from exc
            self._config = enforce_capacity(updated)
            self._write(updated)
            return updated.model_copy(deep=True)

    def update(self, updates: Mapping[str, object]) -> AppConfig:
        resolved = {resolve_config_key(key): value for key, value in updates.items()}
        with self.lock:
            data = self._ensure_loaded().model_dump()
            data.update(resolved)
            try:
                updated = AppConfig.model_validate(data)
            except ValidationError as exc:
                raise self._invalid_value(", ".join(updates), exc) from exc
            self._config = enforce_capacity(updated)
            self._write(updated)
            return updated.model_copy(deep=True)

    def get_work_directory(self) -> str:
        return self.get().work_directory

    def set_work_directory(self, directory: str) -> AppConfig:
        return self.set("workDirectory", directory)

    def get_last_file(self) -> str:
        return self.get().last_file

    def set_last_file(self, file_path: str) -> AppConfig:
        return self.set("lastFile", file_path)

    def clear_last_file(self) -> AppConfig:
        return self.set("lastFile", "")

    def default_document_root(self) -> str:
        base = self._documents_dir if self._documents_dir is not None else documents_root()
        return str(Path(base) / DOCUMENT_ROOT_NAME)

    def ensure_work_directory(self) -> str | None:
        work_dir = self.get_work_directory()
        if not work_dir:
            return None
        try:
            self.storage.make_directory(work_dir, recursive=True)
        except OSError:
            logger.error("Failed to create work directory path=%s", work_dir, exc_info=True)
            return None
        return work_dir

    def generate_auto_file_name(self, extension: str = DEFAULT_EXTENSION) -> AutoFileName:
        with self.lock:
            if not self.get_work_directory():
                default_dir = self.default_document_root()
                logger.info("No work directory configured; using default path=%s", default_dir)
                self.set_work_directory(default_dir)
                self.ensure_work_directory()

            target_dir = Path(self.get_work_directory())
            for counter in range(1, MAX_AUTO_NAME_ATTEMPTS + 1):
                file_name = f"{AUTO_NAME_PREFIX}{counter:03d}.{extension}"
                file_path = str(target_dir / file_name)
                if not self.storage.path_exists(file_path):
                    return AutoFileName(file_name=file_name, file_path=file_path)

        raise FocusWriteError(
            f"No free automatic file name in {target_dir}",
            code=ExitCode.STORAGE_ERROR,
            hint="Move old untitled documents elsewhere or choose another work directory.",
        )

    def _ensure_loaded(self) -> AppConfig:
        if self._config is None:
            self._config = self._read()
        return self._config

    def _read(self) -> AppConfig:
        try:
            raw = json.loads(self.storage.read_text(str(self.path)))
        except FileNotFoundError:
            logger.debug("Config missing; writing defaults path=%s", self.path)
            return self._restore_defaults()
        except (OSError, ValueError) as exc:
            logger.warning("Config unreadable; restoring defaults path=%s error=%s", self.path, exc)
            return self._restore_defaults()
        if not isinstance(raw, dict):
            logger.warning("Config is not an object; restoring defaults path=%s", self.path)
            return self._restore_defaults()
        return merge_with_defaults(raw)

    def _restore_defaults(self) -> AppConfig:
        self._config = AppConfig()
        self._write(self._config)
        return self._config

    def _write(self, config: AppConfig) -> bool:
        payload = json.dumps(config.to_record(), indent=2, ensure_ascii=False)
        try:
            self.storage.make_directory(str(self.path.parent), recursive=True)
            self.storage.write_text(str(self.path), payload)
        except (OSError, UnicodeError):
            logger.error("Failed to write config path=%s", self.path, exc_info=True)
            self.persisted = False
            return False
        self.persisted = True
        return True

    @staticmethod
    def _invalid_value(key: str, exc: ValidationError) -> FocusWriteError:
        details = "; ".join(error["msg"] for error in exc.errors())
        return FocusWriteError(
            f"Invalid configuration value for {key}: {details}",
            code=ExitCode.CONFIG_ERROR,
        )
