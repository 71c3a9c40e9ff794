"""Recently used documents, stored in the configuration record."""

from __future__ import annotations

import logging as py_logging
from collections.abc import Callable
from datetime import datetime, timezone

from typing_extensions import TypedDict

from focuswrite.config import ConfigStore, RecentFileEntry

logger = py_logging.getLogger(__name__)


class RecentFileDict(TypedDict):
    path: str
    name: str
    lastOpened: str
    timeAgo: str


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def format_timestamp(moment: datetime) -> str:
    """Render an ISO-8601 instant in UTC with millisecond precision."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_timestamp(value: str) -> datetime | None:
    text = value.strip()
    if not text:
        return None
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        moment = datetime.fromisoformat(text)
    except ValueError:
        return None
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment


def _plural(count: int, unit: str) -> str:
    return f"{count} {unit}{'' if count == 1 else 's'} ago"


def format_relative_age(timestamp: str | datetime, *, now: datetime | None = None) -> str:
    """Describe how long ago ``timestamp`` was, for display only."""
    moment = parse_timestamp(timestamp) if isinstance(timestamp, str) else timestamp
    if moment is None:
        return ""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    reference = now or _utcnow()
    if reference.tzinfo is None:
        reference = reference.replace(tzinfo=timezone.utc)

    elapsed = (reference - moment).total_seconds()
    minutes = int(elapsed // 60)
    hours = int(elapsed // 3600)
    days = int(elapsed // 86400)

    if minutes < 1:
        return "just now"
    if minutes < 60:
        return _plural(minutes, "minute")
    if hours < 24:
        return _plural(hours, "hour")
    if days < 30:
        return _plural(days, "day")
    return moment.astimezone().strftime("%x")


class RecentFileRegistry:
    """Bounded, most-recent-first list of documents kept in ``recentFiles``.

    The registry never persists on its own; every change goes through the
    config store, and read-modify-write sequences hold the store lock.
    """

    def __init__(self, store: ConfigStore, *, clock: Callable[[], datetime] = _utcnow) -> None:
        self._store = store
        self._clock = clock

    def add_entry(self, path: str, name: str) -> list[RecentFileEntry]:
        with self._store.lock:
            config = self._store.get()
            entries = [entry for entry in config.recent_files if entry.path != path]
            entries.insert(
                0,
                RecentFileEntry(path=path, name=name, last_opened=format_timestamp(self._clock())),
            )
            entries = entries[: config.max_recent_files]
            self._store.update({"recentFiles": entries, "lastFile": path})
        logger.debug("Recent file added path=%s count=%s", path, len(entries))
        return entries

    def list_valid(self) -> list[RecentFileEntry]:
        with self._store.lock:
            stored = self._store.get().recent_files
            valid: list[RecentFileEntry] = []
            for entry in stored:
                if self._store.storage.path_exists(entry.path):
                    valid.append(entry)
                else:
                    logger.info("Dropping missing file from recent list path=%s", entry.path)
            if len(valid) != len(stored):
                self._store.set("recentFiles", valid)
        return valid

    def list_formatted(self, *, now: datetime | None = None) -> list[RecentFileDict]:
        return [
            RecentFileDict(
                path=entry.path,
                name=entry.name,
                lastOpened=entry.last_opened,
                timeAgo=format_relative_age(entry.last_opened, now=now),
            )
            for entry in self.list_valid()
        ]

    def remove_entry(self, path: str) -> list[RecentFileEntry]:
        with self._store.lock:
            config = self._store.get()
            entries = [entry for entry in config.recent_files if entry.path != path]
            updates: dict[str, object] = {"recentFiles": entries}
            if config.last_file == path:
                updates["lastFile"] = ""
            self._store.update(updates)
        return entries

    def clear_all(self) -> list[RecentFileEntry]:
        with self._store.lock:
            self._store.update({"recentFiles": [], "lastFile": ""})
        return []
