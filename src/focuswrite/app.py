"""Wiring of the configuration store, registry, documents and session."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from focuswrite.commands import CommandSurface
from focuswrite.config import ConfigStore
from focuswrite.documents import DocumentService
from focuswrite.history import RecentFileRegistry
from focuswrite.session import WritingSession
from focuswrite.storage import LocalStorage, Pickers, StorageIO


@dataclass
class Application:
    store: ConfigStore
    registry: RecentFileRegistry
    documents: DocumentService
    commands: CommandSurface
    session: WritingSession


def build_application(
    pickers: Pickers,
    *,
    config_path: str | Path | None = None,
    storage: StorageIO | None = None,
    documents_dir: str | Path | None = None,
) -> Application:
    """Construct one store and hand it to every component that needs it."""
    io = storage or LocalStorage()
    store = ConfigStore(config_path, storage=io, documents_dir=documents_dir)
    registry = RecentFileRegistry(store)
    documents = DocumentService(registry, pickers, io)
    return Application(
        store=store,
        registry=registry,
        documents=documents,
        commands=CommandSurface(store, registry, documents, pickers),
        session=WritingSession(store, registry, documents, io),
    )
