"""Reading and writing individual note files."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from .errors import NoteNotFoundError, StorageError
from .indexer import Folder, build_folder_tree
from .paths import resolve_note_path
from .search import SearchResult, search_notes
from .settings import SettingsStore

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class NoteStore:
    """Business logic for notes under the configured notes folder."""

    settings: SettingsStore

    @property
    def root(self) -> Path:
        return self.settings.notes_root

    def resolve(self, path: str) -> Path:
        return resolve_note_path(path, self.root)

    def read_note(self, path: str) -> bytes:
        target = self.resolve(path)
        try:
            return target.read_bytes()
        except (FileNotFoundError, IsADirectoryError, NotADirectoryError) as exc:
            raise NoteNotFoundError("Note not found.") from exc
        except OSError as exc:
            logger.error("Error reading %s: %s", target, exc)
            raise StorageError("Failed to read note") from exc

    def write_note(self, path: str, data: bytes) -> None:
        target = self.resolve(path)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            logger.error("Error creating directory %s: %s", target.parent, exc)
            raise StorageError("Failed to create directory") from exc

        try:
            target.write_bytes(data)
        except OSError as exc:
            logger.error("Error writing %s: %s", target, exc)
            raise StorageError("Failed to save note") from exc
        logger.debug("Wrote %d bytes to %s", len(data), target)

    def create_folder(self, path: str) -> None:
        target = self.resolve(path)
        try:
            target.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            logger.error("Error creating folder %s: %s", target, exc)
            raise StorageError("Failed to create folder") from exc

    def list_folders(self) -> Folder:
        return build_folder_tree(self.root)

    def search(self, query: str) -> SearchResult:
        return search_notes(self.root, query)
