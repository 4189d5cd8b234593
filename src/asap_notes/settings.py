"""Persistent user settings stored as a small JSON file."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from pydantic import BaseModel, ConfigDict, ValidationError

from .errors import MalformedRequestError, StorageError
from .locks import ReadWriteLock

logger = logging.getLogger(__name__)

DEFAULT_FONT_FAMILY = "monospace"
DEFAULT_FONT_SIZE = "16"


def default_notes_folder() -> Path:
    return Path.home() / "Documents" / "ASAPNotes"


class NoteSettings(BaseModel):
    """The settings record shared by the API and persisted to disk."""

    model_config = ConfigDict(extra="ignore")

    notes_folder: str
    font_family: str = DEFAULT_FONT_FAMILY
    font_size: str = DEFAULT_FONT_SIZE

    @classmethod
    def defaults(cls) -> NoteSettings:
        return cls(notes_folder=str(default_notes_folder()))


class SettingsUpdate(BaseModel):
    """Partial update posted by the client. Empty values are ignored."""

    model_config = ConfigDict(extra="ignore")

    notes_folder: str | None = None
    font_family: str | None = None
    font_size: str | None = None

    @classmethod
    def parse_body(cls, body: bytes) -> SettingsUpdate:
        try:
            return cls.model_validate_json(body)
        except ValidationError as exc:
            raise MalformedRequestError("Invalid settings payload") from exc


class SettingsStore:
    """Process-wide settings guarded by a reader/writer lock."""

    def __init__(self, config_path: Path, settings: NoteSettings | None = None) -> None:
        self.config_path = Path(config_path)
        self._settings = settings or NoteSettings.defaults()
        self._lock = ReadWriteLock()

    def current(self) -> NoteSettings:
        with self._lock.read():
            return self._settings.model_copy()

    @property
    def notes_root(self) -> Path:
        return Path(self.current().notes_folder)

    def load(self) -> NoteSettings:
        """Read the config file, falling back to defaults when it is absent."""

        with self._lock.write():
            if not self.config_path.exists():
                self._settings = NoteSettings.defaults()
                try:
                    self._write(self._settings)
                except StorageError as exc:
                    logger.warning("Could not write %s: %s", self.config_path, exc.__cause__)
            else:
                try:
                    raw = self.config_path.read_text(encoding="utf-8")
                    self._settings = NoteSettings.model_validate_json(raw)
                except (OSError, ValidationError) as exc:
                    logger.warning("Could not load %s, using defaults: %s", self.config_path, exc)
                    self._settings = NoteSettings.defaults()

            try:
                Path(self._settings.notes_folder).mkdir(parents=True, exist_ok=True)
            except OSError as exc:
                logger.warning("Could not create notes folder %s: %s", self._settings.notes_folder, exc)
            return self._settings.model_copy()

    def update(self, changes: SettingsUpdate) -> NoteSettings:
        """Apply non-empty fields of *changes* and persist the result."""

        with self._lock.write():
            updated = self._settings.model_copy()
            if changes.notes_folder:
                try:
                    Path(changes.notes_folder).mkdir(parents=True, exist_ok=True)
                except OSError as exc:
                    raise StorageError("Failed to create notes folder") from exc
                updated.notes_folder = changes.notes_folder
            if changes.font_family:
                updated.font_family = changes.font_family
            if changes.font_size:
                updated.font_size = changes.font_size

            self._write(updated)
            self._settings = updated
            logger.info("Settings updated, notes folder: %s", updated.notes_folder)
            return updated.model_copy()

    def _write(self, settings: NoteSettings) -> None:
        payload = settings.model_dump_json(indent=2)
        tmp = self.config_path.with_suffix(".tmp")
        try:
            self.config_path.parent.mkdir(parents=True, exist_ok=True)
            tmp.write_text(payload, encoding="utf-8")
            os.replace(tmp, self.config_path)
        except OSError as exc:
            raise StorageError("Failed to save settings") from exc
