"""Build the folder tree shown in the sidebar."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any

from .errors import FolderIndexError
from .paths import relative_note_path

logger = logging.getLogger(__name__)

NOTE_SUFFIXES = (".md", ".txt")
ROOT_FOLDER_NAME = "Root"


def is_note_file(name: str) -> bool:
    return name.endswith(NOTE_SUFFIXES)


@dataclass(slots=True)
class NoteInfo:
    name: str
    modified: datetime

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "modified": self.modified.isoformat()}


@dataclass(slots=True)
class Folder:
    """One directory of the notes tree.

    ``omitted`` lists the root-relative paths of subdirectories that could not
    be read. They are left out of ``subfolders`` and of the JSON payload.
    """

    name: str
    path: str
    notes: list[NoteInfo] = field(default_factory=list)
    subfolders: list[Folder] = field(default_factory=list)
    omitted: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "path": self.path,
            "notes": [note.to_dict() for note in self.notes],
            "subfolders": [sub.to_dict() for sub in self.subfolders],
        }


def _list_directory(directory: Path) -> list[os.DirEntry[str]]:
    with os.scandir(directory) as it:
        return sorted(it, key=lambda entry: entry.name)


def _walk(directory: Path, root: Path, *, top: bool) -> Folder:
    if top:
        folder = Folder(name=ROOT_FOLDER_NAME, path="")
    else:
        folder = Folder(name=directory.name, path=relative_note_path(directory, root))

    entries = _list_directory(directory)

    notes: list[NoteInfo] = []
    for entry in entries:
        if entry.is_dir():
            child = Path(entry.path)
            try:
                folder.subfolders.append(_walk(child, root, top=False))
            except OSError as exc:
                logger.debug("Omitting unreadable folder %s: %s", child, exc)
                folder.omitted.append(relative_note_path(child, root))
        elif is_note_file(entry.name):
            try:
                mtime = entry.stat().st_mtime
            except OSError as exc:
                logger.debug("Skipping note %s: %s", entry.path, exc)
                continue
            notes.append(NoteInfo(entry.name, datetime.fromtimestamp(mtime).astimezone()))

    # sorted() is stable, so equal timestamps keep listing order
    folder.notes = sorted(notes, key=lambda note: note.modified, reverse=True)
    return folder


def build_folder_tree(root: Path) -> Folder:
    """Walk *root* recursively and return its folder tree."""

    try:
        return _walk(Path(root), Path(root), top=True)
    except OSError as exc:
        raise FolderIndexError(str(exc)) from exc
