"""Utilities for working with note paths safely."""

from __future__ import annotations

import os
from pathlib import Path, PurePath

from .errors import AccessDeniedError, InvalidPathError


def absolute(path: str | PurePath) -> Path:
    """Return the absolute, normalised form of *path* without following symlinks."""

    return Path(os.path.abspath(path))


def ensure_in_root(path: Path, root: Path) -> Path:
    """Ensure *path* is inside *root*, comparing whole path segments."""

    resolved = absolute(path)
    try:
        resolved.relative_to(absolute(root))
    except ValueError:
        raise AccessDeniedError("Access denied") from None
    return resolved


def resolve_note_path(path_str: str, root: Path) -> Path:
    """Resolve a client supplied relative path within the notes *root*."""

    if not path_str:
        raise InvalidPathError("Path parameter is required")
    if "\x00" in path_str:
        raise InvalidPathError("Path must not contain NUL bytes")

    normalized = os.path.normpath(path_str)
    if os.path.isabs(normalized):
        raise InvalidPathError("Path must be relative to notes folder")

    target = Path(root) / normalized
    ensure_in_root(target, root)
    return target


def relative_note_path(path: Path, root: Path) -> str:
    """Render *path* relative to *root* with forward slashes."""

    relative = absolute(path).relative_to(absolute(root))
    return relative.as_posix()
