"""Simple search utilities for note content."""

from __future__ import annotations

import logging
import os
from collections.abc import Iterator
from dataclasses import dataclass, field
from pathlib import Path

from .indexer import is_note_file
from .paths import relative_note_path

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class SearchResult:
    """Matching note paths plus the entries the walk had to skip."""

    matches: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)


def _walk_files(directory: Path, skipped: list[str]) -> Iterator[Path]:
    """Yield files depth first, visiting entries in lexical order."""

    try:
        with os.scandir(directory) as it:
            entries = sorted(it, key=lambda entry: entry.name)
    except OSError as exc:
        logger.debug("Skipping unreadable folder %s: %s", directory, exc)
        skipped.append(str(directory))
        return

    for entry in entries:
        if entry.is_dir():
            yield from _walk_files(Path(entry.path), skipped)
        else:
            yield Path(entry.path)


def search_notes(root: Path, query: str) -> SearchResult:
    """Perform a naive case-insensitive full-text search for *query* within *root*."""

    root = Path(root)
    needle = query.lower()
    result = SearchResult()
    for path in _walk_files(root, result.skipped):
        if not is_note_file(path.name):
            continue
        try:
            content = path.read_bytes().decode("utf-8", errors="replace")
        except OSError as exc:
            logger.debug("Skipping unreadable note %s: %s", path, exc)
            result.skipped.append(str(path))
            continue
        if needle in content.lower():
            result.matches.append(relative_note_path(path, root))
    return result
