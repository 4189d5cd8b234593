import os
from pathlib import Path

import pytest

from asap_notes.search import search_notes


def _write_note(path: Path, body: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(body, encoding="utf-8")


def test_empty_query_matches_every_note(tmp_path):
    _write_note(tmp_path / "a.md", "alpha")
    _write_note(tmp_path / "sub" / "b.txt", "")
    _write_note(tmp_path / "image.png", "alpha")

    result = search_notes(tmp_path, "")

    assert sorted(result.matches) == ["a.md", "sub/b.txt"]


def test_query_is_case_insensitive(tmp_path):
    _write_note(tmp_path / "a.md", "Nothing here")
    _write_note(tmp_path / "nested" / "b.md", "Find the NEEDLE please")

    result = search_notes(tmp_path, "needle")

    assert result.matches == ["nested/b.md"]
    assert result.skipped == []


def test_results_follow_lexical_walk_order(tmp_path):
    for name in ["b.md", "a/z.md", "c.txt", "a.md"]:
        _write_note(tmp_path / name, "common")

    result = search_notes(tmp_path, "common")

    assert result.matches == ["a/z.md", "a.md", "b.md", "c.txt"]


def test_non_note_files_are_ignored(tmp_path):
    _write_note(tmp_path / "data.json", "needle")
    assert search_notes(tmp_path, "needle").matches == []


@pytest.mark.skipif(
    not hasattr(os, "geteuid") or os.geteuid() == 0,
    reason="permission bits are ignored for root",
)
def test_unreadable_note_is_skipped(tmp_path):
    _write_note(tmp_path / "open.md", "needle")
    locked = tmp_path / "locked.md"
    _write_note(locked, "needle")
    locked.chmod(0)
    try:
        result = search_notes(tmp_path, "needle")
    finally:
        locked.chmod(0o644)

    assert result.matches == ["open.md"]
    assert result.skipped == [str(locked)]


def test_missing_root_yields_no_matches(tmp_path):
    result = search_notes(tmp_path / "missing", "x")
    assert result.matches == []
    assert len(result.skipped) == 1
