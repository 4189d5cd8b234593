"""Error kinds raised by the note store and mapped to HTTP responses."""

from __future__ import annotations


class NotesError(Exception):
    """Base error carrying the HTTP status it maps to."""

    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InvalidPathError(NotesError, ValueError):
    """Raised when a required path is missing or absolute."""

    status_code = 400


class AccessDeniedError(NotesError):
    """Raised when a path escapes the notes root."""

    status_code = 403


class NoteNotFoundError(NotesError):
    status_code = 404


class StorageError(NotesError):
    """Raised when the filesystem refuses a read, write or mkdir."""

    status_code = 500


class MalformedRequestError(NotesError, ValueError):
    status_code = 400


class FolderIndexError(NotesError):
    """Raised when the notes root itself cannot be listed."""

    status_code = 500
