"""
Error types raised by bkmr.

All errors derive from BkmrError so command entry points can report them
uniformly. Each type maps to one failure class of the selection, dispatch
and storage layers.
"""
from typing import Optional


class BkmrError(Exception):
    """Base class for bkmr errors."""
    pass


class InvalidInputError(BkmrError):
    """Malformed ordinal or id list (non-numeric tokens)."""

    def __init__(self, tokens):
        self.tokens = list(tokens)
        super().__init__(f"Invalid input, only numbers allowed: {' '.join(self.tokens)}")


class OutOfRangeError(BkmrError):
    """Ordinal outside 1..N for the current result list."""

    def __init__(self, ordinal: int, size: int):
        self.ordinal = ordinal
        self.size = size
        super().__init__(f"Selection {ordinal} out of range (1..{size})")


class NotFoundError(BkmrError):
    """Bookmark id absent from the store."""

    def __init__(self, bookmark_id: int):
        self.bookmark_id = bookmark_id
        super().__init__(f"Bookmark with id {bookmark_id} not found")


class DuplicateUrlError(BkmrError):
    """Insert or update would violate url uniqueness."""

    def __init__(self, url: str):
        self.url = url
        super().__init__(f"Bookmark already exists: {url}")


class ExternalProcessError(BkmrError):
    """Editor or shell command failed to launch or exited nonzero."""

    def __init__(self, command: str, returncode: Optional[int] = None, reason: Optional[str] = None):
        self.command = command
        self.returncode = returncode
        if reason:
            message = f"Failed to run '{command}': {reason}"
        else:
            message = f"Command '{command}' exited with status {returncode}"
        super().__init__(message)


class TemplateParseError(BkmrError):
    """Edited template could not be turned back into a bookmark."""
    pass


class TempFileError(BkmrError):
    """Creating, reading or writing the edit scratch file failed."""
    pass
