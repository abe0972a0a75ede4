"""Typed errors for fileshelf."""

from __future__ import annotations


class FileShelfError(Exception):
    """Base exception for all fileshelf errors."""


class NotFoundError(FileShelfError):
    """Raised when no persisted file exists for an id."""

    def __init__(self, file_id: int) -> None:
        self.file_id = file_id
        super().__init__(f"Persisted file not found: id={file_id}")


class StoreUnavailableError(FileShelfError):
    """Raised when the backing store cannot complete a request."""

    def __init__(self, operation: str, file_id: int | None = None) -> None:
        self.operation = operation
        self.file_id = file_id
        target = f" id={file_id}" if file_id is not None else ""
        super().__init__(f"Store unavailable during {operation}{target}")
