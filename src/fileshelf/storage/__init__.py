"""Storage layer for persisted files."""

from .base import FileStore
from .memory import InMemoryFileStore
from .repo import FileRepository

__all__ = ["FileRepository", "FileStore", "InMemoryFileStore"]
