"""InMemoryFileStore: dict-based file storage for development and testing."""

from __future__ import annotations

import itertools
import threading

from fileshelf.schemas import FileSummary, PersistedFile, utc_now


class InMemoryFileStore:
    """In-memory file store with the same contract as ``FileRepository``."""

    def __init__(self) -> None:
        self._files: dict[int, PersistedFile] = {}
        self._summaries: dict[int, FileSummary] = {}
        self._ids = itertools.count(1)
        self._lock = threading.Lock()

    @classmethod
    def from_preloaded(cls, files: list[PersistedFile]) -> InMemoryFileStore:
        """Build a store holding the given files under their own ids."""
        store = cls()
        for persisted in files:
            store._put(persisted)
        store._ids = itertools.count(max(store._files, default=0) + 1)
        return store

    def create(self, name: str, mime: str, data: bytes) -> PersistedFile:
        with self._lock:
            persisted = PersistedFile(id=next(self._ids), name=name, mime=mime, data=data)
            self._put(persisted)
        return persisted

    def exists(self, file_id: int) -> bool:
        return file_id in self._files

    def get(self, file_id: int) -> PersistedFile | None:
        return self._files.get(file_id)

    def list_files(self, limit: int | None = None) -> list[FileSummary]:
        if limit is not None and limit < 1:
            raise ValueError("limit must be >= 1")
        summaries = sorted(self._summaries.values(), key=lambda summary: summary.id, reverse=True)
        if limit is not None:
            return summaries[:limit]
        return summaries

    def _put(self, persisted: PersistedFile) -> None:
        self._files[persisted.id] = persisted
        self._summaries[persisted.id] = FileSummary(
            id=persisted.id,
            name=persisted.name,
            mime=persisted.mime,
            size=persisted.size,
            created_at=utc_now(),
        )
