from __future__ import annotations

from typing import Protocol, runtime_checkable

from fileshelf.schemas import FileSummary, PersistedFile


@runtime_checkable
class FileStore(Protocol):
    """Source of truth for persisted files, keyed by numeric id.

    Implementations do no caching. ``get`` returns ``None`` for an unknown
    id; failures to reach the backing storage raise
    ``StoreUnavailableError``.
    """

    def exists(self, file_id: int) -> bool:
        """Return whether a file with this id is stored."""
        ...

    def get(self, file_id: int) -> PersistedFile | None:
        """Return the stored file, or ``None`` when the id is unknown."""
        ...

    def create(self, name: str, mime: str, data: bytes) -> PersistedFile:
        """Persist a new file under a freshly assigned id."""
        ...

    def list_files(self, limit: int | None = None) -> list[FileSummary]:
        """List stored file metadata, newest id first."""
        ...
