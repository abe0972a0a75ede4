from __future__ import annotations

import logging
import mimetypes
from pathlib import Path

from fileshelf.caching import CachedFileLookup
from fileshelf.config import AppConfig
from fileshelf.schemas import DEFAULT_MIME, LoadResult, PersistedFile
from fileshelf.storage import FileRepository, FileStore

logger = logging.getLogger(__name__)


def guess_mime(name: str) -> str:
    media_type, _ = mimetypes.guess_type(name)
    return media_type or DEFAULT_MIME


class FileService:
    """Upload and load persisted files through a cached lookup."""

    def __init__(self, *, store: FileStore, lookup: CachedFileLookup) -> None:
        self.store = store
        self.lookup = lookup

    @classmethod
    def from_config(cls, config: AppConfig, *, db_path: str | Path | None = None) -> FileService:
        store = FileRepository(
            db_path if db_path is not None else config.storage.db_path,
            timeout_seconds=config.storage.timeout_seconds,
        )
        lookup = CachedFileLookup.with_limit(
            store,
            max_entries=config.caching.max_entries,
            enabled=config.caching.enabled,
        )
        return cls(store=store, lookup=lookup)

    def upload(self, data: bytes, *, name: str, mime: str | None = None) -> PersistedFile:
        normalized_name = name.strip()
        if not normalized_name:
            raise ValueError("file name must not be empty.")

        resolved_mime = mime if mime and mime.strip() else guess_mime(normalized_name)
        persisted = self.store.create(normalized_name, resolved_mime, data)
        # a miss cached before this id existed must not outlive the upload
        self.lookup.invalidate(persisted.id)
        logger.info(
            "file_service upload id=%s name=%s mime=%s size=%d",
            persisted.id,
            persisted.name,
            persisted.mime,
            persisted.size,
        )
        return persisted

    def upload_path(
        self,
        path: str | Path,
        *,
        name: str | None = None,
        mime: str | None = None,
    ) -> PersistedFile:
        path = Path(path)
        return self.upload(path.read_bytes(), name=name or path.name, mime=mime)

    def load(self, file_id: int) -> LoadResult:
        if not self.lookup.exists(file_id):
            logger.info("file_service load not_found id=%s", file_id)
            return LoadResult.missing(file_id)
        return LoadResult.from_file(self.lookup.get(file_id))
