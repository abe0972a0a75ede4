from __future__ import annotations

import logging
from dataclasses import dataclass

from fileshelf.errors import NotFoundError
from fileshelf.schemas import PersistedFile
from fileshelf.storage import FileStore

from .memo import CacheStats, MemoCache

logger = logging.getLogger(__name__)

EXISTS_CACHE_NAME = "persisted_ids"
FILES_CACHE_NAME = "persisted_file"


@dataclass(frozen=True, slots=True)
class LookupStats:
    exists: CacheStats
    files: CacheStats


class CachedFileLookup:
    """Read-through lookups of persisted files by id.

    Two independent caches sit in front of the store: one remembers
    ``exists`` answers (including ``False``), the other remembers fetched
    files. Only successful store responses are cached; ``NotFoundError``
    and store failures always propagate uncached. The store is never
    called while a cache lock is held, so concurrent misses for one id may
    each reach the store and the last insert stands. An insert whose
    lookup happened before ``invalidate`` or ``clear`` for that id is
    dropped, so a stale answer cannot outlive the invalidation.
    """

    def __init__(
        self,
        store: FileStore,
        *,
        exists_cache: MemoCache[bool] | None = None,
        files_cache: MemoCache[PersistedFile] | None = None,
        enabled: bool = True,
    ) -> None:
        self.store = store
        if exists_cache is None:
            exists_cache = MemoCache(EXISTS_CACHE_NAME)
        if files_cache is None:
            files_cache = MemoCache(FILES_CACHE_NAME)
        self.exists_cache = exists_cache
        self.files_cache = files_cache
        self.enabled = enabled

    @classmethod
    def with_limit(
        cls,
        store: FileStore,
        *,
        max_entries: int | None,
        enabled: bool = True,
    ) -> CachedFileLookup:
        return cls(
            store,
            exists_cache=MemoCache(EXISTS_CACHE_NAME, max_entries=max_entries),
            files_cache=MemoCache(FILES_CACHE_NAME, max_entries=max_entries),
            enabled=enabled,
        )

    def exists(self, file_id: int) -> bool:
        token = None
        if self.enabled:
            hit, cached, token = self.exists_cache.lookup(file_id)
            if hit:
                logger.info("cached_lookup hit cache=%s key=%s", self.exists_cache.name, file_id)
                return bool(cached)
            logger.info("cached_lookup miss cache=%s key=%s", self.exists_cache.name, file_id)

        found = self.store.exists(file_id)

        if self.enabled and self.exists_cache.put(file_id, found, token=token):
            logger.info(
                "cached_lookup set cache=%s key=%s value=%s",
                self.exists_cache.name,
                file_id,
                found,
            )
        return found

    def get(self, file_id: int) -> PersistedFile:
        token = None
        if self.enabled:
            hit, cached, token = self.files_cache.lookup(file_id)
            if hit and cached is not None:
                logger.info("cached_lookup hit cache=%s key=%s", self.files_cache.name, file_id)
                return cached
            logger.info("cached_lookup miss cache=%s key=%s", self.files_cache.name, file_id)

        persisted = self.store.get(file_id)
        if persisted is None:
            raise NotFoundError(file_id)

        if self.enabled and self.files_cache.put(file_id, persisted, token=token):
            logger.info("cached_lookup set cache=%s key=%s", self.files_cache.name, file_id)
        return persisted

    def invalidate(self, file_id: int) -> None:
        """Drop ``file_id`` from both caches."""
        dropped_exists = self.exists_cache.discard(file_id)
        dropped_file = self.files_cache.discard(file_id)
        if dropped_exists or dropped_file:
            logger.info("cached_lookup invalidate key=%s", file_id)

    def clear(self) -> None:
        self.exists_cache.clear()
        self.files_cache.clear()
        logger.info("cached_lookup clear")

    def stats(self) -> LookupStats:
        return LookupStats(exists=self.exists_cache.stats(), files=self.files_cache.stats())
