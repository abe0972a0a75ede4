"""fileshelf: persisted file uploads with cached lookups."""

from .caching import CachedFileLookup, MemoCache
from .config import AppConfig, load_config
from .errors import FileShelfError, NotFoundError, StoreUnavailableError
from .schemas import FileSummary, LoadResult, PersistedFile
from .service import FileService

__all__ = [
    "AppConfig",
    "CachedFileLookup",
    "FileService",
    "FileShelfError",
    "FileSummary",
    "LoadResult",
    "MemoCache",
    "NotFoundError",
    "PersistedFile",
    "StoreUnavailableError",
    "load_config",
]
