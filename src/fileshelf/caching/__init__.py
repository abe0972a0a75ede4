"""Read-through caching for persisted file lookups."""

from .lookup import CachedFileLookup, LookupStats
from .memo import CacheStats, MemoCache

__all__ = ["CacheStats", "CachedFileLookup", "LookupStats", "MemoCache"]
