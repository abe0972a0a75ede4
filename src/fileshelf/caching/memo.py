from __future__ import annotations

import logging
import threading
from collections import OrderedDict
from collections.abc import Hashable
from dataclasses import dataclass
from typing import Generic, TypeVar

logger = logging.getLogger(__name__)

TValue = TypeVar("TValue")

# (cache epoch, per-key generation) observed by a lookup
CacheToken = tuple[int, int]

_MISSING = object()


@dataclass(frozen=True, slots=True)
class CacheStats:
    name: str
    hits: int
    misses: int
    size: int
    evictions: int


class MemoCache(Generic[TValue]):
    """Thread-safe keyed cache owned by a single lookup.

    Unbounded unless ``max_entries`` is given, in which case the least
    recently used entry is evicted once the limit is exceeded. The lock
    covers only the cache's own read or insert step.

    Every ``lookup`` hands back a token. ``discard`` moves the key's
    generation and ``clear`` moves the whole cache's epoch, so a ``put``
    carrying a token from before either call is dropped instead of
    restoring a value computed before the invalidation.
    """

    def __init__(self, name: str, *, max_entries: int | None = None) -> None:
        if not name.strip():
            raise ValueError("cache name must not be empty.")
        if max_entries is not None and max_entries < 1:
            raise ValueError("max_entries must be >= 1.")

        self.name = name
        self.max_entries = max_entries
        self._entries: OrderedDict[Hashable, TValue] = OrderedDict()
        self._generations: dict[Hashable, int] = {}
        self._epoch = 0
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0
        self._evictions = 0

    def lookup(self, key: Hashable) -> tuple[bool, TValue | None, CacheToken]:
        """Return ``(hit, value, token)``; ``value`` is ``None`` on a miss."""
        with self._lock:
            token = self._token(key)
            value = self._entries.get(key, _MISSING)
            if value is _MISSING:
                self._misses += 1
                return False, None, token
            self._hits += 1
            if self.max_entries is not None:
                self._entries.move_to_end(key)
            return True, value, token  # type: ignore[return-value]

    def put(self, key: Hashable, value: TValue, *, token: CacheToken | None = None) -> bool:
        """Insert ``value`` under ``key``, replacing any prior entry.

        With a ``token``, the insert only happens when ``key`` has not been
        discarded or the cache cleared since that token was issued.
        Return whether the value was stored.
        """
        evicted: list[Hashable] = []
        with self._lock:
            if token is not None and token != self._token(key):
                stale = True
            else:
                stale = False
                self._entries[key] = value
                self._entries.move_to_end(key)
                if self.max_entries is not None:
                    while len(self._entries) > self.max_entries:
                        evicted_key, _ = self._entries.popitem(last=False)
                        evicted.append(evicted_key)
                    self._evictions += len(evicted)

        if stale:
            logger.debug("memo_cache skip_stale cache=%s key=%s", self.name, key)
            return False
        for evicted_key in evicted:
            logger.debug("memo_cache evict cache=%s key=%s", self.name, evicted_key)
        return True

    def discard(self, key: Hashable) -> bool:
        with self._lock:
            self._generations[key] = self._generations.get(key, 0) + 1
            return self._entries.pop(key, _MISSING) is not _MISSING

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self._generations.clear()
            self._epoch += 1

    def stats(self) -> CacheStats:
        with self._lock:
            return CacheStats(
                name=self.name,
                hits=self._hits,
                misses=self._misses,
                size=len(self._entries),
                evictions=self._evictions,
            )

    def _token(self, key: Hashable) -> CacheToken:
        return self._epoch, self._generations.get(key, 0)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
