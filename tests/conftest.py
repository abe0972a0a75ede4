from __future__ import annotations

import threading

import pytest

from fileshelf.errors import StoreUnavailableError
from fileshelf.schemas import FileSummary, PersistedFile
from fileshelf.storage import InMemoryFileStore


class CountingStore:
    """Wraps an in-memory store and counts every call that reaches it."""

    def __init__(self, files: list[PersistedFile] | None = None) -> None:
        self.inner = InMemoryFileStore.from_preloaded(files or [])
        self.exists_calls: list[int] = []
        self.get_calls: list[int] = []
        self._lock = threading.Lock()

    def exists(self, file_id: int) -> bool:
        with self._lock:
            self.exists_calls.append(file_id)
        return self.inner.exists(file_id)

    def get(self, file_id: int) -> PersistedFile | None:
        with self._lock:
            self.get_calls.append(file_id)
        return self.inner.get(file_id)

    def create(self, name: str, mime: str, data: bytes) -> PersistedFile:
        return self.inner.create(name, mime, data)

    def list_files(self, limit: int | None = None) -> list[FileSummary]:
        return self.inner.list_files(limit=limit)


class FlakyStore(CountingStore):
    """Fails the first ``failures`` calls with StoreUnavailableError."""

    def __init__(self, files: list[PersistedFile] | None = None, *, failures: int = 1) -> None:
        super().__init__(files)
        self.failures = failures

    def exists(self, file_id: int) -> bool:
        self._maybe_fail("exists", file_id)
        return super().exists(file_id)

    def get(self, file_id: int) -> PersistedFile | None:
        self._maybe_fail("get", file_id)
        return super().get(file_id)

    def _maybe_fail(self, operation: str, file_id: int) -> None:
        if self.failures > 0:
            self.failures -= 1
            raise StoreUnavailableError(operation, file_id)


@pytest.fixture
def sample_file() -> PersistedFile:
    return PersistedFile(id=1, name="a.txt", mime="text/plain", data=bytes([1, 2, 3]))


@pytest.fixture
def counting_store(sample_file: PersistedFile) -> CountingStore:
    return CountingStore([sample_file])


@pytest.fixture
def counting_store_cls() -> type[CountingStore]:
    return CountingStore


@pytest.fixture
def flaky_store_cls() -> type[FlakyStore]:
    return FlakyStore


class GatedStore(CountingStore):
    """Holds the first ``exists`` call after it has read the store.

    ``entered`` is set once the answer is read; the call returns only after
    ``release`` is set.
    """

    def __init__(self, files: list[PersistedFile] | None = None) -> None:
        super().__init__(files)
        self.entered = threading.Event()
        self.release = threading.Event()
        self._gated = True

    def exists(self, file_id: int) -> bool:
        found = super().exists(file_id)
        with self._lock:
            gated, self._gated = self._gated, False
        if gated:
            self.entered.set()
            self.release.wait(timeout=5.0)
        return found


@pytest.fixture
def gated_store_cls() -> type[GatedStore]:
    return GatedStore
