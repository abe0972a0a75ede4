from __future__ import annotations

import logging
import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from fileshelf.errors import StoreUnavailableError
from fileshelf.schemas import FileSummary, PersistedFile, utc_now

logger = logging.getLogger(__name__)


class FileRepository:
    """SQLite-backed file store. Opens one short-lived connection per call."""

    def __init__(self, db_path: str | Path, *, timeout_seconds: float = 5.0) -> None:
        if timeout_seconds <= 0:
            raise ValueError("timeout_seconds must be > 0.")

        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self.timeout_seconds = timeout_seconds
        self._init_schema()

    def create(self, name: str, mime: str, data: bytes) -> PersistedFile:
        created_at = utc_now()
        query = """
        INSERT INTO persisted_files (name, mime, data, created_at)
        VALUES (?, ?, ?, ?)
        """
        with self._guard("create"):
            with self._connect() as conn:
                cursor = conn.execute(
                    query,
                    (name, mime, sqlite3.Binary(data), created_at.isoformat()),
                )
                file_id = cursor.lastrowid

        if file_id is None:
            raise StoreUnavailableError("create")
        logger.info("file_repository create id=%s name=%s size=%d", file_id, name, len(data))
        return PersistedFile(id=file_id, name=name, mime=mime, data=data)

    def exists(self, file_id: int) -> bool:
        query = "SELECT 1 FROM persisted_files WHERE id = ? LIMIT 1"
        with self._guard("exists", file_id):
            with self._connect() as conn:
                row = conn.execute(query, (file_id,)).fetchone()
        return row is not None

    def get(self, file_id: int) -> PersistedFile | None:
        query = """
        SELECT id, name, mime, data
        FROM persisted_files
        WHERE id = ?
        """
        with self._guard("get", file_id):
            with self._connect() as conn:
                row = conn.execute(query, (file_id,)).fetchone()

        if row is None:
            return None
        return self._row_to_persisted_file(row)

    def list_files(self, limit: int | None = None) -> list[FileSummary]:
        if limit is not None and limit < 1:
            raise ValueError("limit must be >= 1")

        query = """
        SELECT id, name, mime, length(data) AS size, created_at
        FROM persisted_files
        ORDER BY id DESC
        """
        params: tuple[object, ...] = ()
        if limit is not None:
            query += " LIMIT ?"
            params = (limit,)

        with self._guard("list_files"):
            with self._connect() as conn:
                rows = conn.execute(query, params).fetchall()

        return [self._row_to_file_summary(row) for row in rows]

    def _init_schema(self) -> None:
        schema_path = Path(__file__).with_name("schema.sql")
        schema = schema_path.read_text(encoding="utf-8")
        with self._guard("init_schema"):
            with self._connect() as conn:
                conn.executescript(schema)

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path, timeout=self.timeout_seconds)
        conn.row_factory = sqlite3.Row
        return conn

    @contextmanager
    def _guard(self, operation: str, file_id: int | None = None) -> Iterator[None]:
        try:
            yield
        except sqlite3.Error as exc:
            logger.warning(
                "file_repository failure operation=%s id=%s error=%s",
                operation,
                file_id,
                exc,
            )
            raise StoreUnavailableError(operation, file_id) from exc

    @staticmethod
    def _row_to_persisted_file(row: sqlite3.Row) -> PersistedFile:
        return PersistedFile(
            id=row["id"],
            name=row["name"],
            mime=row["mime"],
            data=bytes(row["data"]),
        )

    @staticmethod
    def _row_to_file_summary(row: sqlite3.Row) -> FileSummary:
        return FileSummary(
            id=row["id"],
            name=row["name"],
            mime=row["mime"],
            size=row["size"],
            created_at=row["created_at"],
        )
