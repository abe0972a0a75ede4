from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_MIME = "application/octet-stream"


def utc_now() -> datetime:
    return datetime.now(tz=timezone.utc)


class DTOBase(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)


class PersistedFile(DTOBase):
    """One uploaded file as stored: metadata plus the raw payload."""

    id: int = Field(ge=1)
    name: str
    mime: str = DEFAULT_MIME
    data: bytes = b""

    @property
    def size(self) -> int:
        return len(self.data)


class FileSummary(DTOBase):
    id: int = Field(ge=1)
    name: str
    mime: str
    size: int = Field(ge=0)
    created_at: datetime = Field(default_factory=utc_now)


class LoadResult(DTOBase):
    found: bool
    id: int
    name: str | None = None
    mime: str | None = None
    size: int | None = None

    @classmethod
    def from_file(cls, persisted: PersistedFile) -> LoadResult:
        return cls(
            found=True,
            id=persisted.id,
            name=persisted.name,
            mime=persisted.mime,
            size=persisted.size,
        )

    @classmethod
    def missing(cls, file_id: int) -> LoadResult:
        return cls(found=False, id=file_id)
