"""Data models for persisted cache-control records."""

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


if TYPE_CHECKING:
    from src.cache_control.record import ValidatorRecord


class CacheControlDocument(BaseModel):
    """Serialized form of a cache-control record.

    Absent validators are stored as null, never as empty strings, since an
    empty etag must not be sent as ``if-none-match``.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    etag: str | None = Field(default=None, description="Entity tag from the server")
    mtime: str | None = Field(
        default=None, description="Last-Modified (or Date) header, unparsed"
    )
    checksum: str | None = Field(
        default=None, description="Checksum of the content the validators describe"
    )

    @field_validator("etag", "mtime", "checksum", mode="before")
    @classmethod
    def empty_as_absent(cls, v: Any) -> Any:
        """Treat empty strings as absent values."""
        if v == "":
            return None
        return v


class LoadStatus(str, Enum):
    """Outcome of loading a persisted record.

    - LOADED: Document found and applied to the record
    - NOT_FOUND: Nothing persisted yet (expected on first fetch)
    - ERROR: Document present but unreadable or invalid
    """

    LOADED = "LOADED"
    NOT_FOUND = "NOT_FOUND"
    ERROR = "ERROR"


@dataclass(frozen=True)
class LoadResult:
    """Result of ``ValidatorRecord.load``.

    Truthy only when the record was loaded.

    Attributes:
        status: Load outcome.
        record: The loaded record (LOADED only).
        error: The failure (ERROR only).
    """

    status: LoadStatus
    record: "ValidatorRecord | None" = None
    error: Exception | None = None

    def __bool__(self) -> bool:
        return self.status == LoadStatus.LOADED

    @property
    def is_not_found(self) -> bool:
        """Check if no record was persisted."""
        return self.status == LoadStatus.NOT_FOUND
