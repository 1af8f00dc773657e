"""Data models for remote file fetches."""

from pathlib import Path
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, field_validator

from src.remote_file.constants import DEFAULT_MAX_RESPONSE_SIZE_BYTES


class ResourceOptions(BaseModel):
    """User-specified options of the resource being mirrored."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    use_etag: bool = Field(default=True, description="Send If-None-Match")
    use_last_modified: bool = Field(default=True, description="Send If-Modified-Since")
    headers: dict[str, str] = Field(
        default_factory=dict,
        description="Extra request headers; override conditional headers",
    )


class RequestOptions(BaseModel):
    """Per-request options handed to the transport."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    decompress: bool = Field(
        default=True, description="Transparently decode Content-Encoding"
    )


class TransportConfig(BaseModel):
    """Configuration for the HTTP transport."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    user_agent: Annotated[str, Field(min_length=1, max_length=500)] = (
        "remote-file-cache/1.0"
    )
    timeout_seconds: Annotated[float, Field(ge=1.0, le=3600.0)] = 60.0
    max_response_size_bytes: Annotated[int, Field(ge=1024)] = (
        DEFAULT_MAX_RESPONSE_SIZE_BYTES
    )
    follow_redirects: bool = True

    @field_validator("user_agent")
    @classmethod
    def strip_user_agent(cls, v: str) -> str:
        """Reject blank user agents."""
        if not v.strip():
            msg = "user_agent must not be blank"
            raise ValueError(msg)
        return v.strip()


class FetchResult(BaseModel):
    """Result of a conditional fetch.

    ``content`` is a temporary file holding the new body, or None when the
    server confirmed the existing copy. The caller owns the temporary file.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    content: Path | None = Field(default=None, description="Downloaded body")
    etag: str | None = Field(default=None, description="Current entity tag")
    mtime: str | None = Field(default=None, description="Current Last-Modified")

    @property
    def is_modified(self) -> bool:
        """Check if new content was downloaded."""
        return self.content is not None


class MirrorResult(BaseModel):
    """Outcome of ensuring a local path mirrors a remote file."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    path: Path
    updated: bool
    etag: str | None = None
    mtime: str | None = None
    checksum: str | None = Field(
        default=None, description="Checksum of the file now at path"
    )
