"""Conditional fetching of remote files.

This module provides:
- ETag/Last-Modified conditional requests driven by cache-control records
- Streaming downloads into temporary files over httpx
- A mirror helper that keeps a local path in sync with a URI
- Metrics collection for observability
"""

from src.remote_file.constants import (
    DEFAULT_CHUNK_SIZE,
    DEFAULT_MAX_RESPONSE_SIZE_BYTES,
    HEADER_IF_MODIFIED_SINCE,
    HEADER_IF_NONE_MATCH,
    HTTP_STATUS_NOT_MODIFIED,
)
from src.remote_file.errors import (
    RemoteFileError,
    RetriableHTTPError,
    RetriableReason,
    TransportError,
    TransportErrorClass,
)
from src.remote_file.fetcher import ConditionalFetcher
from src.remote_file.metrics import RemoteFileMetrics
from src.remote_file.mirror import ensure_remote_file
from src.remote_file.models import (
    FetchResult,
    MirrorResult,
    RequestOptions,
    ResourceOptions,
    TransportConfig,
)
from src.remote_file.state_machine import (
    FetchState,
    FetchStateError,
    FetchStateMachine,
)
from src.remote_file.transport import HttpTransport, Transport, TransportResponse


__all__ = [
    # Fetcher
    "ConditionalFetcher",
    "ensure_remote_file",
    # Transport
    "Transport",
    "HttpTransport",
    "TransportResponse",
    # Models
    "FetchResult",
    "MirrorResult",
    "RequestOptions",
    "ResourceOptions",
    "TransportConfig",
    # Errors
    "RemoteFileError",
    "RetriableHTTPError",
    "RetriableReason",
    "TransportError",
    "TransportErrorClass",
    # State machine
    "FetchState",
    "FetchStateError",
    "FetchStateMachine",
    # Constants
    "HEADER_IF_MODIFIED_SINCE",
    "HEADER_IF_NONE_MATCH",
    "HTTP_STATUS_NOT_MODIFIED",
    "DEFAULT_MAX_RESPONSE_SIZE_BYTES",
    "DEFAULT_CHUNK_SIZE",
    # Metrics
    "RemoteFileMetrics",
]
