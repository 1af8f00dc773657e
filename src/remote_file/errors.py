"""Exceptions raised while fetching a remote file.

Only ``RetriableHTTPError`` with reason NOT_MODIFIED is handled by the
fetcher; every other error propagates to the caller.
"""

from enum import Enum


class RetriableReason(str, Enum):
    """Why a response was not a usable 2xx.

    - NOT_MODIFIED: 304, the cached copy is current
    - RATE_LIMITED: 429 Too Many Requests
    - CLIENT_ERROR: Other 4xx
    - SERVER_ERROR: 5xx
    - UNEXPECTED_STATUS: Any other non-2xx status
    """

    NOT_MODIFIED = "NOT_MODIFIED"
    RATE_LIMITED = "RATE_LIMITED"
    CLIENT_ERROR = "CLIENT_ERROR"
    SERVER_ERROR = "SERVER_ERROR"
    UNEXPECTED_STATUS = "UNEXPECTED_STATUS"


class TransportErrorClass(str, Enum):
    """Classification of failures below the HTTP status level.

    - NETWORK_TIMEOUT: Request timed out
    - CONNECTION_ERROR: Could not establish connection
    - RESPONSE_SIZE_EXCEEDED: Body exceeded the configured size limit
    - UNKNOWN: Unclassified transport failure
    """

    NETWORK_TIMEOUT = "NETWORK_TIMEOUT"
    CONNECTION_ERROR = "CONNECTION_ERROR"
    RESPONSE_SIZE_EXCEEDED = "RESPONSE_SIZE_EXCEEDED"
    UNKNOWN = "UNKNOWN"


class RemoteFileError(Exception):
    """Base exception for remote file fetch errors."""


class RetriableHTTPError(RemoteFileError):
    """Raised when the server answered with a non-2xx status."""

    def __init__(
        self,
        reason: RetriableReason,
        status_code: int,
        uri: str,
    ) -> None:
        """Initialize the error.

        Args:
            reason: Classification of the status.
            status_code: HTTP status code.
            uri: Requested URI (credentials already redacted).
        """
        self.reason = reason
        self.status_code = status_code
        self.uri = uri
        super().__init__(f"{status_code} {reason.value} for {uri}")

    @property
    def is_not_modified(self) -> bool:
        """Check if the server reported the content unchanged."""
        return self.reason == RetriableReason.NOT_MODIFIED


class TransportError(RemoteFileError):
    """Raised when the request failed before a usable response arrived."""

    def __init__(self, error_class: TransportErrorClass, message: str) -> None:
        """Initialize the error.

        Args:
            error_class: Classification of the failure.
            message: Human-readable message.
        """
        self.error_class = error_class
        super().__init__(message)
