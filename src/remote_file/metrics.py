"""Metrics collection for remote file fetches."""

from dataclasses import dataclass
from typing import ClassVar


@dataclass
class RemoteFileMetrics:
    """Counters for conditional fetches.

    Singleton class shared by all fetchers in the process.
    """

    fetch_total: int = 0
    download_total: int = 0
    not_modified_total: int = 0
    conditional_request_total: int = 0
    record_saved_total: int = 0
    bytes_downloaded_total: int = 0

    _instance: ClassVar["RemoteFileMetrics | None"] = None

    @classmethod
    def get_instance(cls) -> "RemoteFileMetrics":
        """Get singleton metrics instance."""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Reset metrics (primarily for testing)."""
        cls._instance = None

    def record_fetch(self, conditional: bool) -> None:
        """Record an outgoing request.

        Args:
            conditional: Whether validators were sent.
        """
        self.fetch_total += 1
        if conditional:
            self.conditional_request_total += 1

    def record_download(self, bytes_received: int) -> None:
        """Record a response that carried new content.

        Args:
            bytes_received: Size of the downloaded body.
        """
        self.download_total += 1
        self.bytes_downloaded_total += bytes_received

    def record_not_modified(self) -> None:
        """Record a 304 response."""
        self.not_modified_total += 1

    def record_saved(self) -> None:
        """Record a persisted cache-control record."""
        self.record_saved_total += 1

    def to_dict(self) -> dict[str, int]:
        """Convert metrics to dictionary.

        Returns:
            Dictionary of metric name to value.
        """
        return {
            "fetch_total": self.fetch_total,
            "download_total": self.download_total,
            "not_modified_total": self.not_modified_total,
            "conditional_request_total": self.conditional_request_total,
            "record_saved_total": self.record_saved_total,
            "bytes_downloaded_total": self.bytes_downloaded_total,
        }
