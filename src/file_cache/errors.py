"""Exceptions for the file cache.

Missing keys are an expected condition for callers and get their own type so
they can be told apart from I/O failures.
"""


class FileCacheError(Exception):
    """Base exception for all file cache errors."""


class CacheKeyNotFoundError(FileCacheError):
    """Raised when a key has no stored value."""

    def __init__(self, key: str) -> None:
        """Initialize the error with the missing key.

        Args:
            key: The key that was not found.
        """
        self.key = key
        super().__init__(f"Cache key not found: {key}")


class InvalidCacheKeyError(FileCacheError):
    """Raised when a key would resolve outside the cache directory."""

    def __init__(self, key: str) -> None:
        """Initialize the error with the rejected key.

        Args:
            key: The rejected key.
        """
        self.key = key
        super().__init__(f"Invalid cache key: {key}")


class CorruptCacheEntryError(FileCacheError):
    """Raised when a stored value is not valid UTF-8."""

    def __init__(self, key: str) -> None:
        """Initialize the error with the unreadable key.

        Args:
            key: The key whose value could not be decoded.
        """
        self.key = key
        super().__init__(f"Corrupt cache entry: {key}")
