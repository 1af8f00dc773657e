"""File-backed and in-memory key/value stores.

Keys are relative paths such as ``remote_file/<name>.json``; values are text.
No locking is done: concurrent writers to the same key race, last write wins.
"""

from pathlib import Path
from typing import Protocol

import structlog

from src.file_cache.errors import (
    CacheKeyNotFoundError,
    CorruptCacheEntryError,
    InvalidCacheKeyError,
)


logger = structlog.get_logger()


class CacheStore(Protocol):
    """Protocol for cache storage operations.

    Abstracts the storage layer so records can be persisted to disk or kept
    in memory.
    """

    def store(self, key: str, data: str) -> None:
        """Store text under a key, replacing any previous value.

        Args:
            key: Cache key.
            data: Serialized value.
        """
        ...

    def load(self, key: str) -> str:
        """Load the text stored under a key.

        Args:
            key: Cache key.

        Returns:
            Stored value.

        Raises:
            CacheKeyNotFoundError: If nothing is stored under the key.
        """
        ...

    def has_key(self, key: str) -> bool:
        """Check whether a value is stored under a key."""
        ...


class FileCache:
    """Stores each key as a UTF-8 file below a base directory."""

    def __init__(self, base_dir: Path | str) -> None:
        """Initialize the file cache.

        Args:
            base_dir: Root directory; created lazily on first write.
        """
        self._base_dir = Path(base_dir)
        self._log = logger.bind(component="file_cache", base_dir=str(self._base_dir))

    @property
    def base_dir(self) -> Path:
        """Get the root directory."""
        return self._base_dir

    def store(self, key: str, data: str) -> None:
        """Write a value atomically (temp file then rename)."""
        path = self._path_for(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp = path.with_suffix(path.suffix + ".tmp")
        tmp.write_text(data, encoding="utf-8")
        tmp.replace(path)
        self._log.debug("cache_store", key=key, bytes=len(data))

    def load(self, key: str) -> str:
        """Read a value, raising CacheKeyNotFoundError if absent."""
        path = self._path_for(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError as e:
            raise CacheKeyNotFoundError(key) from e
        except UnicodeDecodeError as e:
            raise CorruptCacheEntryError(key) from e

    def has_key(self, key: str) -> bool:
        """Check whether a file exists for the key."""
        return self._path_for(key).is_file()

    def _path_for(self, key: str) -> Path:
        base = self._base_dir.resolve()
        path = (base / key).resolve()
        if not key or not path.is_relative_to(base) or path == base:
            raise InvalidCacheKeyError(key)
        return path


class MemoryCache:
    """Dictionary-backed store, useful for embedding and tests."""

    def __init__(self) -> None:
        """Initialize an empty store."""
        self._data: dict[str, str] = {}

    def store(self, key: str, data: str) -> None:
        """Store a value."""
        self._data[key] = data

    def load(self, key: str) -> str:
        """Load a value, raising CacheKeyNotFoundError if absent."""
        try:
            return self._data[key]
        except KeyError as e:
            raise CacheKeyNotFoundError(key) from e

    def has_key(self, key: str) -> bool:
        """Check whether a value is stored."""
        return key in self._data
