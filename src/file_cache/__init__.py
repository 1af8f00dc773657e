"""Key/value file cache used to persist cache-control records."""

from src.file_cache.errors import (
    CacheKeyNotFoundError,
    CorruptCacheEntryError,
    FileCacheError,
    InvalidCacheKeyError,
)
from src.file_cache.store import CacheStore, FileCache, MemoryCache


__all__ = [
    # Stores
    "CacheStore",
    "FileCache",
    "MemoryCache",
    # Errors
    "FileCacheError",
    "CacheKeyNotFoundError",
    "InvalidCacheKeyError",
    "CorruptCacheEntryError",
]
