"""Cache-control records: the validators remembered for a remote resource."""

from src.cache_control.models import CacheControlDocument, LoadResult, LoadStatus
from src.cache_control.record import (
    CACHE_NAMESPACE,
    ValidatorRecord,
    sanitize_uri,
)


__all__ = [
    # Record
    "ValidatorRecord",
    "CACHE_NAMESPACE",
    "sanitize_uri",
    # Models
    "CacheControlDocument",
    "LoadResult",
    "LoadStatus",
]
