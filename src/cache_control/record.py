"""Validator record persisted per remote resource.

A record holds the etag and mtime last returned for a URI together with the
checksum of the content they describe. Validators are honored only while the
caller's local copy still has that checksum.
"""

import re

import structlog
from pydantic import ValidationError

from src.cache_control.models import CacheControlDocument, LoadResult, LoadStatus
from src.digest import Digester
from src.file_cache import CacheKeyNotFoundError, CacheStore, FileCacheError
from src.observability.redact import redact_url_credentials


logger = structlog.get_logger()

CACHE_NAMESPACE = "remote_file"

_NON_WORD = re.compile(r"\W", re.ASCII)


def sanitize_uri(uri: str) -> str:
    """Replace every non-word character of a URI with an underscore."""
    return _NON_WORD.sub("_", uri)


class ValidatorRecord:
    """Cache-control data (etag, mtime, checksum) for one URI."""

    @classmethod
    def load_and_validate(
        cls,
        uri: str,
        current_copy_checksum: str | None,
        *,
        store: CacheStore,
        digester: Digester | None = None,
    ) -> "ValidatorRecord":
        """Build a record, load it if persisted and validate it.

        A missing record yields an empty one. The record is returned whether
        or not validation succeeded; an invalid record has no etag or mtime.

        Args:
            uri: Resource URI.
            current_copy_checksum: Checksum of the local copy, if any.
            store: Store holding persisted records.
            digester: Digester used for the storage key.

        Returns:
            The loaded (and possibly reset) record.

        Raises:
            Exception: The underlying failure when a persisted record exists
                but cannot be read or parsed.
        """
        record = cls(uri, store=store, digester=digester)
        result = record.load()
        if result.status == LoadStatus.ERROR and result.error is not None:
            raise result.error
        record.validate(current_copy_checksum)
        return record

    def __init__(
        self,
        uri: str,
        *,
        store: CacheStore,
        digester: Digester | None = None,
    ) -> None:
        """Initialize an empty record.

        Args:
            uri: Resource URI.
            store: Store holding persisted records.
            digester: Digester used for the storage key.
        """
        self._uri = str(uri)
        self._store = store
        self._digester = digester or Digester()
        self.etag: str | None = None
        self.mtime: str | None = None
        self.checksum: str | None = None
        self._log = logger.bind(
            component="cache_control", uri=redact_url_credentials(self._uri)
        )

    @property
    def uri(self) -> str:
        """Get the resource URI."""
        return self._uri

    @property
    def cache_file_basename(self) -> str:
        """Filesystem-safe, collision-free name for this URI's record."""
        uri_md5 = self._digester.md5_checksum(self._uri)
        return f"{sanitize_uri(self._uri)}-{uri_md5}.json"

    @property
    def storage_key(self) -> str:
        """Key of this record in the cache store."""
        return f"{CACHE_NAMESPACE}/{self.cache_file_basename}"

    def load(self) -> LoadResult:
        """Load the persisted record into this instance.

        Returns:
            LOADED with this record, NOT_FOUND if nothing is persisted, or
            ERROR with the exception if the document could not be read.
        """
        try:
            raw = self._store.load(self.storage_key)
        except CacheKeyNotFoundError:
            self._log.debug("cache_record_not_found", key=self.storage_key)
            return LoadResult(status=LoadStatus.NOT_FOUND)
        except (FileCacheError, OSError) as e:
            self._log.warning(
                "cache_record_unreadable", key=self.storage_key, error=str(e)
            )
            return LoadResult(status=LoadStatus.ERROR, error=e)

        try:
            document = CacheControlDocument.model_validate_json(raw)
        except ValidationError as e:
            self._log.warning(
                "cache_record_invalid",
                key=self.storage_key,
                error_count=e.error_count(),
            )
            return LoadResult(status=LoadStatus.ERROR, error=e)

        self._apply(document)
        self._log.debug(
            "cache_record_loaded",
            key=self.storage_key,
            has_etag=self.etag is not None,
            has_mtime=self.mtime is not None,
        )
        return LoadResult(status=LoadStatus.LOADED, record=self)

    def validate(self, current_copy_checksum: str | None) -> bool:
        """Check the record against the checksum of the local copy.

        On mismatch (or no local copy) etag and mtime are cleared. The stored
        checksum is kept as the last known digest.

        Args:
            current_copy_checksum: Checksum of the local copy, if any.

        Returns:
            True if the validators may be used.
        """
        if current_copy_checksum is None or self.checksum != current_copy_checksum:
            if self.etag is not None or self.mtime is not None:
                self._log.debug(
                    "cache_record_invalidated",
                    has_local_copy=current_copy_checksum is not None,
                )
            self._reset()
            return False
        return True

    def save(self) -> None:
        """Persist the record, overwriting any previous one."""
        self._store.store(self.storage_key, self.to_json())
        self._log.debug("cache_record_saved", key=self.storage_key)

    def to_document(self) -> CacheControlDocument:
        """Get the serializable form of this record."""
        return CacheControlDocument(
            etag=self.etag,
            mtime=self.mtime,
            checksum=self.checksum,
        )

    def to_json(self) -> str:
        """Serialize the record to JSON."""
        return self.to_document().model_dump_json()

    def _reset(self) -> None:
        self.etag = None
        self.mtime = None

    def _apply(self, document: CacheControlDocument) -> None:
        self.etag = document.etag
        self.mtime = document.mtime
        self.checksum = document.checksum

    def __repr__(self) -> str:
        return (
            f"ValidatorRecord(uri={self._uri!r}, etag={self.etag!r}, "
            f"mtime={self.mtime!r}, checksum={self.checksum!r})"
        )
