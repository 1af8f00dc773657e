"""Conditional GET of a single remote file.

The fetcher sends the validators remembered for a URI, downloads new content
when the server has any, and remembers the validators of what it downloaded.
"""

from pathlib import Path

import httpx
import structlog

from src.cache_control import ValidatorRecord
from src.digest import Digester
from src.file_cache import CacheStore
from src.observability.redact import redact_headers, redact_url_credentials
from src.remote_file.constants import (
    COMPRESSED_SUFFIX,
    HEADER_IF_MODIFIED_SINCE,
    HEADER_IF_NONE_MATCH,
)
from src.remote_file.errors import RetriableHTTPError
from src.remote_file.metrics import RemoteFileMetrics
from src.remote_file.models import FetchResult, RequestOptions, ResourceOptions
from src.remote_file.state_machine import FetchState, FetchStateMachine
from src.remote_file.transport import Transport, TransportResponse


logger = structlog.get_logger()


class ConditionalFetcher:
    """Fetches a remote file, skipping the download when it is unchanged.

    Not thread-safe; concurrent fetchers for the same URI race on the
    persisted record.
    """

    def __init__(
        self,
        uri: str,
        options: ResourceOptions,
        current_checksum: str | None,
        *,
        store: CacheStore,
        transport: Transport,
        digester: Digester | None = None,
    ) -> None:
        """Initialize the fetcher.

        Args:
            uri: URI of the remote file.
            options: Resource options (validators to honor, extra headers).
            current_checksum: Checksum of the local copy, None if absent.
            store: Store holding cache-control records.
            transport: HTTP transport.
            digester: Digester for cache keys and downloaded content.
        """
        self._uri = str(uri)
        self._options = options
        self._current_checksum = current_checksum
        self._store = store
        self._transport = transport
        self._digester = digester or Digester()
        self._metrics = RemoteFileMetrics.get_instance()
        self._cache_control_data: ValidatorRecord | None = None
        self._log = logger.bind(
            component="remote_file",
            uri=redact_url_credentials(self._uri),
        )

    @property
    def uri(self) -> str:
        """Get the remote file URI."""
        return self._uri

    @property
    def cache_control_data(self) -> ValidatorRecord:
        """Validated record for this URI, loaded on first access."""
        if self._cache_control_data is None:
            self._cache_control_data = ValidatorRecord.load_and_validate(
                self._uri,
                self._current_checksum,
                store=self._store,
                digester=self._digester,
            )
        return self._cache_control_data

    def conditional_headers(self) -> dict[str, str]:
        """Build If-Modified-Since / If-None-Match from the record.

        Each header is sent only when its validator is present and enabled
        in the resource options.
        """
        record = self.cache_control_data
        headers: dict[str, str] = {}
        if record.mtime is not None and self._options.use_last_modified:
            headers[HEADER_IF_MODIFIED_SINCE] = record.mtime
        if record.etag is not None and self._options.use_etag:
            headers[HEADER_IF_NONE_MATCH] = record.etag
        self._log.debug("cache_control_headers", headers=headers)
        return headers

    def headers(self) -> dict[str, str]:
        """Conditional headers merged with the resource's extra headers.

        Extra headers win on collision, compared case-insensitively.
        """
        headers = httpx.Headers(self.conditional_headers())
        for key, value in self._options.headers.items():
            headers[key] = value
        return dict(headers.items())

    def request_options(self) -> RequestOptions:
        """Options for the transport request.

        Files that already look compressed are fetched without transparent
        decompression, so a server labelling ``foo.tgz`` as gzip-encoded
        tar still yields the gzip bytes.
        """
        if self._uri.endswith(COMPRESSED_SUFFIX):
            self._log.debug("gzip_decompression_disabled")
            return RequestOptions(decompress=False)
        return RequestOptions()

    def fetch(self) -> FetchResult:
        """Fetch the remote file.

        Returns:
            FetchResult with the downloaded temp file and new validators, or
            with no content and the existing validators on 304.

        Raises:
            RetriableHTTPError: For non-2xx statuses other than 304.
            TransportError: If the request failed.
        """
        machine = FetchStateMachine(redact_url_credentials(self._uri))
        record = self.cache_control_data
        machine.transition(FetchState.CACHE_LOADED)

        headers = self.headers()
        request_options = self.request_options()
        machine.transition(FetchState.HEADERS_BUILT)

        conditional = record.etag is not None or record.mtime is not None
        self._metrics.record_fetch(conditional=conditional)
        self._log.debug(
            "fetch_start",
            headers=redact_headers(headers),
            decompress=request_options.decompress,
        )

        try:
            machine.transition(FetchState.REQUEST_SENT)
            tempfile_path, response = self._transport.request(
                self._uri, headers, request_options
            )
        except RetriableHTTPError as e:
            if not e.is_not_modified:
                raise
            machine.transition(FetchState.NOT_MODIFIED)
            self._metrics.record_not_modified()
            self._log.info("fetch_not_modified", status_code=e.status_code)
            machine.transition(FetchState.DONE)
            return FetchResult(content=None, etag=record.etag, mtime=record.mtime)

        machine.transition(FetchState.CONTENT_RECEIVED)
        try:
            self._update_cache_control_data(tempfile_path, response)
        except BaseException:
            tempfile_path.unlink(missing_ok=True)
            raise
        machine.transition(FetchState.RECORD_PERSISTED)

        size = tempfile_path.stat().st_size
        self._metrics.record_download(size)
        self._log.info(
            "fetch_complete",
            status_code=response.status_code,
            bytes=size,
            has_etag=record.etag is not None,
            has_mtime=record.mtime is not None,
        )
        machine.transition(FetchState.DONE)
        return FetchResult(content=tempfile_path, etag=record.etag, mtime=record.mtime)

    def _update_cache_control_data(
        self, tempfile_path: Path, response: TransportResponse
    ) -> None:
        record = self.cache_control_data
        record.checksum = self._digester.checksum_for_file(tempfile_path)
        record.mtime = last_modified_time_from(response)
        record.etag = etag_from(response)
        record.save()
        self._metrics.record_saved()


def last_modified_time_from(response: TransportResponse) -> str | None:
    """Last-Modified of a response, falling back to its Date header."""
    return response.headers.get("last-modified") or response.headers.get("date") or None


def etag_from(response: TransportResponse) -> str | None:
    """ETag of a response, None when missing or empty."""
    return response.headers.get("etag") or None
