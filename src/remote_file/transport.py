"""HTTP transport that streams a remote file into a temporary file."""

import tempfile
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

import httpx
import structlog

from src.observability.redact import redact_headers, redact_url_credentials
from src.remote_file.constants import (
    DEFAULT_CHUNK_SIZE,
    HTTP_STATUS_BAD_REQUEST,
    HTTP_STATUS_NOT_MODIFIED,
    HTTP_STATUS_OK_MAX,
    HTTP_STATUS_OK_MIN,
    HTTP_STATUS_SERVER_ERROR_MAX,
    HTTP_STATUS_SERVER_ERROR_MIN,
    HTTP_STATUS_TOO_MANY_REQUESTS,
)
from src.remote_file.errors import (
    RetriableHTTPError,
    RetriableReason,
    TransportError,
    TransportErrorClass,
)
from src.remote_file.models import RequestOptions, TransportConfig


logger = structlog.get_logger()


@dataclass(frozen=True)
class TransportResponse:
    """Status and headers of a completed response.

    Attributes:
        status_code: HTTP status code.
        headers: Response headers (case-insensitive lookup).
        url: Final URL after redirects.
    """

    status_code: int
    headers: httpx.Headers
    url: str


class Transport(Protocol):
    """Protocol for the HTTP layer used by the conditional fetcher."""

    def request(
        self,
        uri: str,
        headers: dict[str, str],
        options: RequestOptions,
    ) -> tuple[Path, TransportResponse]:
        """GET a URI and stream the body into a temporary file.

        Args:
            uri: URI to fetch.
            headers: Request headers.
            options: Per-request options.

        Returns:
            Path of the temporary file and the response.

        Raises:
            RetriableHTTPError: For any non-2xx status (304 included).
            TransportError: If no usable response was received.
        """
        ...


def classify_status(status_code: int) -> RetriableReason | None:
    """Map a status code to a retriable reason, or None for 2xx."""
    if HTTP_STATUS_OK_MIN <= status_code < HTTP_STATUS_OK_MAX:
        return None
    if status_code == HTTP_STATUS_NOT_MODIFIED:
        return RetriableReason.NOT_MODIFIED
    if status_code == HTTP_STATUS_TOO_MANY_REQUESTS:
        return RetriableReason.RATE_LIMITED
    if HTTP_STATUS_BAD_REQUEST <= status_code < HTTP_STATUS_SERVER_ERROR_MIN:
        return RetriableReason.CLIENT_ERROR
    if HTTP_STATUS_SERVER_ERROR_MIN <= status_code < HTTP_STATUS_SERVER_ERROR_MAX:
        return RetriableReason.SERVER_ERROR
    return RetriableReason.UNEXPECTED_STATUS


class HttpTransport:
    """Streaming GET over httpx.

    No retries are attempted; failures are raised to the caller.
    """

    def __init__(
        self,
        config: TransportConfig | None = None,
        client: httpx.Client | None = None,
    ) -> None:
        """Initialize the transport.

        Args:
            config: Transport configuration.
            client: Optional client to reuse; a short-lived client is built
                per request otherwise. A supplied client is not closed.
        """
        self._config = config or TransportConfig()
        self._client = client
        self._log = logger.bind(component="transport")

    def request(
        self,
        uri: str,
        headers: dict[str, str],
        options: RequestOptions,
    ) -> tuple[Path, TransportResponse]:
        """GET a URI and stream the body into a temporary file."""
        request_headers = self._build_headers(headers, options)
        log = self._log.bind(
            uri=redact_url_credentials(uri),
            decompress=options.decompress,
        )
        log.debug("request_start", headers=redact_headers(dict(request_headers)))

        try:
            if self._client is not None:
                return self._stream(self._client, uri, request_headers, options)
            with httpx.Client(
                timeout=self._config.timeout_seconds,
                follow_redirects=self._config.follow_redirects,
            ) as client:
                return self._stream(client, uri, request_headers, options)
        except httpx.TimeoutException as e:
            raise TransportError(
                TransportErrorClass.NETWORK_TIMEOUT, f"Request timed out: {e}"
            ) from e
        except httpx.ConnectError as e:
            raise TransportError(
                TransportErrorClass.CONNECTION_ERROR, f"Connection failed: {e}"
            ) from e
        except httpx.HTTPError as e:
            raise TransportError(
                TransportErrorClass.UNKNOWN, f"Unexpected error: {e}"
            ) from e

    def _build_headers(
        self,
        headers: dict[str, str],
        options: RequestOptions,
    ) -> httpx.Headers:
        request_headers = httpx.Headers(
            {"User-Agent": self._config.user_agent, "Accept": "*/*"}
        )
        if not options.decompress:
            request_headers["Accept-Encoding"] = "identity"
        for key, value in headers.items():
            request_headers[key] = value
        return request_headers

    def _stream(
        self,
        client: httpx.Client,
        uri: str,
        headers: httpx.Headers,
        options: RequestOptions,
    ) -> tuple[Path, TransportResponse]:
        with client.stream("GET", uri, headers=headers) as response:
            reason = classify_status(response.status_code)
            if reason is not None:
                raise RetriableHTTPError(
                    reason, response.status_code, redact_url_credentials(uri)
                )

            self._check_content_length(response)
            chunks = (
                response.iter_bytes(chunk_size=DEFAULT_CHUNK_SIZE)
                if options.decompress
                else response.iter_raw(chunk_size=DEFAULT_CHUNK_SIZE)
            )
            path = self._write_tempfile(chunks)
            return path, TransportResponse(
                status_code=response.status_code,
                headers=response.headers,
                url=str(response.url),
            )

    def _check_content_length(self, response: httpx.Response) -> None:
        content_length = response.headers.get("content-length")
        if content_length and content_length.isdigit():
            size = int(content_length)
            if size > self._config.max_response_size_bytes:
                msg = (
                    f"Response size {size} exceeds limit "
                    f"{self._config.max_response_size_bytes}"
                )
                raise TransportError(TransportErrorClass.RESPONSE_SIZE_EXCEEDED, msg)

    def _write_tempfile(self, chunks: Iterator[bytes]) -> Path:
        """Write chunks to a new temporary file, enforcing the size limit.

        The file is removed again if writing fails.
        """
        max_size = self._config.max_response_size_bytes
        total_read = 0
        with tempfile.NamedTemporaryFile(
            prefix="remote-file-", delete=False
        ) as tmp:
            path = Path(tmp.name)
            try:
                for chunk in chunks:
                    total_read += len(chunk)
                    if total_read > max_size:
                        msg = (
                            f"Response size exceeded limit of {max_size} bytes "
                            f"(read {total_read} bytes)"
                        )
                        raise TransportError(
                            TransportErrorClass.RESPONSE_SIZE_EXCEEDED, msg
                        )
                    tmp.write(chunk)
            except Exception:
                tmp.close()
                path.unlink(missing_ok=True)
                raise
        return path
