"""Unit tests for the httpx transport."""

import gzip
import tempfile
from collections.abc import Callable, Iterator
from pathlib import Path

import httpx
import pytest

from src.remote_file import (
    HttpTransport,
    RequestOptions,
    RetriableHTTPError,
    RetriableReason,
    TransportConfig,
    TransportError,
    TransportErrorClass,
)
from src.remote_file.transport import classify_status


URI = "http://example.com/file.bin"


def make_transport(
    handler: Callable[[httpx.Request], httpx.Response],
    config: TransportConfig | None = None,
) -> HttpTransport:
    client = httpx.Client(transport=httpx.MockTransport(handler))
    return HttpTransport(config, client=client)


@pytest.fixture
def temp_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Route temporary files into the test directory."""
    monkeypatch.setattr(tempfile, "tempdir", str(tmp_path))
    return tmp_path


class TestClassifyStatus:
    """Tests for status classification."""

    @pytest.mark.parametrize(
        ("status", "reason"),
        [
            (200, None),
            (206, None),
            (304, RetriableReason.NOT_MODIFIED),
            (404, RetriableReason.CLIENT_ERROR),
            (429, RetriableReason.RATE_LIMITED),
            (503, RetriableReason.SERVER_ERROR),
            (301, RetriableReason.UNEXPECTED_STATUS),
            (100, RetriableReason.UNEXPECTED_STATUS),
        ],
    )
    def test_classification(self, status: int, reason: RetriableReason | None) -> None:
        """Test that statuses map to the expected reasons."""
        assert classify_status(status) == reason


class TestHttpTransport:
    """Tests for streaming requests."""

    def test_success_writes_tempfile(self, temp_dir: Path) -> None:
        """Test that a 200 body lands in a temporary file."""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(
                200, headers={"ETag": '"v1"'}, content=b"hello world"
            )

        path, response = make_transport(handler).request(URI, {}, RequestOptions())

        assert path.read_bytes() == b"hello world"
        assert path.parent == temp_dir
        assert response.status_code == 200
        assert response.headers.get("etag") == '"v1"'
        assert response.url == URI

    def test_sends_caller_headers(self, temp_dir: Path) -> None:
        """Test that caller headers and the user agent are sent."""
        seen: dict[str, str] = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen.update(request.headers)
            return httpx.Response(200, content=b"")

        config = TransportConfig(user_agent="agent/2.0")
        make_transport(handler, config).request(
            URI, {"if-none-match": '"v1"'}, RequestOptions()
        )

        assert seen["if-none-match"] == '"v1"'
        assert seen["user-agent"] == "agent/2.0"

    def test_caller_headers_replace_defaults_any_case(self, temp_dir: Path) -> None:
        """Test that a lower-cased caller header replaces the built-in one."""
        seen: list[httpx.Headers] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request.headers)
            return httpx.Response(200, content=b"")

        make_transport(handler).request(
            URI,
            {"accept-encoding": "br", "accept": "application/json"},
            RequestOptions(decompress=False),
        )

        assert seen[0].get_list("accept-encoding") == ["br"]
        assert seen[0].get_list("accept") == ["application/json"]

    def test_not_modified_raises(self, temp_dir: Path) -> None:
        """Test that 304 surfaces as a NOT_MODIFIED retriable error."""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(304)

        with pytest.raises(RetriableHTTPError) as exc_info:
            make_transport(handler).request(URI, {}, RequestOptions())

        assert exc_info.value.reason == RetriableReason.NOT_MODIFIED
        assert exc_info.value.is_not_modified
        assert exc_info.value.status_code == 304
        assert list(temp_dir.iterdir()) == []

    def test_server_error_raises(self, temp_dir: Path) -> None:
        """Test that 5xx surfaces with a different reason."""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(503, content=b"unavailable")

        with pytest.raises(RetriableHTTPError) as exc_info:
            make_transport(handler).request(URI, {}, RequestOptions())

        assert exc_info.value.reason == RetriableReason.SERVER_ERROR
        assert not exc_info.value.is_not_modified

    def test_decompression_enabled(self, temp_dir: Path) -> None:
        """Test that gzip content-encoding is decoded by default."""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(
                200,
                headers={"Content-Encoding": "gzip"},
                content=gzip.compress(b"tar bytes"),
            )

        path, _ = make_transport(handler).request(URI, {}, RequestOptions())

        assert path.read_bytes() == b"tar bytes"

    def test_decompression_disabled(self, temp_dir: Path) -> None:
        """Test that raw bytes are kept and identity encoding requested."""
        compressed = gzip.compress(b"tar bytes")
        seen: dict[str, str] = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen.update(request.headers)
            return httpx.Response(
                200, headers={"Content-Encoding": "gzip"}, content=compressed
            )

        path, _ = make_transport(handler).request(
            "http://example.com/foo.tgz", {}, RequestOptions(decompress=False)
        )

        assert path.read_bytes() == compressed
        assert seen["accept-encoding"] == "identity"

    def test_content_length_over_limit(self, temp_dir: Path) -> None:
        """Test that an oversized Content-Length is rejected up front."""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, content=b"x" * 2048)

        config = TransportConfig(max_response_size_bytes=1024)
        with pytest.raises(TransportError) as exc_info:
            make_transport(handler, config).request(URI, {}, RequestOptions())

        assert exc_info.value.error_class == TransportErrorClass.RESPONSE_SIZE_EXCEEDED
        assert list(temp_dir.iterdir()) == []

    def test_streamed_body_over_limit_removes_tempfile(self, temp_dir: Path) -> None:
        """Test that a chunked body over the limit leaves no temp file."""

        def chunks() -> Iterator[bytes]:
            for _ in range(4):
                yield b"x" * 512

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, content=chunks())

        config = TransportConfig(max_response_size_bytes=1024)
        with pytest.raises(TransportError) as exc_info:
            make_transport(handler, config).request(URI, {}, RequestOptions())

        assert exc_info.value.error_class == TransportErrorClass.RESPONSE_SIZE_EXCEEDED
        assert list(temp_dir.iterdir()) == []

    @pytest.mark.parametrize(
        ("exc", "error_class"),
        [
            (httpx.ConnectTimeout("timed out"), TransportErrorClass.NETWORK_TIMEOUT),
            (httpx.ConnectError("refused"), TransportErrorClass.CONNECTION_ERROR),
            (httpx.RemoteProtocolError("bad"), TransportErrorClass.UNKNOWN),
        ],
    )
    def test_network_errors_classified(
        self,
        temp_dir: Path,
        exc: httpx.HTTPError,
        error_class: TransportErrorClass,
    ) -> None:
        """Test that httpx failures become TransportError."""

        def handler(request: httpx.Request) -> httpx.Response:
            raise exc

        with pytest.raises(TransportError) as exc_info:
            make_transport(handler).request(URI, {}, RequestOptions())

        assert exc_info.value.error_class == error_class
        assert exc_info.value.__cause__ is exc


class TestTransportConfig:
    """Tests for transport configuration."""

    def test_defaults(self) -> None:
        """Test default configuration values."""
        config = TransportConfig()

        assert config.user_agent == "remote-file-cache/1.0"
        assert config.follow_redirects is True

    def test_blank_user_agent_rejected(self) -> None:
        """Test that a whitespace user agent is rejected."""
        with pytest.raises(ValueError, match="user_agent"):
            TransportConfig(user_agent="   ")
