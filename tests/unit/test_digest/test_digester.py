"""Unit tests for the digester."""

import hashlib
import io
from pathlib import Path

from src.digest import Digester, checksum_for_file


class TestDigester:
    """Tests for checksum computation."""

    def test_md5_of_text(self) -> None:
        """Test MD5 of a string matches hashlib."""
        uri = "http://example.com/foo"

        assert Digester().md5_checksum(uri) == hashlib.md5(uri.encode()).hexdigest()

    def test_md5_of_stream_matches_bytes(self) -> None:
        """Test that streamed and in-memory digests agree."""
        digester = Digester(chunk_size=3)
        data = b"some bytes to digest"

        assert digester.md5_checksum(io.BytesIO(data)) == digester.md5_checksum(data)

    def test_sha256_of_bytes(self) -> None:
        """Test SHA-256 of bytes matches hashlib."""
        assert Digester().checksum(b"abc") == hashlib.sha256(b"abc").hexdigest()

    def test_checksum_for_file(self, tmp_path: Path) -> None:
        """Test file checksums stream the file content."""
        path = tmp_path / "data.bin"
        path.write_bytes(b"x" * 10_000)

        expected = hashlib.sha256(b"x" * 10_000).hexdigest()
        assert Digester(chunk_size=1024).checksum_for_file(path) == expected
        assert checksum_for_file(path) == expected

    def test_checksum_for_missing_file(self, tmp_path: Path) -> None:
        """Test that a missing file has no checksum."""
        assert checksum_for_file(tmp_path / "missing") is None

    def test_checksum_for_directory(self, tmp_path: Path) -> None:
        """Test that a directory has no checksum."""
        assert checksum_for_file(tmp_path) is None
