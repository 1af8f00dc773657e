"""Content digests for cache keys and downloaded files.

MD5 names cache entries (short, stable, not security relevant); SHA-256 is
the content checksum used to decide whether a local copy still matches the
validators recorded for it.
"""

import hashlib
from pathlib import Path
from typing import BinaryIO


DEFAULT_CHUNK_SIZE = 1024 * 1024


class Digester:
    """Computes hex digests of strings, bytes, streams and files."""

    def __init__(self, chunk_size: int = DEFAULT_CHUNK_SIZE) -> None:
        """Initialize the digester.

        Args:
            chunk_size: Read size used when streaming files.
        """
        self._chunk_size = chunk_size

    def md5_checksum(self, data: str | bytes | BinaryIO) -> str:
        """Compute the MD5 hex digest of data.

        Args:
            data: Text (UTF-8 encoded), raw bytes, or a binary stream.

        Returns:
            32 character hex digest.
        """
        return self._digest(hashlib.md5(usedforsecurity=False), data)

    def checksum(self, data: str | bytes | BinaryIO) -> str:
        """Compute the SHA-256 hex digest of data.

        Args:
            data: Text (UTF-8 encoded), raw bytes, or a binary stream.

        Returns:
            64 character hex digest.
        """
        return self._digest(hashlib.sha256(), data)

    def checksum_for_file(self, path: Path | str) -> str | None:
        """Compute the SHA-256 hex digest of a file.

        Args:
            path: File to digest.

        Returns:
            Hex digest, or None if the file does not exist.
        """
        file_path = Path(path)
        if not file_path.is_file():
            return None
        with file_path.open("rb") as f:
            return self.checksum(f)

    def _digest(self, hasher: "hashlib._Hash", data: str | bytes | BinaryIO) -> str:
        if isinstance(data, str):
            hasher.update(data.encode("utf-8"))
        elif isinstance(data, bytes | bytearray):
            hasher.update(data)
        else:
            for chunk in iter(lambda: data.read(self._chunk_size), b""):
                hasher.update(chunk)
        return hasher.hexdigest()


def checksum_for_file(path: Path | str) -> str | None:
    """Compute the SHA-256 checksum of a file with a default digester."""
    return Digester().checksum_for_file(path)
