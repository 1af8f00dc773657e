"""Checksum utilities for cache keys and content verification."""

from src.digest.digester import Digester, checksum_for_file


__all__ = [
    "Digester",
    "checksum_for_file",
]
