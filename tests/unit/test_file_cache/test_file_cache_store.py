"""Unit tests for the file cache stores."""

from pathlib import Path

import pytest

from src.file_cache import (
    CacheKeyNotFoundError,
    CorruptCacheEntryError,
    FileCache,
    FileCacheError,
    InvalidCacheKeyError,
    MemoryCache,
)


class TestFileCache:
    """Tests for the file-backed store."""

    def test_store_and_load(self, tmp_path: Path) -> None:
        """Test that stored text can be loaded back."""
        cache = FileCache(tmp_path)

        cache.store("remote_file/a.json", '{"etag": null}')

        assert cache.load("remote_file/a.json") == '{"etag": null}'
        assert (tmp_path / "remote_file" / "a.json").is_file()

    def test_store_overwrites(self, tmp_path: Path) -> None:
        """Test that storing again replaces the value."""
        cache = FileCache(tmp_path)
        cache.store("k.json", "one")
        cache.store("k.json", "two")

        assert cache.load("k.json") == "two"

    def test_no_temp_file_left(self, tmp_path: Path) -> None:
        """Test that atomic writes leave no temp file behind."""
        cache = FileCache(tmp_path)
        cache.store("k.json", "data")

        assert sorted(p.name for p in tmp_path.iterdir()) == ["k.json"]

    def test_load_missing_raises_not_found(self, tmp_path: Path) -> None:
        """Test that a missing key raises CacheKeyNotFoundError."""
        cache = FileCache(tmp_path)

        with pytest.raises(CacheKeyNotFoundError) as exc_info:
            cache.load("remote_file/missing.json")

        assert exc_info.value.key == "remote_file/missing.json"
        assert isinstance(exc_info.value, FileCacheError)

    def test_has_key(self, tmp_path: Path) -> None:
        """Test key existence checks."""
        cache = FileCache(tmp_path)
        cache.store("k.json", "data")

        assert cache.has_key("k.json") is True
        assert cache.has_key("other.json") is False

    def test_undecodable_value_raises_corrupt_entry(self, tmp_path: Path) -> None:
        """Test that bytes that are not UTF-8 raise CorruptCacheEntryError."""
        cache = FileCache(tmp_path)
        (tmp_path / "bad.json").write_bytes(b"\xff\xfe{bad")

        with pytest.raises(CorruptCacheEntryError) as exc_info:
            cache.load("bad.json")

        assert exc_info.value.key == "bad.json"
        assert isinstance(exc_info.value, FileCacheError)

    @pytest.mark.parametrize("key", ["../escape.json", "", "a/../../b.json"])
    def test_rejects_keys_outside_base_dir(self, tmp_path: Path, key: str) -> None:
        """Test that keys may not escape the cache directory."""
        cache = FileCache(tmp_path / "cache")

        with pytest.raises(InvalidCacheKeyError):
            cache.store(key, "data")


class TestMemoryCache:
    """Tests for the in-memory store."""

    def test_store_and_load(self) -> None:
        """Test that stored text can be loaded back."""
        cache = MemoryCache()
        cache.store("k", "v")

        assert cache.load("k") == "v"
        assert cache.has_key("k") is True

    def test_load_missing_raises_not_found(self) -> None:
        """Test that a missing key raises CacheKeyNotFoundError."""
        with pytest.raises(CacheKeyNotFoundError):
            MemoryCache().load("missing")
