"""Unit tests for the filesystem-backed LocalObjectStore."""

from __future__ import annotations

import pytest

from src.providers.object_store.local_object_store import LocalObjectStore
from src.utils.errors import ConfigurationError, ObjectNotFoundError


class TestLocalObjectStore:
    @pytest.mark.asyncio
    async def test_put_then_fetch(self, tmp_path) -> None:
        store = LocalObjectStore(tmp_path)
        await store.put("docs", "reports/2024/q3.pdf", b"%PDF-1.7 data")

        assert await store.fetch("docs", "reports/2024/q3.pdf") == b"%PDF-1.7 data"
        assert (tmp_path / "docs" / "reports" / "2024" / "q3.pdf").is_file()

    @pytest.mark.asyncio
    async def test_put_overwrites(self, tmp_path) -> None:
        store = LocalObjectStore(tmp_path)
        await store.put("b", "k.txt", b"old")
        await store.put("b", "k.txt", b"new")
        assert await store.fetch("b", "k.txt") == b"new"

    @pytest.mark.asyncio
    async def test_missing_key(self, tmp_path) -> None:
        store = LocalObjectStore(tmp_path)
        with pytest.raises(ObjectNotFoundError) as exc_info:
            await store.fetch("docs", "absent.pdf")
        assert exc_info.value.provider_name == "local_object_store"

    @pytest.mark.asyncio
    async def test_missing_bucket(self, tmp_path) -> None:
        with pytest.raises(ObjectNotFoundError):
            await LocalObjectStore(tmp_path).fetch("nobucket", "a.pdf")

    @pytest.mark.asyncio
    async def test_directory_key_is_not_an_object(self, tmp_path) -> None:
        store = LocalObjectStore(tmp_path)
        await store.put("docs", "folder/file.txt", b"x")
        with pytest.raises(ObjectNotFoundError):
            await store.fetch("docs", "folder")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("key", ["../escape.txt", "a/../../escape.txt", ""])
    async def test_keys_outside_bucket_rejected(self, tmp_path, key: str) -> None:
        with pytest.raises(ConfigurationError):
            await LocalObjectStore(tmp_path).put("docs", key, b"x")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("bucket", ["", "..", "a/b"])
    async def test_invalid_bucket_rejected(self, tmp_path, bucket: str) -> None:
        with pytest.raises(ConfigurationError):
            await LocalObjectStore(tmp_path).fetch(bucket, "key")

    def test_provider_name(self, tmp_path) -> None:
        assert LocalObjectStore(tmp_path).get_provider_name() == "local_object_store"
