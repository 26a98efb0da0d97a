"""Filesystem-backed object store.

Each bucket is a directory under ``root``; each key is a relative path
inside its bucket.  Blocking file I/O runs in a worker thread via
``asyncio.to_thread`` so callers never stall the event loop.
"""

from __future__ import annotations

import asyncio
from pathlib import Path

from src.interfaces.object_store_provider import IObjectStore
from src.utils.errors import ConfigurationError, ObjectNotFoundError
from src.utils.logging import get_logger


class LocalObjectStore(IObjectStore):
    """Object store that keeps ``bucket/key`` objects as files under *root*.

    Parameters
    ----------
    root:
        Directory holding one sub-directory per bucket.  Created lazily on
        the first :meth:`put`.
    """

    def __init__(self, root: str | Path = "./data/objects") -> None:
        self._root = Path(root)
        self._logger = get_logger(__name__)

    @property
    def root(self) -> Path:
        return self._root

    # ------------------------------------------------------------------
    # IObjectStore implementation
    # ------------------------------------------------------------------

    async def fetch(self, bucket: str, key: str) -> bytes:
        path = self._resolve(bucket, key)
        try:
            data = await asyncio.to_thread(path.read_bytes)
        except (FileNotFoundError, IsADirectoryError, NotADirectoryError) as exc:
            raise ObjectNotFoundError(
                message=f"No object {key!r} in bucket {bucket!r}",
                provider_name=self.get_provider_name(),
            ) from exc
        self._logger.debug("object_fetched", bucket=bucket, key=key, size=len(data))
        return data

    async def put(self, bucket: str, key: str, data: bytes) -> None:
        path = self._resolve(bucket, key)
        await asyncio.to_thread(self._write, path, data)
        self._logger.debug("object_stored", bucket=bucket, key=key, size=len(data))

    def get_provider_name(self) -> str:
        return "local_object_store"

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _resolve(self, bucket: str, key: str) -> Path:
        """Map ``(bucket, key)`` to a path, refusing anything outside the bucket."""
        if not bucket or "/" in bucket or bucket in (".", ".."):
            raise ConfigurationError(
                message=f"Invalid bucket name {bucket!r}",
                provider_name=self.get_provider_name(),
            )
        bucket_dir = (self._root / bucket).resolve()
        path = (bucket_dir / key.lstrip("/")).resolve()
        if not key or bucket_dir not in path.parents:
            raise ConfigurationError(
                message=f"Invalid object key {key!r}",
                provider_name=self.get_provider_name(),
            )
        return path

    @staticmethod
    def _write(path: Path, data: bytes) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
