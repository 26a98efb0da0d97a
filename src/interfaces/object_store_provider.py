"""Abstract base class for object-storage providers.

Objects are addressed by ``(bucket, key)``.  The pipeline reads source PDFs
through :meth:`IObjectStore.fetch` and, when archiving is enabled, writes
chunk text and extracted images through :meth:`IObjectStore.put`.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


# Concrete implementation: LocalObjectStore (src/providers/object_store/)
class IObjectStore(ABC):
    """Contract for fetch-by-key / put-by-key object storage."""

    @abstractmethod
    async def fetch(self, bucket: str, key: str) -> bytes:
        """Return the object's bytes.

        Raises
        ------
        src.utils.errors.ObjectNotFoundError
            If no object exists under *key* in *bucket*.
        """

    @abstractmethod
    async def put(self, bucket: str, key: str, data: bytes) -> None:
        """Store *data* under *key* in *bucket*, replacing any existing object."""

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a human-readable identifier for this object store."""
