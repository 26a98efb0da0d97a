"""Abstract base class for vector-store service providers.

The ingestion pipeline only writes: it hands parallel ``ids`` /
``embeddings`` / ``metadatas`` / ``documents`` sequences to :meth:`upsert`
in fixed-size batches.  Implementations may wrap ChromaDB, Qdrant,
Pinecone, or any other vector database.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence


# Concrete implementation: ChromaDBProvider (src/providers/vector_store/)
class IVectorStoreProvider(ABC):
    """Contract for vector-store services used by the ingestion pipeline."""

    @abstractmethod
    async def upsert(
        self,
        ids: Sequence[str],
        embeddings: Sequence[Sequence[float]],
        metadatas: Sequence[Mapping[str, str | int | float | bool]],
        documents: Sequence[str],
    ) -> int:
        """Insert or replace one batch of embedded documents.

        Parameters
        ----------
        ids:
            Primary keys, one per row.
        embeddings:
            Embedding vectors aligned with *ids*.
        metadatas:
            Flat metadata mappings aligned with *ids*.
        documents:
            Raw document text aligned with *ids*.

        Returns
        -------
        int
            The number of rows written (the acknowledgement).

        Raises
        ------
        src.utils.errors.VectorStoreError
            If the four sequences differ in length or the store rejects the
            call.  The whole call fails; nothing is partially accepted.
        """

    @abstractmethod
    async def count(self) -> int:
        """Return the total number of rows in the collection."""

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a human-readable identifier for this vector-store provider."""

    @abstractmethod
    def is_available(self) -> bool:
        """Return ``True`` if the store is configured and reachable."""
