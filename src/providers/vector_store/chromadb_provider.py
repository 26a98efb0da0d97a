"""ChromaDB vector store provider adapter.

Wraps ``chromadb.PersistentClient`` to implement :class:`IVectorStoreProvider`.
The collection is created with cosine distance; all embeddings are
pre-computed by the ingestion pipeline, so ChromaDB's own embedding
function is replaced by a no-op.
"""

from __future__ import annotations

import os
from collections.abc import Mapping, Sequence

# ChromaDB's bundled PostHog telemetry client breaks against some installed
# posthog versions; disable it before chromadb is imported.
os.environ["ANONYMIZED_TELEMETRY"] = "False"

import posthog

posthog.disabled = True

import chromadb
import structlog

from src.interfaces.vector_store_provider import IVectorStoreProvider
from src.utils.errors import VectorStoreError

logger = structlog.get_logger(logger_name=__name__)


class _NoopEmbeddingFunction(chromadb.EmbeddingFunction[list[str]]):
    """Embedding function that is never called.

    Passing it stops ChromaDB from downloading its default ONNX model on
    collection creation.
    """

    def __call__(self, input: list[str]) -> list[list[float]]:
        raise NotImplementedError(
            "paperloom upserts pre-computed embeddings; "
            "ChromaDB's built-in embedding should never be called."
        )

    def name(self) -> str:
        """Return function name (required by ChromaDB's EmbeddingFunction protocol)."""
        return "noop_precomputed"


class ChromaDBProvider(IVectorStoreProvider):
    """Vector store provider backed by ChromaDB with local persistence.

    Parameters
    ----------
    persist_directory:
        Directory for ChromaDB's on-disk storage.
    collection_name:
        Collection to upsert into (created if missing).
    The vector dimension is taken from the first stored row (read at startup,
    or set by the first upsert); every later batch must match it.
    """

    def __init__(
        self,
        persist_directory: str = "./data/chromadb",
        collection_name: str = "pdfs",
    ) -> None:
        self._persist_directory = persist_directory
        self._collection_name = collection_name
        self._client = chromadb.PersistentClient(
            path=persist_directory,
            settings=chromadb.config.Settings(anonymized_telemetry=False),
        )
        # Newer ChromaDB versions reject an embedding function that differs
        # from the one persisted with the collection; fall back to opening
        # it with whatever was persisted.
        try:
            self._collection = self._client.get_or_create_collection(
                name=collection_name,
                metadata={"hnsw:space": "cosine"},
                embedding_function=_NoopEmbeddingFunction(),
            )
        except ValueError:
            self._collection = self._client.get_or_create_collection(
                name=collection_name,
                metadata={"hnsw:space": "cosine"},
            )

        self._stored_dimension = self._read_stored_dimension()

    # ------------------------------------------------------------------
    # Startup state
    # ------------------------------------------------------------------

    def _read_stored_dimension(self) -> int | None:
        """Return the dimension of vectors already in the collection, if any."""
        try:
            if self._collection.count() == 0:
                return None
            sample = self._collection.peek(limit=1)
            embeddings = sample.get("embeddings") if sample else None
            if embeddings is None or len(embeddings) == 0:
                return None
            stored_dim = len(embeddings[0])
        except Exception as exc:
            logger.warning("embedding_dimension_check_skipped", error=str(exc))
            return None

        logger.info(
            "embedding_dimension_loaded",
            dimension=stored_dim,
            collection=self._collection_name,
        )
        return stored_dim

    # ------------------------------------------------------------------
    # IVectorStoreProvider implementation
    # ------------------------------------------------------------------

    async def upsert(
        self,
        ids: Sequence[str],
        embeddings: Sequence[Sequence[float]],
        metadatas: Sequence[Mapping[str, str | int | float | bool]],
        documents: Sequence[str],
    ) -> int:
        """Upsert one batch; all four sequences must be equal length."""
        self._validate_batch(ids, embeddings, metadatas, documents)
        if not ids:
            return 0

        try:
            self._collection.upsert(
                ids=list(ids),
                embeddings=[list(vector) for vector in embeddings],
                metadatas=[dict(meta) for meta in metadatas],
                documents=list(documents),
            )
        except Exception as exc:
            raise VectorStoreError(
                message=f"ChromaDB upsert failed: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc

        if self._stored_dimension is None:
            self._stored_dimension = len(embeddings[0])
        logger.info("chromadb_upsert", collection=self._collection_name, count=len(ids))
        return len(ids)

    async def count(self) -> int:
        try:
            return self._collection.count()
        except Exception as exc:
            raise VectorStoreError(
                message=f"ChromaDB count failed: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc

    def get_provider_name(self) -> str:
        return "chromadb"

    def is_available(self) -> bool:
        """Return ``True`` if the ChromaDB collection is accessible."""
        try:
            self._collection.count()
            return True
        except Exception:
            return False

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _validate_batch(
        self,
        ids: Sequence[str],
        embeddings: Sequence[Sequence[float]],
        metadatas: Sequence[Mapping[str, str | int | float | bool]],
        documents: Sequence[str],
    ) -> None:
        lengths = {len(ids), len(embeddings), len(metadatas), len(documents)}
        if len(lengths) != 1:
            raise VectorStoreError(
                message=(
                    "upsert sequences differ in length: "
                    f"ids={len(ids)} embeddings={len(embeddings)} "
                    f"metadatas={len(metadatas)} documents={len(documents)}"
                ),
                provider_name=self.get_provider_name(),
            )
        if len(set(ids)) != len(ids):
            raise VectorStoreError(
                message="upsert batch contains duplicate ids",
                provider_name=self.get_provider_name(),
            )
        if not embeddings:
            return
        # Vectors must agree with each other and with what is already stored.
        dimension = self._stored_dimension or len(embeddings[0])
        for vector in embeddings:
            if len(vector) != dimension:
                logger.error(
                    "embedding_dimension_mismatch",
                    received_dim=len(vector),
                    expected_dim=dimension,
                    collection=self._collection_name,
                )
                raise VectorStoreError(
                    message=(
                        f"Embedding dimension mismatch: collection {self._collection_name!r} "
                        f"expects {dimension}-dim vectors, received {len(vector)}"
                    ),
                    provider_name=self.get_provider_name(),
                )
