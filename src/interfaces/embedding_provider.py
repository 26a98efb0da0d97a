"""Abstract base class for text-embedding service providers.

Defines the contract for generating embedding vectors from text.
Implementations may wrap OpenAI ``text-embedding-3-large``, Nomic
``nomic-embed-text`` (local via Ollama), or any other embedding backend.
The ingestion pipeline calls :meth:`IEmbeddingProvider.embed` twice per
document: once per sentence (for cohesion scoring) and once per chunk (for
indexing).
"""

from __future__ import annotations

from abc import ABC, abstractmethod


# Concrete implementations (src/providers/embedding/):
#   OpenAIEmbeddingProvider -- text-embedding-3-large (requires API key)
#   NomicEmbeddingProvider  -- nomic-embed-text via Ollama (local)
class IEmbeddingProvider(ABC):
    """Contract for text-embedding services used by the ingestion pipeline."""

    @abstractmethod
    async def embed(self, texts: list[str]) -> list[list[float]]:
        """Generate embedding vectors for a batch of texts.

        Parameters
        ----------
        texts:
            Ordered strings to embed.  Implementations should handle
            batching internally if the underlying API has a per-call limit.

        Returns
        -------
        list[list[float]]
            Embedding vectors aligned by index with *texts*; the result has
            exactly ``len(texts)`` entries.

        Raises
        ------
        src.utils.errors.EmbeddingProviderError
            On any transport or quota failure, or a misaligned response.
            Partial batches are never returned.
        """

    @abstractmethod
    async def embed_single(self, text: str) -> list[float]:
        """Generate an embedding vector for a single text string."""

    @abstractmethod
    def get_dimension(self) -> int:
        """Return the dimensionality of the embedding vectors.

        Example values: ``3072`` (OpenAI ``text-embedding-3-large``),
        ``768`` (Nomic ``nomic-embed-text``).
        """

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a human-readable identifier for this embedding provider."""

    @abstractmethod
    def is_available(self) -> bool:
        """Return ``True`` if the provider is configured and reachable."""
