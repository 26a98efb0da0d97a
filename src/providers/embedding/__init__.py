"""Embedding provider implementations.

Two implementations of IEmbeddingProvider (listed in selection priority):
    1. OpenAIEmbeddingProvider -- text-embedding-3-large (3072 dims) or any
       OpenAI-compatible endpoint.  Requires an API key.
    2. NomicEmbeddingProvider  -- nomic-embed-text via Ollama (768 dims).
       Free and local, but requires a running Ollama server.
"""

from src.providers.embedding.nomic_embedding_provider import NomicEmbeddingProvider
from src.providers.embedding.openai_embedding_provider import OpenAIEmbeddingProvider

__all__ = ["NomicEmbeddingProvider", "OpenAIEmbeddingProvider"]
