"""Vector store provider implementations.

ChromaDB is the sole vector store implementation.  It persists upserted
chunk embeddings on disk in a cosine-distance collection.  To swap it for
another vector database, implement IVectorStoreProvider and select it in
src/cli/ingest.py.
"""

from src.providers.vector_store.chromadb_provider import ChromaDBProvider

__all__ = ["ChromaDBProvider"]
