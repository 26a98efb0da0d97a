"""Public interface definitions for all external collaborators.

Every external service the ingestion pipeline touches is accessed
exclusively through the abstract base classes defined in this package.
Concrete adapters implement these interfaces and are injected at runtime,
so tests can substitute mocks and backends can be swapped without touching
the pipeline.

CONCRETE PROVIDER MAP:
    Interface              ->  Concrete implementations (in src/providers/)
    ---------------------------------------------------------------------
    IEmbeddingProvider     ->  OpenAIEmbeddingProvider, NomicEmbeddingProvider
    IVectorStoreProvider   ->  ChromaDBProvider
    IObjectStore           ->  LocalObjectStore
    IDocumentSource,
    IPageSource            ->  PyMuPDFDocument, PyMuPDFPage
"""

from src.interfaces.embedding_provider import IEmbeddingProvider
from src.interfaces.object_store_provider import IObjectStore
from src.interfaces.page_source import IDocumentSource, IPageSource
from src.interfaces.vector_store_provider import IVectorStoreProvider

__all__ = [
    "IDocumentSource",
    "IEmbeddingProvider",
    "IObjectStore",
    "IPageSource",
    "IVectorStoreProvider",
]
