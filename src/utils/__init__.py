"""Utility modules for paperloom.

- **errors** -- Exception hierarchy rooted at PaperloomError; each pipeline
  stage raises its own subclass so callers can handle failures granularly.
- **logging** -- structlog setup with a dual-renderer pattern: coloured
  console output in development, structured JSON in production.
- **text_normalizer** -- Whitespace normalization for reconstructed PDF text.
"""

from src.utils.errors import (
    ConfigurationError,
    DocumentParseError,
    EmbeddingProviderError,
    InvalidChunkingInputError,
    ObjectNotFoundError,
    PageImageResolutionError,
    PaperloomError,
    VectorStoreError,
)
from src.utils.logging import configure_logging, get_logger
from src.utils.text_normalizer import normalize_whitespace

__all__ = [
    "ConfigurationError",
    "DocumentParseError",
    "EmbeddingProviderError",
    "InvalidChunkingInputError",
    "ObjectNotFoundError",
    "PageImageResolutionError",
    "PaperloomError",
    "VectorStoreError",
    "configure_logging",
    "get_logger",
    "normalize_whitespace",
]
