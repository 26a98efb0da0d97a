"""Custom exception hierarchy for paperloom.

All application exceptions inherit from :class:`PaperloomError`, which
carries an optional ``provider_name`` so error handlers can identify which
external service (e.g. "openai", "chromadb", "pymupdf") caused the failure.

The hierarchy is organized by pipeline stage:

    PaperloomError  (base -- catch-all for any paperloom error)
    +-- DocumentParseError         (extraction: buffer is not a usable PDF)
    +-- PageImageResolutionError   (extraction: missing image object)
    +-- InvalidChunkingInputError  (chunking: caller contract violation)
    +-- EmbeddingProviderError     (embedding API failure)
    +-- VectorStoreError           (vector-store upsert / validation failure)
    +-- ObjectNotFoundError        (object store key absent)
    +-- ConfigurationError         (startup / missing config)

Every failure aborts ingestion of the current document; there is no retry
at this level.
"""


class PaperloomError(Exception):
    """Base exception for all paperloom errors.

    Every subclass carries a human-readable ``message`` and an optional
    ``provider_name`` identifying which external service triggered the
    error.  The ``__str__`` method prefixes the provider name in brackets
    for structured log output, e.g. ``[openai] Rate limit exceeded``.
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        provider_name: str | None = None,
    ) -> None:
        self._message = message
        self._provider_name = provider_name
        super().__init__(self._message)

    @property
    def message(self) -> str:
        return self._message

    @property
    def provider_name(self) -> str | None:
        return self._provider_name

    def __str__(self) -> str:
        if self._provider_name:
            return f"[{self._provider_name}] {self._message}"
        return self._message


# ---------------------------------------------------------------------------
# Extraction errors
# ---------------------------------------------------------------------------

class DocumentParseError(PaperloomError):
    """Raised when a byte buffer cannot be opened as a PDF at all."""

    def __init__(
        self,
        message: str = "Corrupt or unsupported document",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class PageImageResolutionError(PaperloomError):
    """Raised when a painted image object cannot be resolved.

    A missing image object implies a malformed object graph, so the
    extractor propagates this as a document-level failure.
    """

    def __init__(
        self,
        message: str = "Missing image object",
        provider_name: str | None = None,
        page_number: int | None = None,
        object_name: str | None = None,
    ) -> None:
        self.page_number = page_number
        self.object_name = object_name
        super().__init__(message=message, provider_name=provider_name)


# ---------------------------------------------------------------------------
# Chunking errors
# ---------------------------------------------------------------------------

class InvalidChunkingInputError(PaperloomError, ValueError):
    """Raised when sentences and embeddings are not length-aligned.

    This is a programming-contract violation: a correctly wired pipeline
    never produces it.
    """

    def __init__(
        self,
        message: str = "Sentences and embeddings are not length-aligned",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


# ---------------------------------------------------------------------------
# External service errors
# ---------------------------------------------------------------------------

class EmbeddingProviderError(PaperloomError):
    """Raised when an embedding API call fails or returns a misaligned batch."""

    def __init__(
        self,
        message: str = "Embedding provider call failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class VectorStoreError(PaperloomError):
    """Raised when a vector-store upsert fails or its input is invalid."""

    def __init__(
        self,
        message: str = "Vector store operation failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class ObjectNotFoundError(PaperloomError):
    """Raised when an object-store key does not exist."""

    def __init__(
        self,
        message: str = "Object not found",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class ConfigurationError(PaperloomError):
    """Raised when configuration is invalid or missing."""

    def __init__(
        self,
        message: str = "Invalid or missing configuration",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)
