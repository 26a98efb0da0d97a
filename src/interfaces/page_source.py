"""Abstract base classes for reading pages out of an opened document.

The extraction services never touch a PDF library directly.  A document
backend (see ``src/providers/pdf/``) opens the byte buffer and exposes each
page as an :class:`IPageSource`: its positioned text fragments, its drawing
operation list, and an async image resolver.

Image resolution is a single uniform async contract: ``resolve_image(name)``
suspends until the named object is materialised, then returns its RGBA
samples, or raises :class:`~src.utils.errors.PageImageResolutionError`.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterator

from src.models.document import DrawingOperation, PositionedTextFragment, RawImage


class IPageSource(ABC):
    """One page of an opened document."""

    @property
    @abstractmethod
    def page_number(self) -> int:
        """1-based page number."""

    @abstractmethod
    def get_text_fragments(self) -> list[PositionedTextFragment]:
        """Return the page's text fragments in any order."""

    @abstractmethod
    def get_operations(self) -> list[DrawingOperation]:
        """Return the page's drawing operations in paint order."""

    @abstractmethod
    async def resolve_image(self, name: str) -> RawImage:
        """Resolve an image object name to decoded RGBA samples."""


class IDocumentSource(ABC):
    """An opened document: an ordered sequence of pages."""

    @property
    @abstractmethod
    def page_count(self) -> int:
        """Number of pages in the document."""

    @abstractmethod
    def iter_pages(self) -> Iterator[IPageSource]:
        """Yield pages 1..N in order."""

    @abstractmethod
    def close(self) -> None:
        """Release the underlying document handle."""
