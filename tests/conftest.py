"""Shared pytest fixtures for the paperloom test suite."""

from __future__ import annotations

import hashlib
import io
import struct
from collections.abc import Iterator, Mapping, Sequence
from pathlib import Path
from typing import Any

import pytest
from PIL import Image

from src.interfaces.embedding_provider import IEmbeddingProvider
from src.interfaces.page_source import IDocumentSource, IPageSource
from src.interfaces.vector_store_provider import IVectorStoreProvider
from src.models.document import PAINT_IMAGE, DrawingOperation, PositionedTextFragment, RawImage
from src.utils.errors import PageImageResolutionError

# ---------------------------------------------------------------------------
# General fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return Path(__file__).parent.parent


# ---------------------------------------------------------------------------
# Fragment / page helpers
# ---------------------------------------------------------------------------


def frag(text: str, x: float, y: float, width: float = 0.0, page: int = 1) -> PositionedTextFragment:
    """Shorthand constructor for a positioned text fragment."""
    return PositionedTextFragment(text=text, x=x, y=y, width=width, page_number=page)


def solid_rgba(width: int, height: int, rgba: tuple[int, int, int, int] = (255, 0, 0, 255)) -> RawImage:
    """Return a single-colour RGBA image."""
    return RawImage(width=width, height=height, samples=bytes(rgba) * (width * height))


class FakePage(IPageSource):
    """In-memory page: fixed fragments, operations and image objects."""

    def __init__(
        self,
        page_number: int,
        fragments: list[PositionedTextFragment] | None = None,
        images: dict[str, RawImage] | None = None,
        operations: list[DrawingOperation] | None = None,
        text_error: Exception | None = None,
    ) -> None:
        self._page_number = page_number
        self._fragments = fragments or []
        self._images = images or {}
        if operations is None:
            operations = [DrawingOperation(operator=PAINT_IMAGE, args=(name,)) for name in self._images]
        self._operations = operations
        self._text_error = text_error
        self.resolved: list[str] = []

    @property
    def page_number(self) -> int:
        return self._page_number

    def get_text_fragments(self) -> list[PositionedTextFragment]:
        if self._text_error is not None:
            raise self._text_error
        return list(self._fragments)

    def get_operations(self) -> list[DrawingOperation]:
        return list(self._operations)

    async def resolve_image(self, name: str) -> RawImage:
        self.resolved.append(name)
        if name not in self._images:
            raise PageImageResolutionError(
                message=f"missing {name}",
                page_number=self._page_number,
                object_name=name,
            )
        return self._images[name]


class FakeDocument(IDocumentSource):
    """In-memory document over a list of :class:`FakePage` objects."""

    def __init__(self, pages: list[FakePage]) -> None:
        self._pages = pages
        self.closed = False

    @property
    def page_count(self) -> int:
        return len(self._pages)

    def iter_pages(self) -> Iterator[IPageSource]:
        yield from self._pages

    def close(self) -> None:
        self.closed = True


# ---------------------------------------------------------------------------
# Embedding / vector store fakes
# ---------------------------------------------------------------------------

_EMBEDDING_DIM = 32


def _hash_to_vector(text: str, dim: int = _EMBEDDING_DIM) -> list[float]:
    """Generate a deterministic fixed-length vector by hashing *text*.

    Uses SHA-256 to hash the text, then unpacks bytes into floats and
    normalises to unit length.  Deterministic: same text always produces
    the same vector.
    """
    digest = hashlib.sha256(text.encode("utf-8")).digest()
    raw = digest
    while len(raw) < dim * 2:
        raw += hashlib.sha256(raw).digest()
    raw = raw[: dim * 2]
    # Signed 16-bit integers avoid the NaN/inf bit patterns raw floats can hit.
    values = [float(v) for v in struct.unpack(f"<{dim}h", raw)]
    magnitude = max(sum(v * v for v in values) ** 0.5, 1e-10)
    return [v / magnitude for v in values]


class MockEmbeddingProvider(IEmbeddingProvider):
    """In-memory deterministic embedding provider for tests."""

    def __init__(self) -> None:
        self.calls: list[list[str]] = []

    async def embed(self, texts: list[str]) -> list[list[float]]:
        self.calls.append(list(texts))
        return [_hash_to_vector(t) for t in texts]

    async def embed_single(self, text: str) -> list[float]:
        return _hash_to_vector(text)

    def get_dimension(self) -> int:
        return _EMBEDDING_DIM

    def get_provider_name(self) -> str:
        return "mock-embedding"

    def is_available(self) -> bool:
        return True


class MockVectorStore(IVectorStoreProvider):
    """In-memory vector store that records every upsert batch.

    ``fail_on_batch`` (1-based) makes that upsert call raise.
    """

    def __init__(self, fail_on_batch: int | None = None, error: Exception | None = None) -> None:
        self.batches: list[dict[str, list[Any]]] = []
        self.rows: dict[str, dict[str, Any]] = {}
        self._fail_on_batch = fail_on_batch
        self._error = error or RuntimeError("store unavailable")

    async def upsert(
        self,
        ids: Sequence[str],
        embeddings: Sequence[Sequence[float]],
        metadatas: Sequence[Mapping[str, str | int | float | bool]],
        documents: Sequence[str],
    ) -> int:
        if self._fail_on_batch is not None and len(self.batches) + 1 == self._fail_on_batch:
            raise self._error
        self.batches.append(
            {
                "ids": list(ids),
                "embeddings": [list(e) for e in embeddings],
                "metadatas": [dict(m) for m in metadatas],
                "documents": list(documents),
            }
        )
        for i, row_id in enumerate(ids):
            self.rows[row_id] = {"metadata": dict(metadatas[i]), "document": documents[i]}
        return len(ids)

    async def count(self) -> int:
        return len(self.rows)

    def get_provider_name(self) -> str:
        return "mock-vector-store"

    def is_available(self) -> bool:
        return True


@pytest.fixture
def mock_embedding_provider() -> MockEmbeddingProvider:
    return MockEmbeddingProvider()


@pytest.fixture
def mock_vector_store() -> MockVectorStore:
    return MockVectorStore()


# ---------------------------------------------------------------------------
# Real PDF builders (PyMuPDF)
# ---------------------------------------------------------------------------


def png_bytes(width: int = 4, height: int = 3, color: tuple[int, int, int] = (0, 128, 255)) -> bytes:
    """Return a small solid-colour RGB PNG."""
    buffer = io.BytesIO()
    Image.new("RGB", (width, height), color).save(buffer, format="PNG")
    return buffer.getvalue()


def build_pdf(pages: list[list[tuple[float, float, str]]], image_on_page: int | None = None) -> bytes:
    """Build a PDF where each page holds ``(x, top_y, text)`` insertions.

    Coordinates are PyMuPDF's (top-left origin).  When *image_on_page* is
    given (1-based), a small PNG is placed on that page.
    """
    import fitz

    document = fitz.open()
    for number, lines in enumerate(pages, start=1):
        page = document.new_page(width=595, height=842)
        for x, y, text in lines:
            page.insert_text((x, y), text, fontsize=11)
        if image_on_page == number:
            page.insert_image(fitz.Rect(400, 600, 480, 660), stream=png_bytes())
    data = document.tobytes()
    document.close()
    return data


@pytest.fixture
def sample_pdf_bytes() -> bytes:
    """A two-page PDF with body text on both pages and one image on page 2."""
    return build_pdf(
        [
            [
                (72, 72, "Solar panels convert sunlight into electricity."),
                (72, 90, "Their efficiency has improved every decade."),
            ],
            [
                (72, 72, "Bread dough needs time to rise."),
                (72, 90, "Bakers often proof it overnight."),
            ],
        ],
        image_on_page=2,
    )
