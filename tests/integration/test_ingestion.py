"""Integration tests for the PDF ingestion pipeline.

Builds real PDFs with PyMuPDF and runs them through extraction, sentence
splitting, cohesion chunking and batched storage, using mock embedding
and vector store providers (no real API calls).
"""

from __future__ import annotations

import io

import pytest
from PIL import Image

from src.providers.object_store.local_object_store import LocalObjectStore
from src.services.ingestion.cohesion_chunker import CohesionChunker
from src.services.ingestion.document_extractor import DocumentExtractor
from src.services.ingestion.ingestion_service import IngestionPipeline
from src.services.ingestion.sentence_splitter import SentenceSplitter
from src.utils.errors import DocumentParseError
from tests.conftest import MockEmbeddingProvider, MockVectorStore, build_pdf

# ---------------------------------------------------------------------------
# Shared helpers
# ---------------------------------------------------------------------------


def _build_pipeline(
    mock_embedding: MockEmbeddingProvider,
    mock_store: MockVectorStore,
    max_chunk_chars: int = 200,
    **kwargs,
) -> IngestionPipeline:
    """Construct an IngestionPipeline wired to mock providers."""
    return IngestionPipeline(
        extractor=DocumentExtractor(),
        splitter=SentenceSplitter(),
        chunker=CohesionChunker(max_chunk_chars=max_chunk_chars),
        embedding_provider=mock_embedding,
        vector_store=mock_store,
        **kwargs,
    )


# ---------------------------------------------------------------------------
# Tests
# ---------------------------------------------------------------------------


class TestExtractionE2E:
    @pytest.mark.asyncio
    async def test_reading_order_across_pages(self, sample_pdf_bytes: bytes) -> None:
        result = await DocumentExtractor().extract(sample_pdf_bytes)

        assert result.page_count == 2
        assert result.text == (
            "Solar panels convert sunlight into electricity. "
            "Their efficiency has improved every decade. "
            "Bread dough needs time to rise. "
            "Bakers often proof it overnight."
        )

    @pytest.mark.asyncio
    async def test_content_stream_order_does_not_matter(self) -> None:
        # Lines painted bottom-up, words painted right-to-left.
        pdf = build_pdf(
            [
                [
                    (72, 200, "Last line."),
                    (130, 100, "world."),
                    (72, 100, "Hello"),
                ]
            ]
        )
        result = await DocumentExtractor().extract(pdf)
        assert result.text == "Hello world. Last line."

    @pytest.mark.asyncio
    async def test_wrapped_sentence_becomes_one_line(self) -> None:
        pdf = build_pdf(
            [[(72, 100, "The quick brown"), (72, 114, "fox jumps over the dog. Next one.")]]
        )

        result = await DocumentExtractor().extract(pdf)

        assert result.text == "The quick brown fox jumps over the dog. Next one."
        assert SentenceSplitter().split(result.text) == [
            "The quick brown fox jumps over the dog.",
            "Next one.",
        ]

    @pytest.mark.asyncio
    async def test_image_extracted_as_png(self, sample_pdf_bytes: bytes) -> None:
        result = await DocumentExtractor().extract(sample_pdf_bytes)

        assert len(result.images) == 1
        image = result.images[0]
        assert image.id.startswith("2_")
        decoded = Image.open(io.BytesIO(image.pixels))
        assert decoded.format == "PNG"
        assert decoded.size == (image.width, image.height) == (4, 3)


class TestPdfIngestionE2E:
    @pytest.mark.asyncio
    async def test_pdf_ingestion_e2e(
        self,
        sample_pdf_bytes: bytes,
        mock_embedding_provider: MockEmbeddingProvider,
        mock_vector_store: MockVectorStore,
    ) -> None:
        pipeline = _build_pipeline(mock_embedding_provider, mock_vector_store)

        result = await pipeline.ingest(sample_pdf_bytes, source_title="Mixed notes")

        assert result.page_count == 2
        assert result.sentence_count == 4
        assert result.image_count == 1
        assert result.chunk_count == len(result.chunks) == await mock_vector_store.count()
        # Chunks partition the four sentences in order.
        assert result.chunks[0].start == 0
        assert result.chunks[-1].end == 3
        for previous, current in zip(result.chunks, result.chunks[1:]):
            assert current.start == previous.end + 1
        stored_titles = {row["metadata"]["source_title"] for row in mock_vector_store.rows.values()}
        assert stored_titles == {"Mixed notes"}

    @pytest.mark.asyncio
    async def test_many_sentences_are_batched(
        self,
        mock_embedding_provider: MockEmbeddingProvider,
        mock_vector_store: MockVectorStore,
    ) -> None:
        lines = [(72, 60 + i * 14, f"Observation {i} was recorded.") for i in range(24)]
        pdf = build_pdf([lines])
        # Every sentence is longer than the limit, so each is its own chunk.
        pipeline = _build_pipeline(mock_embedding_provider, mock_vector_store, max_chunk_chars=10)

        result = await pipeline.ingest(pdf)

        assert result.chunk_count == 24
        assert [len(batch["ids"]) for batch in mock_vector_store.batches] == [10, 10, 4]
        assert mock_vector_store.batches[0]["documents"][0] == "Observation 0 was recorded."

    @pytest.mark.asyncio
    async def test_stored_chunks_have_no_line_breaks(
        self,
        mock_embedding_provider: MockEmbeddingProvider,
        mock_vector_store: MockVectorStore,
    ) -> None:
        pdf = build_pdf(
            [
                [
                    (72, 100, "Tides follow the"),
                    (72, 114, "phase of the moon."),
                    (72, 128, "Sailors plan around them."),
                ]
            ]
        )
        pipeline = _build_pipeline(mock_embedding_provider, mock_vector_store)

        await pipeline.ingest(pdf)

        documents = [doc for batch in mock_vector_store.batches for doc in batch["documents"]]
        assert documents
        assert all("\n" not in doc for doc in documents)
        assert mock_embedding_provider.calls[0] == [
            "Tides follow the phase of the moon.",
            "Sailors plan around them.",
        ]

    @pytest.mark.asyncio
    async def test_blank_document_yields_zero_chunks(
        self,
        mock_embedding_provider: MockEmbeddingProvider,
        mock_vector_store: MockVectorStore,
    ) -> None:
        pipeline = _build_pipeline(mock_embedding_provider, mock_vector_store)

        result = await pipeline.ingest(build_pdf([[], []]))

        assert result.chunk_count == 0
        assert result.page_count == 2
        assert mock_embedding_provider.calls == []
        assert mock_vector_store.batches == []

    @pytest.mark.asyncio
    async def test_corrupt_pdf(
        self,
        mock_embedding_provider: MockEmbeddingProvider,
        mock_vector_store: MockVectorStore,
    ) -> None:
        pipeline = _build_pipeline(mock_embedding_provider, mock_vector_store)
        with pytest.raises(DocumentParseError):
            await pipeline.ingest(b"definitely not a pdf")

    @pytest.mark.asyncio
    async def test_object_ingestion_with_archiving(
        self,
        tmp_path,
        sample_pdf_bytes: bytes,
        mock_embedding_provider: MockEmbeddingProvider,
        mock_vector_store: MockVectorStore,
    ) -> None:
        object_store = LocalObjectStore(tmp_path / "objects")
        await object_store.put("incoming", "notes/mixed.pdf", sample_pdf_bytes)
        pipeline = _build_pipeline(
            mock_embedding_provider,
            mock_vector_store,
            object_store=object_store,
            archive_bucket="archive",
            default_bucket="incoming",
        )

        result = await pipeline.ingest_object("notes/mixed.pdf")

        assert result.source_title == "notes/mixed.pdf"
        archive = tmp_path / "objects" / "archive"
        assert len(list((archive / "chunks").glob("*.txt"))) == result.chunk_count
        assert len(list((archive / "images" / result.source_id).glob("*.png"))) == 1
