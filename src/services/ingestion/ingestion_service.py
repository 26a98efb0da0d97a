"""Orchestrator for the PDF ingestion pipeline.

Pipeline stages: **extract -> split -> embed -> chunk -> embed -> store**.

The :class:`IngestionPipeline` implements the **Orchestrator pattern**: it
coordinates its collaborators without any of them knowing about each other.
Each call to :meth:`IngestionPipeline.ingest` follows the same flow:

    1. DocumentExtractor -- reading-order text and PNG images per page
    2. SentenceSplitter -- document text into sentences
    3. IEmbeddingProvider -- one vector per sentence
    4. CohesionChunker -- sentences grouped into cohesive chunks
    5. IEmbeddingProvider -- one vector per chunk text, all before any write
    6. IVectorStoreProvider -- upserted in fixed-size batches
    7. IObjectStore (optional) -- chunk text and images archived

All dependencies are injected via constructor (Dependency Injection), so
providers can be swapped (e.g. OpenAI -> Ollama) without changing this class.
Every failure propagates and aborts the current document; nothing is
retried and already-upserted batches are not rolled back.
"""

from __future__ import annotations

import re
import time
import uuid
from typing import TYPE_CHECKING

import structlog

from src.models.document import ExtractedImage
from src.models.rag import Chunk, ChunkRecord, IngestionResult
from src.services.ingestion.cohesion_chunker import CohesionChunker
from src.services.ingestion.document_extractor import DocumentExtractor
from src.services.ingestion.sentence_splitter import SentenceSplitter
from src.utils.errors import ConfigurationError, EmbeddingProviderError, VectorStoreError

if TYPE_CHECKING:
    from src.interfaces.embedding_provider import IEmbeddingProvider
    from src.interfaces.object_store_provider import IObjectStore
    from src.interfaces.vector_store_provider import IVectorStoreProvider

logger = structlog.get_logger(logger_name=__name__)

DEFAULT_UPSERT_BATCH_SIZE = 10

_OBJECT_URL_RE = re.compile(r"^s3://([^/]+)/(.+)$")


def parse_object_path(path: str, default_bucket: str = "") -> tuple[str, str]:
    """Split an object path into ``(bucket, key)``.

    Accepts ``s3://bucket/key`` or a bare key, in which case
    *default_bucket* supplies the bucket.

    Raises
    ------
    ConfigurationError
        If the URL form is malformed, or a bare key is given without a
        default bucket.
    """
    path = path.strip()
    if path.startswith("s3://"):
        match = _OBJECT_URL_RE.match(path)
        if match is None:
            raise ConfigurationError(f"Malformed object path {path!r}; expected s3://bucket/key")
        return match.group(1), match.group(2)

    if not path:
        raise ConfigurationError("Object path is empty")
    if not default_bucket:
        raise ConfigurationError(
            f"Object path {path!r} has no bucket and no default bucket is configured"
        )
    return default_bucket, path


class IngestionPipeline:
    """Turns one PDF into embedded, cohesion-chunked vector-store rows.

    Parameters
    ----------
    extractor:
        Produces reading-order text and images from PDF bytes.
    splitter:
        Splits document text into sentences.
    chunker:
        Groups sentences into cohesive chunks.
    embedding_provider:
        Embeds sentences and chunk texts.
    vector_store:
        Receives chunk rows in batches of *upsert_batch_size*.
    upsert_batch_size:
        Rows per upsert call.
    object_store:
        Optional store used by :meth:`ingest_object` and for archiving.
    archive_bucket:
        When set together with *object_store*, chunk texts and extracted
        images are written to this bucket.
    default_bucket:
        Bucket used by :meth:`ingest_object` for bare keys.
    """

    def __init__(
        self,
        extractor: DocumentExtractor,
        splitter: SentenceSplitter,
        chunker: CohesionChunker,
        embedding_provider: IEmbeddingProvider,
        vector_store: IVectorStoreProvider,
        upsert_batch_size: int = DEFAULT_UPSERT_BATCH_SIZE,
        object_store: IObjectStore | None = None,
        archive_bucket: str = "",
        default_bucket: str = "",
    ) -> None:
        if upsert_batch_size <= 0:
            raise ValueError("upsert_batch_size must be a positive integer")
        self._extractor = extractor
        self._splitter = splitter
        self._chunker = chunker
        self._embedding_provider = embedding_provider
        self._vector_store = vector_store
        self._upsert_batch_size = upsert_batch_size
        self._object_store = object_store
        self._archive_bucket = archive_bucket
        self._default_bucket = default_bucket

    @property
    def archiving_enabled(self) -> bool:
        return self._object_store is not None and bool(self._archive_bucket)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def ingest(
        self,
        pdf_bytes: bytes,
        source_id: str | None = None,
        source_title: str = "",
    ) -> IngestionResult:
        """Run the full pipeline over one PDF buffer.

        Returns
        -------
        IngestionResult
            Counts, the chunk list and timing for the run.

        Raises
        ------
        DocumentParseError
            If the buffer is not a readable PDF.
        PageImageResolutionError
            If a painted image object cannot be resolved.
        EmbeddingProviderError
            If any embedding call fails; nothing has been stored yet.
        VectorStoreError
            If any upsert fails; earlier batches remain stored.
        """
        start = time.monotonic()
        source_id = source_id or uuid.uuid4().hex
        log = logger.bind(source_id=source_id)

        # Step 1: extract reading-order text and images.
        extraction = await self._extractor.extract(pdf_bytes)

        # Step 2: split into sentences.
        sentences = self._splitter.split(extraction.text)
        if not sentences:
            log.info("ingestion_no_sentences", pages=extraction.page_count)
            await self._archive_images(source_id, extraction.images)
            return IngestionResult(
                source_id=source_id,
                source_title=source_title,
                page_count=extraction.page_count,
                image_count=len(extraction.images),
                ingestion_time=round(time.monotonic() - start, 2),
            )

        # Steps 3-4: embed sentences, then chunk by cohesion.
        sentence_embeddings = await self._embed(sentences, stage="sentences")
        chunks = self._chunker.chunk(sentences, sentence_embeddings)

        # Step 5: embed every chunk before the first write.
        chunk_embeddings = await self._embed([c.text for c in chunks], stage="chunks")
        records = self._build_records(chunks, chunk_embeddings, source_id, source_title)

        # Step 6: upsert (and archive) batch by batch.
        stored = 0
        for batch_number, batch_start in enumerate(
            range(0, len(records), self._upsert_batch_size), start=1
        ):
            batch = records[batch_start : batch_start + self._upsert_batch_size]
            await self._archive_chunks(batch)
            stored += await self._upsert_batch(batch, batch_number)

        await self._archive_images(source_id, extraction.images)

        result = IngestionResult(
            source_id=source_id,
            source_title=source_title,
            chunk_count=stored,
            sentence_count=len(sentences),
            page_count=extraction.page_count,
            image_count=len(extraction.images),
            chunks=chunks,
            ingestion_time=round(time.monotonic() - start, 2),
        )
        log.info(
            "ingestion_complete",
            source_title=source_title,
            pages=result.page_count,
            sentences=result.sentence_count,
            chunks=result.chunk_count,
            images=result.image_count,
            time_s=result.ingestion_time,
        )
        return result

    async def ingest_object(self, path: str, source_title: str = "") -> IngestionResult:
        """Fetch a PDF from the object store and ingest it.

        *path* is ``s3://bucket/key`` or a bare key resolved against the
        configured default bucket.  The key doubles as the source title
        when none is given.

        Raises
        ------
        ConfigurationError
            If no object store is configured or *path* cannot be parsed.
        ObjectNotFoundError
            If the object does not exist.
        """
        if self._object_store is None:
            raise ConfigurationError("No object store configured for object ingestion")
        bucket, key = parse_object_path(path, self._default_bucket)
        logger.info("object_fetch_started", bucket=bucket, key=key)
        pdf_bytes = await self._object_store.fetch(bucket, key)
        return await self.ingest(pdf_bytes, source_title=source_title or key)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    async def _embed(self, texts: list[str], stage: str) -> list[list[float]]:
        embeddings = await self._embedding_provider.embed(texts)
        if len(embeddings) != len(texts):
            raise EmbeddingProviderError(
                message=f"received {len(embeddings)} embeddings for {len(texts)} {stage}",
                provider_name=self._embedding_provider.get_provider_name(),
            )
        logger.debug("embedding_stage_complete", stage=stage, count=len(texts))
        return embeddings

    @staticmethod
    def _build_records(
        chunks: list[Chunk],
        embeddings: list[list[float]],
        source_id: str,
        source_title: str,
    ) -> list[ChunkRecord]:
        return [
            ChunkRecord(
                chunk_id=str(uuid.uuid4()),
                text=chunk.text,
                embedding=embedding,
                metadata={
                    "source_id": source_id,
                    "source_title": source_title,
                    "chunk_index": chunk.index,
                    "sentence_start": chunk.start,
                    "sentence_end": chunk.end,
                    "char_count": len(chunk.text),
                },
            )
            for chunk, embedding in zip(chunks, embeddings)
        ]

    async def _upsert_batch(self, batch: list[ChunkRecord], batch_number: int) -> int:
        # Every row in a batch points at the batch's first row.
        parent_id = batch[0].chunk_id
        try:
            acknowledged = await self._vector_store.upsert(
                ids=[r.chunk_id for r in batch],
                embeddings=[r.embedding for r in batch],
                metadatas=[{**r.metadata, "parent_id": parent_id} for r in batch],
                documents=[r.text for r in batch],
            )
        except VectorStoreError:
            logger.error("upsert_batch_failed", batch=batch_number, size=len(batch))
            raise
        except Exception as exc:
            logger.error("upsert_batch_failed", batch=batch_number, size=len(batch))
            raise VectorStoreError(
                message=f"Upsert of batch {batch_number} failed: {exc}",
                provider_name=self._vector_store.get_provider_name(),
            ) from exc

        logger.debug("upsert_batch_complete", batch=batch_number, size=len(batch))
        return acknowledged

    async def _archive_chunks(self, batch: list[ChunkRecord]) -> None:
        if not self.archiving_enabled:
            return
        for record in batch:
            await self._object_store.put(
                self._archive_bucket,
                f"chunks/{record.chunk_id}.txt",
                record.text.encode("utf-8"),
            )

    async def _archive_images(self, source_id: str, images: tuple[ExtractedImage, ...]) -> None:
        if not self.archiving_enabled or not images:
            return
        for image in images:
            await self._object_store.put(
                self._archive_bucket,
                f"images/{source_id}/{image.id}.png",
                image.pixels,
            )
        logger.info("images_archived", source_id=source_id, count=len(images))
