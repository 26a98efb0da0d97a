"""Chunking and indexing data models.

A :class:`Chunk` is a contiguous run of sentences chosen by the cohesion
chunker; a :class:`ChunkRecord` is that chunk's text paired with its
embedding and metadata, ready for the vector store; an
:class:`IngestionResult` summarises one pipeline run.

All models use frozen config.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, model_validator


# ---------------------------------------------------------------------------
# Chunk -- a contiguous sentence range produced by the cohesion chunker.
# ---------------------------------------------------------------------------
class Chunk(BaseModel):
    """An inclusive sentence index range ``[start, end]`` and its joined text.

    The chunks returned for one document partition the sentence sequence:
    contiguous, non-overlapping, in order, covering every sentence once.
    """

    model_config = ConfigDict(frozen=True)

    index: int = Field(ge=0, description="Position of this chunk in the document.")
    start: int = Field(ge=0, description="First sentence index (inclusive).")
    end: int = Field(ge=0, description="Last sentence index (inclusive).")
    text: str = Field(description="Sentences start..end joined with single spaces.")

    @model_validator(mode="after")
    def _check_range(self) -> Chunk:
        if self.end < self.start:
            raise ValueError(f"chunk end {self.end} precedes start {self.start}")
        return self

    @property
    def sentence_count(self) -> int:
        return self.end - self.start + 1


# ---------------------------------------------------------------------------
# ChunkRecord -- what is handed to the vector store.
# ---------------------------------------------------------------------------
class ChunkRecord(BaseModel):
    """A chunk's id, embedding, metadata, and text for one upsert row."""

    model_config = ConfigDict(frozen=True)

    chunk_id: str
    text: str
    embedding: list[float]
    metadata: dict[str, str | int | float | bool] = Field(default_factory=dict)


# ---------------------------------------------------------------------------
# IngestionResult -- output of the pipeline for one document.
# ---------------------------------------------------------------------------
class IngestionResult(BaseModel):
    """Summary of a single document ingestion run."""

    model_config = ConfigDict(frozen=True)

    source_id: str = Field(description="Identifier assigned to the ingested source.")
    source_title: str = Field(default="", description="Title of the ingested source.")
    chunk_count: int = Field(default=0, ge=0, description="Chunks produced and stored.")
    sentence_count: int = Field(default=0, ge=0)
    page_count: int = Field(default=0, ge=0)
    image_count: int = Field(default=0, ge=0)
    chunks: list[Chunk] = Field(default_factory=list)
    ingestion_time: float = Field(
        default=0.0,
        ge=0.0,
        description="Wall-clock time in seconds for the ingestion run.",
    )
