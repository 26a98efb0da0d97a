"""paperloom domain models -- re-exports all public model classes.

The models are organized across two submodules by pipeline stage:
    - document.py -- Extraction: positioned text, drawing operations, images
    - rag.py      -- Chunking and indexing: chunks, upsert records, results
"""

from __future__ import annotations

from src.models.document import (
    PAINT_IMAGE,
    DocumentExtractionResult,
    DrawingOperation,
    ExtractedImage,
    Line,
    PositionedTextFragment,
    RawImage,
)
from src.models.rag import Chunk, ChunkRecord, IngestionResult

__all__ = [
    "PAINT_IMAGE",
    "Chunk",
    "ChunkRecord",
    "DocumentExtractionResult",
    "DrawingOperation",
    "ExtractedImage",
    "IngestionResult",
    "Line",
    "PositionedTextFragment",
    "RawImage",
]
