"""PDF ingestion pipeline for the paperloom vector store.

Orchestrates the full pipeline: **extract -> split -> embed -> chunk -> store**.

Pipeline stages overview:

1. **Extract** (document_extractor.py / DocumentExtractor) -- Reconstructs
   reading-order text from positioned fragments (text_reconstructor.py) and
   materialises painted images as PNG (image_extractor.py), page by page.

2. **Split** (sentence_splitter.py / SentenceSplitter) -- Punctuation
   heuristic sentence segmentation.

3. **Chunk** (cohesion_chunker.py / CohesionChunker) -- Greedy bounded
   lookahead grouping of adjacent sentences by embedding cohesion.

4. **Embed & Store** (ingestion_service.py / IngestionPipeline) -- Embeds
   every chunk, then upserts to the vector store in small batches, with
   optional object-store archiving.
"""

from src.services.ingestion.cohesion_chunker import CohesionChunker
from src.services.ingestion.document_extractor import DocumentExtractor
from src.services.ingestion.image_extractor import PageImageExtractor
from src.services.ingestion.ingestion_service import IngestionPipeline, parse_object_path
from src.services.ingestion.sentence_splitter import SentenceSplitter
from src.services.ingestion.text_reconstructor import PageTextReconstructor

__all__ = [
    "CohesionChunker",
    "DocumentExtractor",
    "IngestionPipeline",
    "PageImageExtractor",
    "PageTextReconstructor",
    "SentenceSplitter",
    "parse_object_path",
]
