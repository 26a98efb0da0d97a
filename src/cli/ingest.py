# =============================================================================
# src/cli/ingest.py -- CLI Ingest Command (PDF Vector-Store Ingestion)
# =============================================================================
#
# Standalone CLI for loading PDFs into the paperloom vector store.  Each PDF
# is turned into reading-order text, split into sentences, grouped into
# cohesive chunks by embedding similarity, embedded, and upserted into a
# ChromaDB collection in small batches.
#
# Supported subcommands:
#
#   pdf     -- Ingest a local PDF file
#   object  -- Ingest a PDF held in the object store (s3://bucket/key or key)
#   stats   -- Display the number of rows in the collection
#
# Provider Selection:
#   - Embedding: OpenAI (if key available) -> Nomic/Ollama
#   - Vector Store: ChromaDB (always)
#   - Object Store: local directory tree under OBJECT_STORE_ROOT
#
# Usage examples:
#   python -m src.cli.ingest pdf --file /path/to/report.pdf --title "Q3 Report"
#   python -m src.cli.ingest object --path s3://reports/2024/q3.pdf
#   python -m src.cli.ingest stats
# =============================================================================

"""Standalone CLI for building the paperloom vector store.

Usage::

    python -m src.cli.ingest pdf --file /path/to/report.pdf --title "Q3 Report"

    python -m src.cli.ingest object --path s3://reports/2024/q3.pdf

    python -m src.cli.ingest stats
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

from src.config.loader import load_config
from src.config.settings import Settings
from src.utils.errors import PaperloomError
from src.utils.logging import configure_logging


def _build_embedding_provider(app_settings: Settings):  # noqa: ANN202
    """Select the first available embedding provider.

    Priority: OpenAI (or OpenAI-compatible endpoint, if a key is set) ->
              Nomic/Ollama (768-dim, local).

    Imports are deferred inside the function to avoid loading the openai
    SDK unless actually needed.

    Returns
    -------
    IEmbeddingProvider or None
        The first available embedding provider, or ``None`` if none are
        configured.
    """
    if app_settings.openai_api_key:
        from src.providers.embedding.openai_embedding_provider import (
            OpenAIEmbeddingProvider,
        )

        provider = OpenAIEmbeddingProvider(settings=app_settings)
        if provider.is_available():
            return provider

    from src.providers.embedding.nomic_embedding_provider import (
        NomicEmbeddingProvider,
    )

    provider = NomicEmbeddingProvider(settings=app_settings)
    if provider.is_available():
        return provider

    return None


def _build_vector_store(app_settings: Settings):  # noqa: ANN202
    from src.providers.vector_store.chromadb_provider import ChromaDBProvider

    return ChromaDBProvider(
        persist_directory=app_settings.chromadb_persist_dir,
        collection_name=app_settings.chromadb_collection,
    )


def _build_pipeline(app_settings: Settings):  # noqa: ANN202
    """Construct the ingestion pipeline with all providers.

    Wires together:
      - DocumentExtractor: PyMuPDF-backed text and image extraction
      - SentenceSplitter / CohesionChunker: sentence grouping
      - EmbeddingProvider: sentence and chunk vectors
      - ChromaDBProvider: batched upserts
      - LocalObjectStore: object ingestion and optional archiving

    Returns
    -------
    tuple[IngestionPipeline, str] or tuple[None, str]
        The pipeline and a status message.  Returns ``None`` with an error
        message if no embedding provider is available.
    """
    embedding_provider = _build_embedding_provider(app_settings)
    if embedding_provider is None:
        return None, (
            "No embedding provider available.\n"
            "Set one of:\n"
            "  OPENAI_API_KEY  -- for OpenAI text-embedding-3-large\n"
            "  OLLAMA_BASE_URL -- for Nomic nomic-embed-text (default: http://localhost:11434)\n"
        )

    from src.providers.object_store.local_object_store import LocalObjectStore
    from src.services.ingestion.cohesion_chunker import CohesionChunker
    from src.services.ingestion.document_extractor import DocumentExtractor
    from src.services.ingestion.ingestion_service import IngestionPipeline
    from src.services.ingestion.sentence_splitter import SentenceSplitter
    from src.services.ingestion.text_reconstructor import PageTextReconstructor

    extractor = DocumentExtractor(
        text_reconstructor=PageTextReconstructor(
            line_tolerance=app_settings.line_tolerance,
            space_threshold=app_settings.space_threshold,
        ),
    )
    chunker = CohesionChunker(
        max_chunk_chars=app_settings.max_chunk_chars,
        max_window_sentences=app_settings.chunk_window_sentences,
    )

    pipeline = IngestionPipeline(
        extractor=extractor,
        splitter=SentenceSplitter(),
        chunker=chunker,
        embedding_provider=embedding_provider,
        vector_store=_build_vector_store(app_settings),
        upsert_batch_size=app_settings.upsert_batch_size,
        object_store=LocalObjectStore(app_settings.object_store_root),
        archive_bucket=app_settings.archive_bucket,
        default_bucket=app_settings.default_bucket,
    )

    provider_name = embedding_provider.get_provider_name()
    return pipeline, f"Embedding: {provider_name} | Store: chromadb"


# ---------------------------------------------------------------------------
# Subcommand handlers
# ---------------------------------------------------------------------------


def _print_result(result) -> None:  # noqa: ANN001
    print("\nIngestion complete:")
    print(f"  Pages:          {result.page_count}")
    print(f"  Sentences:      {result.sentence_count}")
    print(f"  Chunks stored:  {result.chunk_count}")
    print(f"  Images:         {result.image_count}")
    print(f"  Time:           {result.ingestion_time:.2f}s")
    print(f"  Source ID:      {result.source_id}")


async def _handle_pdf(args: argparse.Namespace, pipeline) -> int:  # noqa: ANN001
    """Ingest a local PDF file."""
    path = Path(args.file)
    if not path.is_file():
        print(f"Error: file not found: {path}", file=sys.stderr)
        return 1

    title = args.title or path.stem
    print(f"Ingesting PDF: {title}")
    print(f"  File: {path}")

    result = await pipeline.ingest(path.read_bytes(), source_title=title)
    _print_result(result)
    return 0


async def _handle_object(args: argparse.Namespace, pipeline) -> int:  # noqa: ANN001
    """Ingest a PDF from the object store."""
    print(f"Ingesting object: {args.path}")

    result = await pipeline.ingest_object(args.path, source_title=args.title or "")
    _print_result(result)
    return 0


async def _handle_stats(app_settings: Settings) -> int:
    """Display collection statistics."""
    vector_store = _build_vector_store(app_settings)

    if not vector_store.is_available():
        print("Vector store not available.")
        return 1

    total = await vector_store.count()

    print("Collection Statistics")
    print("=" * 40)
    print(f"  Collection:   {app_settings.chromadb_collection}")
    print(f"  Location:     {app_settings.chromadb_persist_dir}")
    print(f"  Total chunks: {total}")
    return 0


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------


def _build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the ingestion CLI."""
    parser = argparse.ArgumentParser(
        prog="python -m src.cli.ingest",
        description="Load PDFs into the paperloom vector store.",
    )
    subparsers = parser.add_subparsers(dest="command", help="Ingestion commands")

    # -- pdf --
    pdf_parser = subparsers.add_parser("pdf", help="Ingest a local PDF file")
    pdf_parser.add_argument("--file", required=True, help="Path to the PDF file")
    pdf_parser.add_argument("--title", default="", help="Document title (default: file name)")

    # -- object --
    object_parser = subparsers.add_parser("object", help="Ingest a PDF from the object store")
    object_parser.add_argument(
        "--path",
        required=True,
        help="s3://bucket/key, or a bare key in DEFAULT_BUCKET",
    )
    object_parser.add_argument("--title", default="", help="Document title (default: key)")

    # -- stats --
    subparsers.add_parser("stats", help="Show collection statistics")

    return parser


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the ingestion tool.

    Parses the subcommand and arguments, initializes the Settings from
    environment variables / .env file, and dispatches to the appropriate
    handler function.  Pipeline failures are reported on stderr with exit
    code 1.
    """
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    app_settings = Settings()
    configure_logging(app_settings.log_level)
    config = load_config(settings=app_settings)
    app = config.get("app", {})

    try:
        # Stats only needs the vector store.
        if args.command == "stats":
            sys.exit(asyncio.run(_handle_stats(app_settings)))

        pipeline, status_msg = _build_pipeline(app_settings)
        if pipeline is None:
            print(f"Error: {status_msg}", file=sys.stderr)
            sys.exit(1)

        print(f"{app.get('name', 'paperloom')} {app.get('version', '')}".strip())
        print(f"Providers: {status_msg}")
        print()

        if args.command == "pdf":
            exit_code = asyncio.run(_handle_pdf(args, pipeline))
        elif args.command == "object":
            exit_code = asyncio.run(_handle_object(args, pipeline))
        else:
            parser.print_help()
            exit_code = 1
    except PaperloomError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        exit_code = 1

    sys.exit(exit_code)


if __name__ == "__main__":
    main()
