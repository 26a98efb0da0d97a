# =============================================================================
# src/cli/__init__.py -- CLI Module Overview
# =============================================================================
#
# Command-line tools for paperloom.  Each submodule is a self-contained CLI
# utility that can be run directly via `python -m src.cli.<module>`.
#
#   INGESTION (ingest.py)
#      Loads local or object-store PDFs into the ChromaDB vector store and
#      reports collection statistics.
#
# Architecture Notes:
#   - argparse for argument parsing (not Click/Typer).
#   - Heavy imports (PyMuPDF, chromadb, openai) are deferred inside
#     functions to keep startup time fast for simple commands.
#   - Each command constructs its own service dependencies, because CLI
#     tools run as one-shot scripts, not long-lived servers.
# =============================================================================

"""CLI tools for the paperloom pipeline.

- ``python -m src.cli.ingest`` -- ingest PDFs into the vector store and show
  collection statistics.
"""
