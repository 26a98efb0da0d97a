"""PDF document backends.

PyMuPDFDocument opens a PDF byte buffer and exposes its pages as
IPageSource objects (positioned text spans, image-paint operations, and an
async image resolver) for the extraction services.
"""

from src.providers.pdf.pymupdf_document import PyMuPDFDocument, PyMuPDFPage

__all__ = ["PyMuPDFDocument", "PyMuPDFPage"]
