"""Whole-document extraction: reading-order text plus embedded images.

Opens a PDF byte buffer through a document backend, walks pages 1..N
strictly in order, and for each page runs :class:`PageTextReconstructor`
and :class:`PageImageExtractor`.  Page texts are joined with ``\\n`` and the
whole document is then collapsed to single-spaced text, so line wraps and
page breaks never survive inside a sentence.

Failure policy:

* A buffer that cannot be opened as a PDF raises :class:`DocumentParseError`.
* A page whose text cannot be read contributes ``""`` and is logged; one bad
  page does not abort the document.  Zero fragments is a valid empty page.
* Image-resolution failures propagate -- they indicate a malformed object
  graph, which is treated as a document-level failure.
"""

from __future__ import annotations

from collections.abc import Callable

import structlog

from src.interfaces.page_source import IDocumentSource
from src.models.document import DocumentExtractionResult, ExtractedImage
from src.services.ingestion.image_extractor import PageImageExtractor
from src.services.ingestion.text_reconstructor import PageTextReconstructor
from src.utils.errors import DocumentParseError
from src.utils.text_normalizer import collapse_whitespace

logger = structlog.get_logger(logger_name=__name__)

DocumentOpener = Callable[[bytes], IDocumentSource]


def _default_opener(data: bytes) -> IDocumentSource:
    # Deferred so the extraction services import without PyMuPDF loaded.
    from src.providers.pdf.pymupdf_document import PyMuPDFDocument

    return PyMuPDFDocument.open(data)


class DocumentExtractor:
    """Drives text reconstruction and image extraction across a document.

    Parameters
    ----------
    text_reconstructor:
        Per-page reading-order reconstruction.
    image_extractor:
        Per-page image materialisation.
    opener:
        Callable that opens a byte buffer as an :class:`IDocumentSource`;
        raises :class:`DocumentParseError` for unusable input.  Defaults to
        the PyMuPDF backend.
    """

    def __init__(
        self,
        text_reconstructor: PageTextReconstructor | None = None,
        image_extractor: PageImageExtractor | None = None,
        opener: DocumentOpener | None = None,
    ) -> None:
        self._text_reconstructor = text_reconstructor or PageTextReconstructor()
        self._image_extractor = image_extractor or PageImageExtractor()
        self._opener = opener or _default_opener

    async def extract(self, pdf_bytes: bytes) -> DocumentExtractionResult:
        """Extract reading-order text and images from *pdf_bytes*.

        Raises
        ------
        DocumentParseError
            If the buffer cannot be parsed as a PDF.
        PageImageResolutionError
            If any page paints an image object that cannot be resolved.
        """
        if not pdf_bytes:
            raise DocumentParseError("Empty document buffer")

        document = self._opener(pdf_bytes)
        try:
            page_texts: list[str] = []
            images: list[ExtractedImage] = []

            for page in document.iter_pages():
                try:
                    fragments = page.get_text_fragments()
                except Exception as exc:
                    logger.warning(
                        "page_text_read_failed",
                        page=page.page_number,
                        error=str(exc),
                    )
                    fragments = []
                page_texts.append(self._text_reconstructor.reconstruct(fragments))
                images.extend(await self._image_extractor.extract(page))

            page_count = document.page_count
        finally:
            document.close()

        text = collapse_whitespace("\n".join(page_texts))
        logger.info(
            "document_extracted",
            pages=page_count,
            chars=len(text),
            images=len(images),
        )
        return DocumentExtractionResult(text=text, images=tuple(images), page_count=page_count)
