"""PyMuPDF (fitz) document backend.

Implements :class:`IDocumentSource` / :class:`IPageSource` on top of
``fitz``:

* **Text** -- spans from ``page.get_text("dict")`` become
  :class:`PositionedTextFragment` objects.  PyMuPDF reports coordinates
  with a top-left origin and y growing downward; fragments are flipped into
  PDF user space (``y = page_height - origin_y``) so that a larger y means
  nearer the top of the page.
* **Images** -- ``page.get_images(full=True)`` lists the image XObjects the
  page paints, in content order, with their resource names.  Each becomes a
  ``paint_image`` :class:`DrawingOperation`; resolving a name decodes the
  XObject (plus its soft mask) into RGBA samples off the event loop via
  ``asyncio.to_thread``.
"""

from __future__ import annotations

import asyncio
from collections.abc import Iterator

import fitz  # PyMuPDF -- the "fitz" import name is a PyMuPDF convention
import structlog

from src.interfaces.page_source import IDocumentSource, IPageSource
from src.models.document import PAINT_IMAGE, DrawingOperation, PositionedTextFragment, RawImage
from src.utils.errors import DocumentParseError, PageImageResolutionError

logger = structlog.get_logger(logger_name=__name__)

_PROVIDER = "pymupdf"

# get_text("dict") block type for text (1 is an image block).
_TEXT_BLOCK = 0


class PyMuPDFPage(IPageSource):
    """One page of a PyMuPDF document."""

    def __init__(self, document: fitz.Document, page: fitz.Page, page_number: int) -> None:
        self._document = document
        self._page = page
        self._page_number = page_number
        # object name -> (xref, smask xref); filled by get_operations().
        self._image_refs: dict[str, tuple[int, int]] | None = None

    @property
    def page_number(self) -> int:
        return self._page_number

    # ------------------------------------------------------------------
    # Text
    # ------------------------------------------------------------------

    def get_text_fragments(self) -> list[PositionedTextFragment]:
        page_height = self._page.rect.height
        data = self._page.get_text("dict", flags=fitz.TEXT_PRESERVE_WHITESPACE)

        fragments: list[PositionedTextFragment] = []
        for block in data.get("blocks", []):
            if block.get("type", _TEXT_BLOCK) != _TEXT_BLOCK:
                continue
            for line in block.get("lines", []):
                for span in line.get("spans", []):
                    text = span.get("text", "")
                    if not text.strip():
                        continue
                    x0, _, x1, _ = span["bbox"]
                    origin_x, origin_y = span["origin"]
                    fragments.append(
                        PositionedTextFragment(
                            text=text,
                            x=origin_x,
                            y=page_height - origin_y,
                            width=max(x1 - x0, 0.0),
                            page_number=self._page_number,
                        )
                    )
        return fragments

    # ------------------------------------------------------------------
    # Images
    # ------------------------------------------------------------------

    def get_operations(self) -> list[DrawingOperation]:
        refs: dict[str, tuple[int, int]] = {}
        operations: list[DrawingOperation] = []
        # Entries: (xref, smask, width, height, bpc, colorspace, alt_colorspace,
        #           name, filter, referencer)
        for entry in self._page.get_images(full=True):
            xref, smask, name = entry[0], entry[1], entry[7]
            refs.setdefault(name, (xref, smask))
            operations.append(DrawingOperation(operator=PAINT_IMAGE, args=(name,)))
        self._image_refs = refs
        return operations

    async def resolve_image(self, name: str) -> RawImage:
        if self._image_refs is None:
            self.get_operations()
        ref = self._image_refs.get(name) if self._image_refs is not None else None
        if ref is None:
            raise PageImageResolutionError(
                message=f"Image object {name!r} is not referenced by page {self._page_number}",
                provider_name=_PROVIDER,
                page_number=self._page_number,
                object_name=name,
            )
        xref, smask = ref
        try:
            return await asyncio.to_thread(self._decode_rgba, xref, smask)
        except (RuntimeError, ValueError) as exc:
            raise PageImageResolutionError(
                message=f"Image object {name!r} (xref {xref}) could not be decoded: {exc}",
                provider_name=_PROVIDER,
                page_number=self._page_number,
                object_name=name,
            ) from exc

    def _decode_rgba(self, xref: int, smask: int) -> RawImage:
        pixmap = fitz.Pixmap(self._document, xref)
        if pixmap.alpha:
            pixmap = fitz.Pixmap(pixmap, 0)
        if pixmap.colorspace is None or pixmap.colorspace.n != 3:
            pixmap = fitz.Pixmap(fitz.csRGB, pixmap)
        if smask:
            pixmap = fitz.Pixmap(pixmap, fitz.Pixmap(self._document, smask))
        else:
            pixmap = fitz.Pixmap(pixmap, 1)
        return RawImage(width=pixmap.width, height=pixmap.height, samples=bytes(pixmap.samples))


class PyMuPDFDocument(IDocumentSource):
    """A PDF opened from memory with PyMuPDF."""

    def __init__(self, document: fitz.Document) -> None:
        self._document = document

    @classmethod
    def open(cls, data: bytes) -> PyMuPDFDocument:
        """Open *data* as a PDF.

        Raises
        ------
        DocumentParseError
            If PyMuPDF cannot parse the buffer, or it is password-protected.
        """
        try:
            document = fitz.open(stream=data, filetype="pdf")
        except Exception as exc:
            logger.error("pdf_open_failed", size=len(data), error=str(exc))
            raise DocumentParseError(
                message=f"Corrupt or unsupported document: {exc}",
                provider_name=_PROVIDER,
            ) from exc
        if document.needs_pass:
            document.close()
            raise DocumentParseError(
                message="Document is password-protected",
                provider_name=_PROVIDER,
            )
        return cls(document)

    @property
    def page_count(self) -> int:
        return self._document.page_count

    def iter_pages(self) -> Iterator[PyMuPDFPage]:
        for index in range(self._document.page_count):
            yield PyMuPDFPage(self._document, self._document.load_page(index), index + 1)

    def close(self) -> None:
        self._document.close()
