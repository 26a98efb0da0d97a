"""Unit tests for the PyMuPDF document backend, against generated PDFs."""

from __future__ import annotations

import fitz
import pytest

from src.models.document import PAINT_IMAGE
from src.providers.pdf.pymupdf_document import PyMuPDFDocument
from src.utils.errors import DocumentParseError, PageImageResolutionError
from tests.conftest import build_pdf


class TestOpen:
    def test_page_count(self) -> None:
        document = PyMuPDFDocument.open(build_pdf([[(72, 72, "One.")], [(72, 72, "Two.")]]))
        try:
            assert document.page_count == 2
            assert [page.page_number for page in document.iter_pages()] == [1, 2]
        finally:
            document.close()

    def test_corrupt_buffer(self) -> None:
        with pytest.raises(DocumentParseError) as exc_info:
            PyMuPDFDocument.open(b"%PDF-1.4 truncated garbage")
        assert exc_info.value.provider_name == "pymupdf"

    def test_password_protected(self) -> None:
        doc = fitz.open()
        doc.new_page().insert_text((72, 72), "secret")
        data = doc.tobytes(encryption=fitz.PDF_ENCRYPT_AES_256, owner_pw="owner", user_pw="user")
        doc.close()

        with pytest.raises(DocumentParseError, match="password"):
            PyMuPDFDocument.open(data)


class TestTextFragments:
    def test_fragments_in_pdf_user_space(self) -> None:
        document = PyMuPDFDocument.open(build_pdf([[(72, 100, "Upper"), (72, 300, "Lower")]]))
        try:
            page = next(document.iter_pages())
            fragments = {f.text.strip(): f for f in page.get_text_fragments()}
        finally:
            document.close()

        assert set(fragments) == {"Upper", "Lower"}
        # Text nearer the top of the page has the larger y.
        assert fragments["Upper"].y > fragments["Lower"].y
        assert fragments["Upper"].y == pytest.approx(842 - 100, abs=1.0)
        assert fragments["Upper"].x == pytest.approx(72, abs=1.0)
        assert fragments["Upper"].width > 0
        assert fragments["Upper"].page_number == 1

    def test_blank_page_has_no_fragments(self) -> None:
        document = PyMuPDFDocument.open(build_pdf([[]]))
        try:
            assert next(document.iter_pages()).get_text_fragments() == []
        finally:
            document.close()


class TestImages:
    @pytest.mark.asyncio
    async def test_operations_and_resolution(self) -> None:
        document = PyMuPDFDocument.open(build_pdf([[(72, 72, "Figure.")]], image_on_page=1))
        try:
            page = next(document.iter_pages())
            operations = page.get_operations()
            assert len(operations) == 1
            assert operations[0].operator == PAINT_IMAGE

            raw = await page.resolve_image(operations[0].args[0])
        finally:
            document.close()

        assert (raw.width, raw.height) == (4, 3)
        assert len(raw.samples) == 4 * 3 * 4
        # Opaque blue-ish fill from the fixture PNG.
        assert raw.samples[:4] == bytes((0, 128, 255, 255))

    @pytest.mark.asyncio
    async def test_unknown_name(self) -> None:
        document = PyMuPDFDocument.open(build_pdf([[(72, 72, "No images.")]]))
        try:
            page = next(document.iter_pages())
            with pytest.raises(PageImageResolutionError) as exc_info:
                await page.resolve_image("Im99")
        finally:
            document.close()

        assert exc_info.value.object_name == "Im99"
        assert exc_info.value.page_number == 1
