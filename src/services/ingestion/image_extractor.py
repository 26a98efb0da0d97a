"""Embedded raster image extraction from a page's drawing operations.

Walks the operation list in paint order; for every image-paint operation the
referenced object is resolved (awaiting its materialisation if needed) to
raw RGBA samples, which are then encoded as PNG with Pillow.  Raw sample
buffers carry no dimensions or colour model, so they are never handed out
directly.
"""

from __future__ import annotations

import io

import structlog
from PIL import Image

from src.interfaces.page_source import IPageSource
from src.models.document import DrawingOperation, ExtractedImage, RawImage
from src.utils.errors import PageImageResolutionError

logger = structlog.get_logger(logger_name=__name__)


def encode_png(raw: RawImage) -> bytes:
    """Encode interleaved RGBA samples as a lossless PNG."""
    image = Image.frombytes("RGBA", (raw.width, raw.height), raw.samples)
    buffer = io.BytesIO()
    image.save(buffer, format="PNG")
    return buffer.getvalue()


class PageImageExtractor:
    """Materialises every image painted on a page as an :class:`ExtractedImage`."""

    async def extract(self, page: IPageSource) -> list[ExtractedImage]:
        """Extract the images painted on *page*, in paint order.

        An object painted several times on the same page is returned once.

        Raises
        ------
        PageImageResolutionError
            If a painted object cannot be resolved.
        """
        return await self.extract_operations(
            page.page_number, page.get_operations(), page
        )

    async def extract_operations(
        self,
        page_number: int,
        operations: list[DrawingOperation],
        page: IPageSource,
    ) -> list[ExtractedImage]:
        images: list[ExtractedImage] = []
        seen: set[str] = set()

        for operation in operations:
            if not operation.is_image_paint:
                continue
            name = operation.args[0]
            if name in seen:
                continue
            seen.add(name)

            try:
                raw = await page.resolve_image(name)
            except PageImageResolutionError:
                raise
            except Exception as exc:
                raise PageImageResolutionError(
                    message=f"Could not resolve image object {name!r} on page {page_number}: {exc}",
                    page_number=page_number,
                    object_name=name,
                ) from exc

            images.append(
                ExtractedImage(
                    id=ExtractedImage.make_id(page_number, name),
                    width=raw.width,
                    height=raw.height,
                    pixels=encode_png(raw),
                )
            )

        if images:
            logger.debug("page_images_extracted", page=page_number, images=len(images))
        return images
