"""Extraction-stage data models: positioned text, drawing operations, images.

Coordinates follow PDF user space: the origin is the bottom-left corner of
the page and y grows upward, so a larger ``y`` means nearer the top of the
page.  The PyMuPDF adapter flips its top-left coordinates into this space
before building fragments.

All models use frozen config; nothing produced by extraction is mutated
downstream.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, model_validator

# Operator name for drawing operations that paint an image XObject.
PAINT_IMAGE = "paint_image"


class PositionedTextFragment(BaseModel):
    """A run of text with a baseline origin and a rendered width."""

    model_config = ConfigDict(frozen=True)

    text: str
    x: float = Field(description="Baseline origin x in layout units.")
    y: float = Field(description="Baseline origin y in layout units (up is larger).")
    width: float = Field(default=0.0, ge=0.0, description="Rendered advance width.")
    page_number: int = Field(default=1, ge=1)

    @property
    def end_x(self) -> float:
        """Right edge of the fragment (``x + width``)."""
        return self.x + self.width


class Line(BaseModel):
    """Fragments judged to share a baseline, ordered left to right.

    ``reference_y`` is the y of the first fragment that opened the line;
    the tolerance window is anchored there and never moves.
    """

    model_config = ConfigDict(frozen=True)

    reference_y: float
    fragments: tuple[PositionedTextFragment, ...] = ()


class DrawingOperation(BaseModel):
    """One entry of a page's drawing-operation list."""

    model_config = ConfigDict(frozen=True)

    operator: str
    args: tuple[str, ...] = ()

    @property
    def is_image_paint(self) -> bool:
        return self.operator == PAINT_IMAGE and bool(self.args)


class RawImage(BaseModel):
    """Decoded, interleaved RGBA samples for one image object."""

    model_config = ConfigDict(frozen=True)

    width: int = Field(gt=0)
    height: int = Field(gt=0)
    samples: bytes

    @model_validator(mode="after")
    def _check_sample_count(self) -> RawImage:
        expected = self.width * self.height * 4
        if len(self.samples) != expected:
            raise ValueError(
                f"RGBA sample buffer has {len(self.samples)} bytes, expected {expected}"
            )
        return self


class ExtractedImage(BaseModel):
    """A PNG-encoded image pulled out of a document.

    ``id`` combines page number and object name (``"3_Im0"``) so it stays
    unique even when several pages reuse the same object name.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    width: int = Field(gt=0)
    height: int = Field(gt=0)
    pixels: bytes = Field(description="PNG-encoded raster.")

    @staticmethod
    def make_id(page_number: int, object_name: str) -> str:
        return f"{page_number}_{object_name}"


class DocumentExtractionResult(BaseModel):
    """Reading-order text plus images for a whole document."""

    model_config = ConfigDict(frozen=True)

    text: str = ""
    images: tuple[ExtractedImage, ...] = ()
    page_count: int = Field(default=0, ge=0)
