"""
Module: output.models

Purpose:
    Data models for rendered and composited pages.

Key Classes:
    - RenderedPage: Abstract page handle (local size, regions, rasterize)
    - RasterPage: Page already drawn as a PIL image
    - PdfPage: One page of a PDF from an external renderer (PyMuPDF)
    - FitTransform: Fit-within placement of a bitmap on an output page
    - CompositedPage: One output page with transformed links
    - CompositedDocument: Ordered composited pages

Dependencies:
    - PIL: Image type and resampling
    - fitz (PyMuPDF): PDF page rasterization and link extraction

Used By:
    - output.renderer: Produces RasterPages
    - output.compositor: Consumes RenderedPages, produces CompositedDocument
    - output.writer: Writes CompositedDocument to PDF
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import List, Sequence, Tuple

import fitz
from PIL import Image

from catalogue_pager.core.models import ClickableRegion


class RenderedPage(ABC):
    """
    A logical page ready for raster capture.

    Coordinates of `regions` are in the page's local space, whose size is
    (`width`, `height`) with a top-left origin.
    """

    @property
    @abstractmethod
    def width(self) -> float:
        """Local page width."""

    @property
    @abstractmethod
    def height(self) -> float:
        """Local page height."""

    @property
    @abstractmethod
    def regions(self) -> Tuple[ClickableRegion, ...]:
        """Clickable regions in local coordinates."""

    @abstractmethod
    def rasterize(self, scale: float) -> Image.Image:
        """
        Capture the page as a bitmap.

        Args:
            scale: Bitmap pixels per local unit

        Returns:
            RGB image of about (width * scale, height * scale) pixels
        """


class RasterPage(RenderedPage):
    """
    Page drawn directly as a PIL image.

    The image may be drawn at a higher density than the local space
    (`pixel_scale` pixels per local unit) so that capture at the same
    scale needs no resampling.

    Example:
        >>> page = RasterPage(Image.new("RGB", (1588, 2246)), pixel_scale=2.0)
        >>> (page.width, page.height)
        (794.0, 1123.0)
    """

    def __init__(
        self,
        image: Image.Image,
        regions: Sequence[ClickableRegion] = (),
        *,
        pixel_scale: float = 1.0,
    ) -> None:
        if pixel_scale <= 0:
            raise ValueError(f"pixel_scale must be positive: {pixel_scale}")
        self._image = image
        self._regions = tuple(regions)
        self._pixel_scale = pixel_scale

    @property
    def image(self) -> Image.Image:
        return self._image

    @property
    def width(self) -> float:
        return self._image.width / self._pixel_scale

    @property
    def height(self) -> float:
        return self._image.height / self._pixel_scale

    @property
    def regions(self) -> Tuple[ClickableRegion, ...]:
        return self._regions

    def rasterize(self, scale: float) -> Image.Image:
        ratio = scale / self._pixel_scale
        image = self._image if self._image.mode == "RGB" else self._image.convert("RGB")
        if abs(ratio - 1.0) < 1e-9:
            return image.copy()
        size = (max(1, round(image.width * ratio)), max(1, round(image.height * ratio)))
        return image.resize(size, Image.Resampling.LANCZOS)


class PdfPage(RenderedPage):
    """
    One page of a PDF produced by an external content renderer.

    Local units are PDF points. URI links on the page become its
    clickable regions.
    """

    def __init__(self, pdf_bytes: bytes, page_number: int = 0) -> None:
        self._pdf_bytes = pdf_bytes
        self._page_number = page_number
        with fitz.open(stream=pdf_bytes, filetype="pdf") as doc:
            if not 0 <= page_number < doc.page_count:
                raise IndexError(
                    f"Page {page_number} out of range for {doc.page_count}-page PDF"
                )
            page = doc[page_number]
            rect = page.rect
            self._width = float(rect.width)
            self._height = float(rect.height)
            self._regions = tuple(_links_to_regions(page))

    @classmethod
    def from_file(cls, path: Path) -> List["PdfPage"]:
        """All pages of a PDF file."""
        data = Path(path).read_bytes()
        with fitz.open(stream=data, filetype="pdf") as doc:
            count = doc.page_count
        return [cls(data, i) for i in range(count)]

    @property
    def width(self) -> float:
        return self._width

    @property
    def height(self) -> float:
        return self._height

    @property
    def regions(self) -> Tuple[ClickableRegion, ...]:
        return self._regions

    def rasterize(self, scale: float) -> Image.Image:
        matrix = fitz.Matrix(scale, scale)
        with fitz.open(stream=self._pdf_bytes, filetype="pdf") as doc:
            pix = doc[self._page_number].get_pixmap(matrix=matrix, alpha=False)
            return Image.frombytes("RGB", (pix.width, pix.height), pix.samples)


def _links_to_regions(page: fitz.Page) -> List[ClickableRegion]:
    regions = []
    for link in page.get_links():
        if link.get("kind") != fitz.LINK_URI or not link.get("uri"):
            continue
        rect = link["from"]
        regions.append(ClickableRegion(
            href=link["uri"],
            x=float(rect.x0),
            y=float(rect.y0),
            width=float(rect.width),
            height=float(rect.height),
        ))
    return regions


@dataclass(frozen=True, slots=True)
class FitTransform:
    """
    Placement of a bitmap inside an output page (fit within, centred).

    Attributes:
        scale: Output units per bitmap pixel
        x_offset: Left edge of the placed bitmap
        y_offset: Top edge of the placed bitmap (top-left origin)
        render_width: Placed width
        render_height: Placed height
    """

    scale: float
    x_offset: float
    y_offset: float
    render_width: float
    render_height: float


@dataclass(frozen=True)
class CompositedPage:
    """
    One output page (immutable).

    Attributes:
        index: Position in the document (0-indexed)
        image: Captured bitmap
        placement: Where the bitmap sits on the output page
        links: Regions in output coordinates (top-left origin)
    """

    index: int
    image: Image.Image
    placement: FitTransform
    links: Tuple[ClickableRegion, ...] = ()


@dataclass(frozen=True)
class CompositedDocument:
    """
    Ordered output pages plus the output page size.

    Example:
        >>> doc = compositor.composite(pages)
        >>> doc.page_count, doc.link_count
        (3, 12)
    """

    pages: Tuple[CompositedPage, ...]
    page_width: float
    page_height: float

    @property
    def page_count(self) -> int:
        return len(self.pages)

    @property
    def link_count(self) -> int:
        return sum(len(p.links) for p in self.pages)
