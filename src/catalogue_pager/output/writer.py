"""
Module: output.writer

Purpose:
    Write a CompositedDocument to PDF using ReportLab. Each composited
    page becomes one PDF page: the captured bitmap is drawn at its fit
    placement and every link region becomes a URI link annotation.

Key Functions:
    - write_pdf(): Write document to a file
    - to_pdf_bytes(): Write document to memory

Dependencies:
    - reportlab: PDF generation
    - PIL: Bitmap encoding

Used By:
    - controller: Write phase of the build pipeline
"""

from __future__ import annotations

import io
import logging
from pathlib import Path
from typing import BinaryIO, Optional, Union

from PIL import Image
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

from .config import OutputConfig
from .models import CompositedDocument, CompositedPage

logger = logging.getLogger(__name__)


def write_pdf(
    document: CompositedDocument,
    output_path: Path,
    config: Optional[OutputConfig] = None,
) -> Path:
    """
    Write composited pages to a PDF file.

    Args:
        document: Composited pages
        output_path: Path to write PDF
        config: Image encoding settings (defaults to OutputConfig())

    Returns:
        The written path

    Raises:
        IOError: If PDF cannot be written

    Example:
        >>> write_pdf(document, Path("out/catalogue.pdf"))
        PosixPath('out/catalogue.pdf')
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    _write(document, str(output_path), config or OutputConfig())
    logger.info(f"Wrote {document.page_count} pages to {output_path}")
    return output_path


def to_pdf_bytes(document: CompositedDocument, config: Optional[OutputConfig] = None) -> bytes:
    """Write composited pages to an in-memory PDF."""
    buf = io.BytesIO()
    _write(document, buf, config or OutputConfig())
    return buf.getvalue()


def _write(
    document: CompositedDocument,
    target: Union[str, BinaryIO],
    config: OutputConfig,
) -> None:
    if document.page_count == 0:
        logger.warning("Empty document, creating empty PDF")

    c = canvas.Canvas(target, pagesize=(document.page_width, document.page_height))
    for page in document.pages:
        _draw_page(c, page, document.page_height, config)
        c.showPage()
    c.save()


def _draw_page(
    c: canvas.Canvas,
    page: CompositedPage,
    page_height_pt: float,
    config: OutputConfig,
) -> None:
    """
    Draw one page bitmap and its link annotations.

    Args:
        c: ReportLab canvas
        page: Composited page (top-left origin coordinates)
        page_height_pt: Page height for Y coordinate transformation
        config: Image encoding settings
    """
    fit = page.placement
    c.drawImage(
        _pil_to_reader(page.image, config),
        fit.x_offset,
        _transform_y(page_height_pt, fit.y_offset, fit.render_height),
        width=fit.render_width,
        height=fit.render_height,
    )

    for link in page.links:
        bottom = _transform_y(page_height_pt, link.y, link.height)
        rect = (link.x, bottom, link.right, bottom + link.height)
        try:
            c.linkURL(link.href, rect, relative=0, thickness=0)
        except Exception as e:
            logger.warning(f"Page {page.index + 1}: skipped link {link.href!r}: {e}")


def _pil_to_reader(img: Image.Image, config: OutputConfig) -> ImageReader:
    """
    Convert PIL image to ReportLab ImageReader.

    Args:
        img: PIL Image object
        config: Selects JPEG (with quality) or PNG encoding

    Returns:
        ImageReader for use with ReportLab
    """
    buf = io.BytesIO()
    if config.image_format == "JPEG":
        img.convert("RGB").save(buf, format="JPEG", quality=config.jpeg_quality)
    else:
        img.save(buf, format="PNG")
    buf.seek(0)
    return ImageReader(buf)


def _transform_y(page_height_pt: float, y_top: float, height: float) -> float:
    """
    Convert a top-down Y coordinate to PDF's bottom-up coordinate.

    Args:
        page_height_pt: Page height in points
        y_top: Distance of the box top from the page top
        height: Box height

    Returns:
        Y of the box bottom edge from the page bottom
    """
    return page_height_pt - y_top - height
