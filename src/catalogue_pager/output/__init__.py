"""
Output Package

Page rendering, raster compositing and PDF writing.

Pipeline:
    PageGroup -> CatalogueRenderer -> RenderedPage
    RenderedPage[] -> PageRasterCompositor -> CompositedDocument
    CompositedDocument -> write_pdf() -> PDF with live links
"""

from .config import OutputConfig
from .models import (
    RenderedPage,
    RasterPage,
    PdfPage,
    FitTransform,
    CompositedPage,
    CompositedDocument,
)
from .barcode import BarcodeGenerator, render_barcode
from .renderer import PageRenderer, RenderContext, CatalogueRenderer, RenderError
from .compositor import PageRasterCompositor, CompositeError, compute_fit, transform_region
from .writer import write_pdf, to_pdf_bytes

__all__ = [
    "OutputConfig",
    "RenderedPage",
    "RasterPage",
    "PdfPage",
    "FitTransform",
    "CompositedPage",
    "CompositedDocument",
    "BarcodeGenerator",
    "render_barcode",
    "PageRenderer",
    "RenderContext",
    "CatalogueRenderer",
    "RenderError",
    "PageRasterCompositor",
    "CompositeError",
    "compute_fit",
    "transform_region",
    "write_pdf",
    "to_pdf_bytes",
]
