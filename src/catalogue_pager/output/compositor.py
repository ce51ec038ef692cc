"""
Module: output.compositor

Purpose:
    Capture rendered pages as bitmaps and place them on fixed-size output
    pages, carrying each page's clickable regions across with the same
    transform as the bitmap so links stay on top of what they cover.

Key Functions:
    - compute_fit(): Fit-within scale and centring offsets
    - transform_region(): Local region -> output region

Key Classes:
    - PageRasterCompositor: Ordered capture and placement of pages
    - CompositeError: Fatal capture failure

Dependencies:
    - concurrent.futures: Optional concurrent capture
    - output.models: RenderedPage, CompositedDocument

Used By:
    - controller: Composite phase of the build pipeline
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional, Sequence, Tuple

from catalogue_pager.core.models import ClickableRegion

from .config import OutputConfig
from .models import CompositedDocument, CompositedPage, FitTransform, RenderedPage

logger = logging.getLogger(__name__)


class CompositeError(Exception):
    """A page could not be captured; no document is produced."""
    pass


def compute_fit(
    bitmap_width: float,
    bitmap_height: float,
    out_width: float,
    out_height: float,
) -> FitTransform:
    """
    Fit a bitmap inside an output page, preserving aspect ratio, centred.

    Args:
        bitmap_width: Bitmap width in pixels
        bitmap_height: Bitmap height in pixels
        out_width: Output page width
        out_height: Output page height

    Returns:
        FitTransform with scale, offsets and placed size

    Raises:
        CompositeError: If any dimension is not positive

    Example:
        >>> fit = compute_fit(800, 1000, 400, 500)
        >>> fit.scale, fit.x_offset, fit.y_offset
        (0.5, 0.0, 0.0)
    """
    if min(bitmap_width, bitmap_height, out_width, out_height) <= 0:
        raise CompositeError(
            f"Cannot fit {bitmap_width}x{bitmap_height} bitmap into {out_width}x{out_height} page"
        )
    scale = min(out_width / bitmap_width, out_height / bitmap_height)
    render_width = bitmap_width * scale
    render_height = bitmap_height * scale

    # Floating point can leave the placed height a hair over the page
    if render_height > out_height:
        scale = out_height / bitmap_height
        render_width = bitmap_width * scale
        render_height = out_height

    return FitTransform(
        scale=scale,
        x_offset=(out_width - render_width) / 2,
        y_offset=(out_height - render_height) / 2,
        render_width=render_width,
        render_height=render_height,
    )


def transform_region(
    region: ClickableRegion,
    fit: FitTransform,
    bitmap_width: float,
    local_width: float,
) -> ClickableRegion:
    """
    Map a region from page-local units to output units.

    The bitmap may be denser than the local space (upscaled capture), so
    the effective scale is fit.scale * (bitmap_width / local_width).
    """
    scale = fit.scale * (bitmap_width / local_width)
    return region.transformed(scale, fit.x_offset, fit.y_offset)


class PageRasterCompositor:
    """
    Composite rendered pages into an output document.

    Pages are captured as an ordered task queue: one at a time by
    default, or on a thread pool when max_workers > 1. Output order is
    always input order.

    Example:
        >>> compositor = PageRasterCompositor(OutputConfig())
        >>> document = compositor.composite(pages)
        >>> document.page_count == len(pages)
        True
    """

    def __init__(self, config: Optional[OutputConfig] = None) -> None:
        self.config = config or OutputConfig()

    def composite(self, pages: Sequence[RenderedPage]) -> CompositedDocument:
        """
        Capture and place every page.

        Raises:
            CompositeError: If any page fails to rasterize
        """
        cfg = self.config
        tasks = list(enumerate(pages))
        if cfg.max_workers == 1 or len(tasks) <= 1:
            composited = [self._composite_page(task) for task in tasks]
        else:
            with ThreadPoolExecutor(max_workers=cfg.max_workers) as executor:
                composited = list(executor.map(self._composite_page, tasks))

        document = CompositedDocument(
            pages=tuple(composited),
            page_width=cfg.output_width_pt,
            page_height=cfg.output_height_pt,
        )
        logger.info(f"Composited {document.page_count} pages with {document.link_count} links")
        return document

    def _composite_page(self, task: Tuple[int, RenderedPage]) -> CompositedPage:
        index, page = task
        cfg = self.config
        try:
            bitmap = page.rasterize(cfg.upscale)
        except Exception as e:
            raise CompositeError(f"Failed to process page {index + 1}: {e}") from e

        fit = compute_fit(bitmap.width, bitmap.height, cfg.output_width_pt, cfg.output_height_pt)
        links: List[ClickableRegion] = []
        for region in page.regions:
            if region.is_empty or not region.href:
                logger.debug(f"Page {index + 1}: skipped empty link region {region.href!r}")
                continue
            links.append(transform_region(region, fit, bitmap.width, page.width))

        logger.debug(
            f"Page {index + 1}: {bitmap.width}x{bitmap.height}px at scale {fit.scale:.4f}, "
            f"{len(links)} links"
        )
        return CompositedPage(index=index, image=bitmap, placement=fit, links=tuple(links))
