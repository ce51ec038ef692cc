"""
Module: output.config

Purpose:
    Configuration for page rendering, raster capture and compositing.
    Defines local page size, upscale factor, output page size and the
    capture concurrency limit.

Key Classes:
    - OutputConfig: Immutable output configuration

Dependencies:
    - reportlab.lib.pagesizes: A4 in points

Used By:
    - output.renderer: Local page size and margins
    - output.compositor: Upscale, output size, worker limit
    - output.writer: Image encoding
    - assets.fetcher: Fetch workers and timeout
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any

from reportlab.lib.pagesizes import A4


# A4 at 96 DPI, the size the catalogue pages are laid out at
DEFAULT_PAGE_WIDTH_PX = 794
DEFAULT_PAGE_HEIGHT_PX = 1123
DEFAULT_UPSCALE = 2.0

A4_WIDTH_PT, A4_HEIGHT_PT = A4

IMAGE_FORMATS = ("JPEG", "PNG")

INT_FIELDS = (
    "page_width_px",
    "page_height_px",
    "margin_px",
    "header_height_px",
    "max_workers",
    "jpeg_quality",
    "fetch_workers",
)
NUMBER_FIELDS = ("upscale", "output_width_pt", "output_height_pt", "fetch_timeout")


@dataclass(frozen=True)
class OutputConfig:
    """
    Configuration for rendering and compositing (immutable).

    Attributes:
        page_width_px: Local page width the renderer draws at
        page_height_px: Local page height the renderer draws at
        margin_px: Page margin used by the renderer
        header_height_px: Band reserved for page headers
        upscale: Raster capture factor (sharper text after downscale)
        output_width_pt: Output page width in PDF points
        output_height_pt: Output page height in PDF points
        max_workers: Pages captured concurrently (1 = strictly sequential)
        image_format: Encoding of page rasters inside the PDF
        jpeg_quality: JPEG quality when image_format is JPEG
        fetch_workers: Concurrent image downloads
        fetch_timeout: Per-image download timeout in seconds

    Example:
        >>> config = OutputConfig()
        >>> config.bitmap_size
        (1588, 2246)
    """

    # Local page geometry
    page_width_px: int = DEFAULT_PAGE_WIDTH_PX
    page_height_px: int = DEFAULT_PAGE_HEIGHT_PX
    margin_px: int = 40
    header_height_px: int = 48

    # Capture and compositing
    upscale: float = DEFAULT_UPSCALE
    output_width_pt: float = A4_WIDTH_PT
    output_height_pt: float = A4_HEIGHT_PT
    max_workers: int = 1
    image_format: str = "JPEG"
    jpeg_quality: int = 95

    # Asset acquisition
    fetch_workers: int = 8
    fetch_timeout: float = 15.0

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        for name in INT_FIELDS:
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValueError(f"{name} must be an integer: {value!r}")
        for name in NUMBER_FIELDS:
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ValueError(f"{name} must be a number: {value!r}")
        if not isinstance(self.image_format, str):
            raise ValueError(f"image_format must be a string: {self.image_format!r}")
        if self.page_width_px <= 0 or self.page_height_px <= 0:
            raise ValueError(
                f"page size must be positive: {self.page_width_px}x{self.page_height_px}"
            )
        if 2 * self.margin_px + self.header_height_px >= self.page_height_px:
            raise ValueError("Margins exceed page height")
        if 2 * self.margin_px >= self.page_width_px:
            raise ValueError("Margins exceed page width")
        if self.upscale <= 0:
            raise ValueError(f"upscale must be positive: {self.upscale}")
        if self.output_width_pt <= 0 or self.output_height_pt <= 0:
            raise ValueError("output page size must be positive")
        if self.max_workers < 1:
            raise ValueError(f"max_workers must be >= 1: {self.max_workers}")
        if self.fetch_workers < 1:
            raise ValueError(f"fetch_workers must be >= 1: {self.fetch_workers}")
        if self.image_format.upper() not in IMAGE_FORMATS:
            raise ValueError(f"image_format must be one of {IMAGE_FORMATS}: {self.image_format!r}")
        object.__setattr__(self, "image_format", self.image_format.upper())
        if not 1 <= self.jpeg_quality <= 100:
            raise ValueError(f"jpeg_quality must be 1-100: {self.jpeg_quality}")

    @property
    def bitmap_size(self) -> tuple[int, int]:
        """Pixel size of a captured page at the configured upscale."""
        return (
            round(self.page_width_px * self.upscale),
            round(self.page_height_px * self.upscale),
        )

    @property
    def content_top_px(self) -> int:
        return self.margin_px + self.header_height_px

    def to_dict(self) -> dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "OutputConfig":
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"Unknown output settings: {sorted(unknown)}")
        return cls(**data)
