"""
Module: core.models.regions

Purpose:
    Clickable link regions recorded by the content renderer in a page's
    local coordinate space (top-left origin), and their transformation
    into output-document space.

Key Classes:
    - ClickableRegion: Rectangle with a link target

Used By:
    - output.renderer: Records regions while drawing
    - output.compositor: Transforms regions to output space
    - output.writer: Emits link annotations
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class ClickableRegion:
    """
    Link rectangle in local page coordinates.

    Attributes:
        href: Link target
        x: Left edge
        y: Top edge (top-left origin)
        width: Rectangle width
        height: Rectangle height

    Example:
        >>> region = ClickableRegion("https://example.com", 100, 100, 200, 50)
        >>> region.transformed(0.5, 10, 20)
        ClickableRegion(href='https://example.com', x=60.0, y=70.0, width=100.0, height=25.0)
    """

    href: str
    x: float
    y: float
    width: float
    height: float

    @property
    def is_empty(self) -> bool:
        """True for zero-area regions, which are never emitted as links."""
        return self.width <= 0 or self.height <= 0

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    def transformed(self, scale: float, x_offset: float, y_offset: float) -> "ClickableRegion":
        """Scale about the origin, then translate."""
        return ClickableRegion(
            href=self.href,
            x=x_offset + self.x * scale,
            y=y_offset + self.y * scale,
            width=self.width * scale,
            height=self.height * scale,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "href": self.href,
            "x": self.x,
            "y": self.y,
            "width": self.width,
            "height": self.height,
        }
