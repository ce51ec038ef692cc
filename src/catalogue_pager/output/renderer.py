"""
Module: output.renderer

Purpose:
    Reference content renderer. Draws one page group per page with
    Pillow: item cards laid out on the layout's grid, external-URL pages
    and summary pages. Every link drawn is recorded as a ClickableRegion
    in local page coordinates so the compositor can carry it into the PDF.

Key Classes:
    - PageRenderer: Renderer interface (group -> RenderedPage)
    - RenderContext: Items, overrides, images and link settings
    - CatalogueRenderer: Pillow implementation

Dependencies:
    - PIL: ImageDraw, ImageFont
    - output.barcode: Default barcode generator
    - output.models: RasterPage
    - output.config: Page geometry

Used By:
    - controller: Render phase of the build pipeline
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Callable, List, Mapping, Optional, Sequence, Tuple

from PIL import Image, ImageDraw, ImageFont

from catalogue_pager.core.models import (
    BarcodeType,
    ClickableRegion,
    Item,
    ItemOverrides,
    ItemPage,
    LayoutTag,
    OverrideKind,
    PageGroup,
    SummaryPage,
    SummaryView,
    UrlPage,
)

from .barcode import BarcodeGenerator, render_barcode
from .config import OutputConfig
from .models import RasterPage, RenderedPage

logger = logging.getLogger(__name__)

LinkTagger = Callable[[str], str]

# Colours
TEXT_COLOR = (33, 33, 33)
MUTED_COLOR = (110, 110, 110)
BORDER_COLOR = (214, 214, 214)
PLACEHOLDER_COLOR = (236, 236, 236)
DEFAULT_BANNER_COLOR = "#F7981D"

GUTTER_PX = 16
FOOTER_BAND_PX = 20
DEFAULT_INTERNALS_COUNT = 2


class RenderError(Exception):
    """A page group could not be drawn."""
    pass


def _untagged(url: str) -> str:
    return url


@dataclass(frozen=True)
class RenderContext:
    """
    Everything a renderer needs besides the page group itself.

    Attributes:
        items: Catalogue items (ItemPage indices point into this)
        overrides: Per-item overrides keyed by the same indices
        images: Item identifier -> fetched image (None = placeholder)
        link_tagger: Applied to every item link (UTM parameters)
        page_headers: Page position -> header text
        default_barcode: Barcode type for items without an override
        website_name: Header text for pages without a custom header
        banner_color: Header and footer band colour
        show_footer: Draw the footer band
        footer_text: Text drawn in the footer band
        barcode_generator: Barcode type + payload -> image pasted on
            item cards; returning None falls back to a text line
    """

    items: Sequence[Item]
    overrides: ItemOverrides = field(default_factory=ItemOverrides)
    images: Mapping[str, Optional[Image.Image]] = field(default_factory=dict)
    link_tagger: LinkTagger = _untagged
    page_headers: Mapping[int, str] = field(default_factory=dict)
    default_barcode: BarcodeType = BarcodeType.NONE
    website_name: str = ""
    banner_color: str = DEFAULT_BANNER_COLOR
    show_footer: bool = True
    footer_text: str = ""
    barcode_generator: BarcodeGenerator = render_barcode


class PageRenderer(ABC):
    """Turns one page group into a RenderedPage."""

    @abstractmethod
    def render(self, group: PageGroup, context: RenderContext, page_index: int = 0) -> RenderedPage:
        """
        Draw one page.

        Args:
            group: Page group to draw
            context: Items, overrides and link settings
            page_index: Position of the page in the sequence (0-indexed)
        """


@lru_cache(maxsize=64)
def _load_font(size: int, bold: bool = False) -> ImageFont.FreeTypeFont:
    """
    Load a TrueType font at a pixel size.

    Falls back to Pillow's bundled font if no system font is available.
    """
    if bold:
        font_options = ["arialbd.ttf", "Arial Bold.ttf", "DejaVuSans-Bold.ttf"]
    else:
        font_options = ["arial.ttf", "Arial.ttf", "DejaVuSans.ttf"]

    for font_name in font_options:
        try:
            return ImageFont.truetype(font_name, size)
        except OSError:
            continue

    return ImageFont.load_default(size=size)


class _PageCanvas:
    """
    Drawing surface in local page units.

    Draws at `scale` pixels per local unit and collects link regions in
    local units.
    """

    def __init__(self, width: int, height: int, scale: float) -> None:
        self.width = width
        self.height = height
        self.scale = scale
        self.image = Image.new("RGB", (round(width * scale), round(height * scale)), "white")
        self.draw = ImageDraw.Draw(self.image)
        self.regions: List[ClickableRegion] = []

    def _px(self, value: float) -> int:
        return round(value * self.scale)

    def _box(self, x: float, y: float, w: float, h: float) -> Tuple[int, int, int, int]:
        return (self._px(x), self._px(y), self._px(x + w), self._px(y + h))

    def font(self, size: float, bold: bool = False) -> ImageFont.FreeTypeFont:
        return _load_font(max(1, self._px(size)), bold)

    def text_width(self, text: str, size: float, bold: bool = False) -> float:
        return self.draw.textlength(text, font=self.font(size, bold)) / self.scale

    def text(
        self,
        x: float,
        y: float,
        text: str,
        size: float,
        *,
        fill=TEXT_COLOR,
        bold: bool = False,
    ) -> float:
        """Draw one line; returns the line height in local units."""
        self.draw.text((self._px(x), self._px(y)), text, fill=fill, font=self.font(size, bold))
        return size * 1.3

    def centered_text(self, x: float, y: float, w: float, text: str, size: float, **kwargs) -> float:
        offset = max(0.0, (w - self.text_width(text, size, kwargs.get("bold", False))) / 2)
        return self.text(x + offset, y, text, size, **kwargs)

    def wrap(
        self,
        text: str,
        size: float,
        max_width: float,
        *,
        bold: bool = False,
        max_lines: int = 3,
    ) -> List[str]:
        """Greedy word wrap, ellipsising the last line if text is cut."""
        lines: List[str] = []
        current = ""
        words = text.split()
        for word in words:
            candidate = f"{current} {word}".strip()
            if self.text_width(candidate, size, bold) <= max_width or not current:
                current = candidate
                continue
            lines.append(current)
            current = word
            if len(lines) == max_lines:
                current = ""
                lines[-1] = self._ellipsis(lines[-1], size, max_width, bold)
                break
        if current:
            lines.append(current)
        return lines

    def _ellipsis(self, line: str, size: float, max_width: float, bold: bool) -> str:
        while line and self.text_width(f"{line}...", size, bold) > max_width:
            line = line[:-1]
        return f"{line.rstrip()}..."

    def rect(self, x: float, y: float, w: float, h: float, *, fill=None, outline=None) -> None:
        self.draw.rectangle(self._box(x, y, w, h), fill=fill, outline=outline, width=max(1, self._px(1)))

    def paste_fit(self, img: Image.Image, x: float, y: float, w: float, h: float) -> None:
        """Paste an image scaled to fit the box, centred."""
        box_w, box_h = self._px(w), self._px(h)
        if box_w <= 0 or box_h <= 0:
            return
        ratio = min(box_w / img.width, box_h / img.height)
        size = (max(1, round(img.width * ratio)), max(1, round(img.height * ratio)))
        fitted = img.convert("RGB").resize(size, Image.Resampling.LANCZOS)
        left = self._px(x) + (box_w - size[0]) // 2
        top = self._px(y) + (box_h - size[1]) // 2
        self.image.paste(fitted, (left, top))

    def link(self, href: Optional[str], x: float, y: float, w: float, h: float) -> None:
        if href:
            self.regions.append(ClickableRegion(href=href, x=x, y=y, width=w, height=h))

    def to_page(self) -> RasterPage:
        return RasterPage(self.image, self.regions, pixel_scale=self.scale)


class CatalogueRenderer(PageRenderer):
    """
    Pillow renderer for catalogue pages.

    Pages are drawn at the local page size times the capture upscale, so
    the compositor can capture them without resampling.

    Example:
        >>> renderer = CatalogueRenderer(OutputConfig())
        >>> page = renderer.render(ItemPage((0, 1), "2-up"), context)
        >>> len(page.regions)
        2
    """

    def __init__(self, config: Optional[OutputConfig] = None) -> None:
        self.config = config or OutputConfig()

    def render(self, group: PageGroup, context: RenderContext, page_index: int = 0) -> RasterPage:
        canvas = _PageCanvas(self.config.page_width_px, self.config.page_height_px, self.config.upscale)
        self._draw_header(canvas, context, page_index)

        if isinstance(group, ItemPage):
            self._draw_item_page(canvas, group, context)
        elif isinstance(group, UrlPage):
            self._draw_url_page(canvas, group)
        elif isinstance(group, SummaryPage):
            self._draw_summary_page(canvas, group, context)
        else:
            raise RenderError(f"Unknown page group: {group!r}")

        if context.show_footer:
            self._draw_footer(canvas, context, page_index)

        logger.debug(f"Rendered page {page_index + 1} with {len(canvas.regions)} links")
        return canvas.to_page()

    # ─────────────────────────────────────────────────────────────────────────
    # Page furniture
    # ─────────────────────────────────────────────────────────────────────────

    def _content_box(self) -> Tuple[float, float, float, float]:
        cfg = self.config
        top = cfg.content_top_px
        width = cfg.page_width_px - 2 * cfg.margin_px
        height = cfg.page_height_px - top - cfg.margin_px - FOOTER_BAND_PX
        return (cfg.margin_px, top, width, height)

    def _draw_header(self, canvas: _PageCanvas, context: RenderContext, page_index: int) -> None:
        header = context.page_headers.get(page_index) or context.website_name
        if not header:
            return
        band_y = self.config.margin_px
        band_h = self.config.header_height_px - 12
        canvas.rect(0, band_y, canvas.width, band_h, fill=context.banner_color)
        canvas.centered_text(0, band_y + (band_h - 18) / 2, canvas.width, header, 14, fill="white", bold=True)

    def _draw_footer(self, canvas: _PageCanvas, context: RenderContext, page_index: int) -> None:
        text = f"Page {page_index + 1}"
        if context.footer_text:
            text = f"{text}  |  {context.footer_text}"
        y = canvas.height - self.config.margin_px - FOOTER_BAND_PX + 6
        canvas.centered_text(0, y, canvas.width, text, 8, fill=MUTED_COLOR)

    # ─────────────────────────────────────────────────────────────────────────
    # Item pages
    # ─────────────────────────────────────────────────────────────────────────

    def _draw_item_page(self, canvas: _PageCanvas, group: ItemPage, context: RenderContext) -> None:
        spec = group.layout.spec
        x0, y0, width, height = self._content_box()
        cell_w = (width - GUTTER_PX * (spec.columns - 1)) / spec.columns
        cell_h = (height - GUTTER_PX * (spec.rows - 1)) / spec.rows

        for slot, global_index in enumerate(group.indices):
            if not 0 <= global_index < len(context.items):
                raise RenderError(
                    f"Item index {global_index} out of range for {len(context.items)} items"
                )
            row, col = divmod(slot, spec.columns)
            box = (
                x0 + col * (cell_w + GUTTER_PX),
                y0 + row * (cell_h + GUTTER_PX),
                cell_w,
                cell_h,
            )
            self.render_item(canvas, context.items[global_index], group.layout, global_index, box, context)

    def render_item(
        self,
        canvas: _PageCanvas,
        item: Item,
        layout: LayoutTag,
        global_index: int,
        box: Tuple[float, float, float, float],
        context: RenderContext,
    ) -> None:
        """
        Draw one item card and record its link.

        Args:
            canvas: Page being drawn
            item: Item to draw
            layout: Layout of the page (sets type size and arrangement)
            global_index: Item position in the catalogue (override key)
            box: Card bounds (x, y, width, height) in local units
            context: Render context
        """
        x, y, w, h = box
        overrides = context.overrides
        canvas.rect(x, y, w, h, outline=BORDER_COLOR)
        pad = 10 if layout.capacity > 4 else 16
        title_size = max(9, 22 - layout.capacity)
        body_size = max(8, title_size - 5)

        side_by_side = layout in (LayoutTag.ONE_UP, LayoutTag.ONE_L, LayoutTag.TWO_INT)
        internals = 0
        if layout is LayoutTag.ONE_L:
            internals = overrides.get(OverrideKind.INTERNALS_COUNT, global_index, DEFAULT_INTERNALS_COUNT)

        # Strip of interior previews along the bottom of 1L cards
        strip_h = h * 0.22 if internals else 0.0
        main_h = h - strip_h

        if side_by_side:
            img_box = (x + pad, y + pad, w * 0.42 - pad, main_h - 2 * pad)
            text_x = x + w * 0.42 + pad
        else:
            img_box = (x + pad, y + pad, w - 2 * pad, main_h * 0.55)
            text_x = x + pad
        text_w = x + w - pad - text_x
        text_y = y + pad if side_by_side else img_box[1] + img_box[3] + pad

        self._draw_item_image(canvas, context.images.get(item.identifier), img_box, body_size)

        for line in canvas.wrap(item.display_title, title_size, text_w, bold=True, max_lines=3):
            text_y += canvas.text(text_x, text_y, line, title_size, bold=True)
        if item.author:
            text_y += canvas.text(text_x, text_y, item.author, body_size, fill=MUTED_COLOR)
        if item.price:
            text_y += canvas.text(text_x, text_y, item.price, body_size, bold=True)

        barcode = overrides.get(OverrideKind.BARCODE, global_index, context.default_barcode)
        payload = item.isbn if barcode is BarcodeType.EAN13 else (item.url or item.isbn)
        if barcode is not BarcodeType.NONE and payload:
            room = (text_x, text_y, text_w, y + main_h - pad - text_y)
            text_y += self._draw_barcode(canvas, context, barcode, payload, room, body_size)

        if item.author and overrides.get(OverrideKind.AUTHOR_BIO, global_index, False):
            for line in canvas.wrap(f"About {item.author}", body_size, text_w, max_lines=2):
                text_y += canvas.text(text_x, text_y, line, body_size, fill=MUTED_COLOR)

        note = overrides.get(OverrideKind.FOOTER_NOTE, global_index)
        if note:
            canvas.text(text_x, y + main_h - pad - body_size * 1.3, note, body_size - 1, fill=MUTED_COLOR)

        if internals:
            self._draw_internals(canvas, internals, (x + pad, y + main_h, w - 2 * pad, strip_h - pad), body_size)

        if item.url:
            canvas.link(context.link_tagger(item.url), x, y, w, h)

    def _draw_item_image(
        self,
        canvas: _PageCanvas,
        image: Optional[Image.Image],
        box: Tuple[float, float, float, float],
        size: float,
    ) -> None:
        x, y, w, h = box
        if image is not None:
            canvas.paste_fit(image, x, y, w, h)
            return
        canvas.rect(x, y, w, h, fill=PLACEHOLDER_COLOR)
        canvas.centered_text(x, y + h / 2 - size / 2, w, "No image", size, fill=MUTED_COLOR)

    def _draw_barcode(
        self,
        canvas: _PageCanvas,
        context: RenderContext,
        kind: BarcodeType,
        payload: str,
        box: Tuple[float, float, float, float],
        size: float,
    ) -> float:
        """Draw a barcode at the top of `box`; returns the height used."""
        x, y, w, h = box
        image = context.barcode_generator(kind, payload)
        if image is None:
            return canvas.text(x, y, f"{kind.value}: {payload}", size - 1, fill=MUTED_COLOR)

        if kind is BarcodeType.QR_CODE:
            bar_w = bar_h = min(w, h, 72)
        else:
            bar_w, bar_h = min(w, 150), min(h, 40)
        if bar_w <= 0 or bar_h <= 0:
            logger.debug(f"No room for {kind.value} barcode")
            return 0.0
        canvas.paste_fit(image, x, y, bar_w, bar_h)
        return bar_h + 4

    def _draw_internals(
        self,
        canvas: _PageCanvas,
        count: int,
        box: Tuple[float, float, float, float],
        size: float,
    ) -> None:
        x, y, w, h = box
        thumb_w = (w - GUTTER_PX * (count - 1)) / count
        for i in range(count):
            tx = x + i * (thumb_w + GUTTER_PX)
            canvas.rect(tx, y, thumb_w, h, fill=PLACEHOLDER_COLOR)
            canvas.centered_text(tx, y + h / 2 - size / 2, thumb_w, f"Interior {i + 1}", size, fill=MUTED_COLOR)

    # ─────────────────────────────────────────────────────────────────────────
    # Synthetic pages
    # ─────────────────────────────────────────────────────────────────────────

    def _draw_url_page(self, canvas: _PageCanvas, group: UrlPage) -> None:
        x, y, w, h = self._content_box()
        panel_h = h * 0.4
        panel_y = y + (h - panel_h) / 2
        canvas.rect(x, panel_y, w, panel_h, outline=BORDER_COLOR)

        title = group.title or "Find out more online"
        line_y = panel_y + panel_h / 2 - 40
        for line in canvas.wrap(title, 28, w - 40, bold=True, max_lines=2):
            line_y += canvas.centered_text(x, line_y, w, line, 28, bold=True)
        canvas.centered_text(x, line_y + 12, w, group.url, 14, fill=(25, 90, 180))

        canvas.link(group.url, x, panel_y, w, panel_h)

    def _draw_summary_page(self, canvas: _PageCanvas, group: SummaryPage, context: RenderContext) -> None:
        x, top, w, h = self._content_box()
        bottom = top + h
        y = top + canvas.text(x, top, "Summary", 22, bold=True) + 8

        if group.view is SummaryView.TABLE:
            drawn = self._draw_summary_table(canvas, context, (x, y, w, bottom))
        else:
            drawn = self._draw_summary_list(canvas, group.view, context, (x, y, w, bottom))

        remaining = len(context.items) - drawn
        if remaining > 0:
            logger.warning(f"Summary page overflow: {remaining} items not listed")
            canvas.text(x, bottom - 16, f"... and {remaining} more", 10, fill=MUTED_COLOR)

    def _draw_summary_list(
        self,
        canvas: _PageCanvas,
        view: SummaryView,
        context: RenderContext,
        bounds: Tuple[float, float, float, float],
    ) -> int:
        x, y, w, bottom = bounds
        compact = view is SummaryView.COMPACT_LIST
        size = 9 if compact else 12
        row_h = size * 1.6 if compact else size * 3.2
        bottom -= 20

        for n, item in enumerate(context.items):
            if y + row_h > bottom:
                return n
            label = f"{n + 1}. {item.display_title}"
            if compact and item.author:
                label = f"{label} ({item.author})"
            price_w = canvas.text_width(item.price or "", size, bold=True)
            lines = canvas.wrap(label, size, w - price_w - 12, bold=not compact, max_lines=1)
            canvas.text(x, y, lines[0] if lines else "", size, bold=not compact)
            if item.price:
                canvas.text(x + w - price_w, y, item.price, size, bold=True)
            if not compact and item.author:
                canvas.text(x + 14, y + size * 1.4, item.author, size - 2, fill=MUTED_COLOR)
            if item.url:
                canvas.link(context.link_tagger(item.url), x, y, w, row_h)
            y += row_h
        return len(context.items)

    def _draw_summary_table(
        self,
        canvas: _PageCanvas,
        context: RenderContext,
        bounds: Tuple[float, float, float, float],
    ) -> int:
        x, y, w, bottom = bounds
        size = 9
        row_h = 20.0
        bottom -= 20
        # (heading, share of width)
        columns = [("#", 0.06), ("Title", 0.44), ("Author", 0.24), ("Price", 0.10), ("ISBN", 0.16)]

        def draw_row(values: Sequence[str], top: float, bold: bool) -> None:
            cx = x
            for value, (_, share) in zip(values, columns):
                cell_w = w * share
                lines = canvas.wrap(value, size, cell_w - 6, bold=bold, max_lines=1)
                canvas.text(cx + 3, top + 4, lines[0] if lines else "", size, bold=bold)
                cx += cell_w
            canvas.rect(x, top, w, row_h, outline=BORDER_COLOR)

        draw_row([name for name, _ in columns], y, True)
        y += row_h
        for n, item in enumerate(context.items):
            if y + row_h > bottom:
                return n
            draw_row(
                [str(n + 1), item.display_title, item.author or "", item.price or "", item.isbn or ""],
                y,
                False,
            )
            if item.url:
                canvas.link(context.link_tagger(item.url), x, y, w, row_h)
            y += row_h
        return len(context.items)
