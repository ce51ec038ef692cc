"""
Module: output.barcode

Purpose:
    Barcode images for item cards. Builds EAN-13 and QR code symbols with
    reportlab's barcode widgets and paints their bars into a Pillow image,
    so the renderer can paste them like any other picture.

Key Functions:
    - render_barcode(): Barcode type + payload -> PIL image (or None)

Dependencies:
    - reportlab.graphics.barcode: EAN-13 and QR symbol geometry
    - PIL: ImageDraw

Used By:
    - output.renderer: Default RenderContext.barcode_generator
"""

from __future__ import annotations

import logging
import math
import re
from typing import Callable, Iterator, Optional

from PIL import Image, ImageDraw
from reportlab.graphics.barcode.eanbc import Ean13BarcodeWidget
from reportlab.graphics.barcode.qr import QrCodeWidget
from reportlab.graphics.shapes import Group, Rect

from catalogue_pager.core.models import BarcodeType

logger = logging.getLogger(__name__)

BarcodeGenerator = Callable[[BarcodeType, str], Optional[Image.Image]]

# Pixels per reportlab point when painting the symbol
BARCODE_SCALE = 4.0
EAN13_DATA_DIGITS = 12


def _rects(group: Group) -> Iterator[Rect]:
    for shape in group.getContents():
        if isinstance(shape, Group):
            yield from _rects(shape)
        elif isinstance(shape, Rect):
            yield shape


def _paint(group: Group, scale: float = BARCODE_SCALE) -> Image.Image:
    """
    Paint the filled rectangles of a widget drawing onto a white image.

    Drawing coordinates have a bottom-left origin; the image is flipped
    to top-left.
    """
    x1, y1, x2, y2 = group.getBounds()
    width = max(1, math.ceil((x2 - x1) * scale))
    height = max(1, math.ceil((y2 - y1) * scale))
    image = Image.new("RGB", (width, height), "white")
    draw = ImageDraw.Draw(image)

    for rect in _rects(group):
        if rect.fillColor is None or rect.width <= 0 or rect.height <= 0:
            continue
        left = (rect.x - x1) * scale
        top = (y2 - rect.y - rect.height) * scale
        right = left + rect.width * scale
        bottom = top + rect.height * scale
        draw.rectangle(
            (round(left), round(top), max(round(left), round(right) - 1), max(round(top), round(bottom) - 1)),
            fill="black",
        )
    return image


def _ean13_digits(payload: str) -> Optional[str]:
    digits = re.sub(r"\D", "", payload)
    if len(digits) < EAN13_DATA_DIGITS:
        return None
    # The check digit is recomputed by the widget
    return digits[:EAN13_DATA_DIGITS]


def render_barcode(kind: BarcodeType, payload: str) -> Optional[Image.Image]:
    """
    Draw one barcode.

    Args:
        kind: EAN-13 or QR Code; NONE draws nothing
        payload: ISBN/EAN digits for EAN-13 (separators are ignored),
            any text (usually the item link) for QR codes

    Returns:
        Barcode image, or None when there is nothing to draw or the
        payload cannot be encoded as the requested type

    Example:
        >>> image = render_barcode(BarcodeType.EAN13, "978-0-14-103614-4")
        >>> image.width > image.height
        True
    """
    kind = BarcodeType(kind)
    if kind is BarcodeType.NONE or not payload:
        return None

    if kind is BarcodeType.EAN13:
        digits = _ean13_digits(payload)
        if digits is None:
            logger.debug(f"Cannot encode {payload!r} as EAN-13")
            return None
        widget = Ean13BarcodeWidget(digits, humanReadable=False)
    else:
        widget = QrCodeWidget(payload)

    return _paint(widget.draw())
