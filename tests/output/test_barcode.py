"""
Unit tests for barcode images drawn from reportlab's barcode widgets.
"""

import pytest

from catalogue_pager.core.models import BarcodeType
from catalogue_pager.output import render_barcode


def _dark_pixels(image):
    return sum(count for count, colour in image.getcolors(maxcolors=1 << 16) if colour == (0, 0, 0))


class TestRenderBarcode:

    def test_when_ean13_isbn_then_wide_image_with_bars(self):
        image = render_barcode(BarcodeType.EAN13, "978-0-14-103614-4")

        assert image is not None
        assert image.mode == "RGB"
        assert image.width > image.height
        assert _dark_pixels(image) > 0
        # Quiet zone on the left stays white
        assert image.getpixel((0, image.height // 2)) == (255, 255, 255)

    def test_when_qr_code_then_square_image_with_modules(self):
        image = render_barcode(BarcodeType.QR_CODE, "https://shop.example/products/item-0")

        assert image is not None
        assert abs(image.width - image.height) <= 1
        assert _dark_pixels(image) > 0

    def test_when_same_payload_then_same_symbol(self):
        first = render_barcode(BarcodeType.EAN13, "9780000000001")
        second = render_barcode(BarcodeType.EAN13, "9780000000001")

        assert first.tobytes() == second.tobytes()

    @pytest.mark.parametrize(
        "kind, payload",
        [
            (BarcodeType.NONE, "9780000000001"),
            (BarcodeType.EAN13, ""),
            (BarcodeType.EAN13, "12-34"),
            (BarcodeType.QR_CODE, ""),
        ],
    )
    def test_when_nothing_to_encode_then_none(self, kind, payload):
        assert render_barcode(kind, payload) is None
