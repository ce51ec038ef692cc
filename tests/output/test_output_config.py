"""
Unit tests for output configuration.
"""

import pytest

from catalogue_pager.output import OutputConfig
from catalogue_pager.output.config import A4_HEIGHT_PT, A4_WIDTH_PT


class TestOutputConfig:

    def test_defaults_when_created_then_a4_at_double_upscale(self):
        config = OutputConfig()

        assert config.bitmap_size == (1588, 2246)
        assert (config.output_width_pt, config.output_height_pt) == (A4_WIDTH_PT, A4_HEIGHT_PT)
        assert config.max_workers == 1
        assert config.content_top_px == config.margin_px + config.header_height_px

    def test_image_format_when_lowercase_then_normalised(self):
        assert OutputConfig(image_format="png").image_format == "PNG"

    @pytest.mark.parametrize(
        "kwargs, message",
        [
            ({"upscale": 0}, "upscale"),
            ({"max_workers": 0}, "max_workers"),
            ({"image_format": "TIFF"}, "image_format"),
            ({"jpeg_quality": 101}, "jpeg_quality"),
            ({"margin_px": 400}, "Margins exceed page"),
            ({"output_width_pt": -1}, "output page size"),
            ({"upscale": "2"}, "upscale must be a number"),
            ({"max_workers": 2.0}, "max_workers must be an integer"),
            ({"jpeg_quality": True}, "jpeg_quality must be an integer"),
            ({"image_format": None}, "image_format must be a string"),
        ],
    )
    def test_init_when_invalid_then_raises(self, kwargs, message):
        with pytest.raises(ValueError, match=message):
            OutputConfig(**kwargs)

    def test_from_dict_when_round_tripped_then_equal(self):
        config = OutputConfig(upscale=1.5, max_workers=3, image_format="PNG")

        assert OutputConfig.from_dict(config.to_dict()) == config
