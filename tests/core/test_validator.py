"""
Unit tests for catalogue file validation.
"""

import pytest

from catalogue_pager.core.schemas import CATALOGUE_SCHEMA_VERSION, ValidationError, validate_catalogue


def _document(**extra):
    doc = {
        "schema_version": CATALOGUE_SCHEMA_VERSION,
        "items": [
            {"identifier": "a", "display_title": "A"},
            {"handle": "b", "title": "B"},
        ],
    }
    doc.update(extra)
    return doc


class TestValidateCatalogue:

    def test_validate_when_minimal_document_then_passes(self):
        validate_catalogue(_document())

    def test_validate_when_full_settings_then_passes(self):
        validate_catalogue(_document(
            overrides={"layouts": {"1": "1L"}, "internals_count": {"1": 3}},
            settings={
                "default_layout": 4,
                "url_pages": [{"url": "https://a.example", "title": None, "page_index": 0, "order": 1}],
                "summary_view": "table",
                "summary_index": None,
                "page_headers": {"0": "New releases"},
                "utm": {"source": "catalogue"},
                "barcode_type": "EAN-13",
                "footer_text": "Shop Street 1",
                "output": {"upscale": 1.5, "max_workers": 2, "image_format": "png"},
            },
        ))

    def test_validate_when_wrong_version_then_raises(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_catalogue(_document(schema_version=2))

        assert exc_info.value.path == "schema_version"

    def test_validate_when_item_without_identifier_then_raises(self):
        doc = _document()
        doc["items"].append({"title": "No id"})

        with pytest.raises(ValidationError) as exc_info:
            validate_catalogue(doc)

        assert exc_info.value.path.startswith("items.2")

    def test_validate_when_too_many_url_pages_then_raises(self):
        url_pages = [{"url": f"https://{i}.example"} for i in range(5)]

        with pytest.raises(ValidationError):
            validate_catalogue(_document(settings={"url_pages": url_pages}))

    def test_validate_when_unknown_override_kind_then_raises(self):
        with pytest.raises(ValidationError):
            validate_catalogue(_document(overrides={"colours": {"0": "red"}}))

    def test_validate_when_override_beyond_items_then_raises(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_catalogue(_document(overrides={"footer_notes": {"2": "x"}}))

        assert exc_info.value.path == "overrides.footer_notes"

    def test_validate_when_not_an_object_then_raises(self):
        with pytest.raises(ValidationError):
            validate_catalogue([])
