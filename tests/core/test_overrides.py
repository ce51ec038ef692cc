"""
Unit tests for per-item override maps.
"""

import pytest

from catalogue_pager.core.models import (
    BarcodeOverride,
    BarcodeType,
    BioToggle,
    FooterNote,
    InternalsCount,
    ItemOverrides,
    LayoutOverride,
    LayoutTag,
    OverrideKind,
    OverrideMismatchError,
)


class TestItemOverridesConstruction:

    def test_init_when_string_keys_then_normalised_to_int(self):
        overrides = ItemOverrides(layouts={"3": "1-up"}, author_bio={"0": "true"})

        assert overrides.layouts == {3: LayoutTag.ONE_UP}
        assert overrides.author_bio == {0: True}

    def test_init_when_negative_key_then_raises(self):
        with pytest.raises(OverrideMismatchError):
            ItemOverrides(footer_notes={-1: "note"})

    def test_init_when_internals_count_out_of_range_then_raises(self):
        with pytest.raises(ValueError):
            ItemOverrides(internals_count={0: 5})

    def test_init_when_barcode_value_then_coerced_to_enum(self):
        overrides = ItemOverrides(barcodes={1: "QR Code"})

        assert overrides.get(OverrideKind.BARCODE, 1) is BarcodeType.QR_CODE


class TestItemOverridesEdits:

    def test_with_override_when_set_then_original_unchanged(self):
        # Arrange
        original = ItemOverrides()

        # Act
        updated = original.with_override(LayoutOverride(2, LayoutTag.EIGHT_UP))

        # Assert
        assert original.is_empty()
        assert updated.layouts == {2: LayoutTag.EIGHT_UP}

    def test_with_override_when_each_kind_then_lands_in_its_map(self):
        overrides = (
            ItemOverrides()
            .with_override(BarcodeOverride(0, BarcodeType.EAN13))
            .with_override(BioToggle(1, True))
            .with_override(FooterNote(2, "Signed copy"))
            .with_override(InternalsCount(3, 4))
        )

        assert overrides.barcodes == {0: BarcodeType.EAN13}
        assert overrides.author_bio == {1: True}
        assert overrides.footer_notes == {2: "Signed copy"}
        assert overrides.internals_count == {3: 4}
        assert overrides.max_index() == 3

    def test_without_override_when_absent_then_same_instance(self):
        overrides = ItemOverrides(footer_notes={1: "x"})

        assert overrides.without_override(OverrideKind.FOOTER_NOTE, 5) is overrides
        assert overrides.without_override(OverrideKind.FOOTER_NOTE, 1).footer_notes == {}

    def test_validate_when_key_beyond_items_then_raises(self):
        overrides = ItemOverrides(layouts={4: "1-up"})

        overrides.validate(5)
        with pytest.raises(OverrideMismatchError, match="layouts"):
            overrides.validate(4)


class TestRemap:
    """Overrides follow their item through a permutation."""

    def test_remap_when_permutation_then_value_follows_item(self):
        # Arrange: item 4 has a 1-up override, item 0 a footer note
        overrides = ItemOverrides(layouts={4: "1-up"}, footer_notes={0: "first"})
        order = [4, 0, 1, 2, 3]  # item 4 moves to the front

        # Act
        remapped = overrides.remap(order)

        # Assert
        assert remapped.layouts == {0: LayoutTag.ONE_UP}
        assert remapped.footer_notes == {1: "first"}

    def test_remap_when_identity_then_unchanged(self):
        overrides = ItemOverrides(layouts={1: "2-up"}, author_bio={2: True})

        assert overrides.remap([0, 1, 2]) == overrides


class TestSerialization:

    def test_to_dict_when_values_then_json_friendly(self):
        overrides = ItemOverrides(layouts={2: "1L"}, barcodes={0: "EAN-13"})

        assert overrides.to_dict() == {
            "layouts": {"2": "1L"},
            "barcodes": {"0": "EAN-13"},
        }

    def test_from_dict_when_round_tripped_then_equal(self):
        overrides = ItemOverrides(layouts={2: "1L"}, internals_count={2: 3})

        assert ItemOverrides.from_dict(overrides.to_dict()) == overrides

    def test_from_dict_when_unknown_kind_then_raises(self):
        with pytest.raises(ValueError, match="Unknown override kinds"):
            ItemOverrides.from_dict({"colours": {"0": "red"}})
