"""
Unit tests for applying a reordered page sequence.
"""

import pytest

from catalogue_pager.core.models import (
    ItemOverrides,
    ItemPage,
    LayoutTag,
    SummaryPage,
    SummaryView,
    UrlPage,
)
from catalogue_pager.pagination import (
    PageSequenceError,
    apply_page_order,
    build_page_groups,
    invert_order,
    move_page,
)


ITEMS = ("a", "b", "c", "d", "e")


class TestApplyPageOrder:

    def test_when_identity_then_items_and_overrides_unchanged(self):
        # Arrange
        overrides = ItemOverrides(layouts={4: "1-up"}, footer_notes={1: "note"})
        sequence = build_page_groups(ITEMS, "4-up", overrides.layouts)

        # Act
        result = apply_page_order(sequence, ITEMS, overrides)

        # Assert
        assert result.is_identity
        assert result.items == ITEMS
        assert result.overrides == overrides

    def test_when_pages_swapped_then_overrides_follow_items(self):
        # Arrange: [0,1,2,3] 4-up then [4] 1-up; move the 1-up page first
        overrides = ItemOverrides(layouts={4: "1-up"})
        sequence = build_page_groups(ITEMS, "4-up", overrides.layouts)
        moved = move_page(sequence, 1, -1)

        # Act
        result = apply_page_order(moved, ITEMS, overrides)

        # Assert
        assert result.item_order == (4, 0, 1, 2, 3)
        assert result.items == ("e", "a", "b", "c", "d")
        assert result.overrides.layouts == {0: LayoutTag.ONE_UP}

    def test_when_reordered_then_each_override_value_travels(self):
        overrides = ItemOverrides(
            barcodes={0: "EAN-13"},
            author_bio={2: True},
            footer_notes={3: "Signed"},
        )
        sequence = [ItemPage((3, 2), "2-up"), ItemPage((4,), "1-up"), ItemPage((0, 1), "2-up")]

        result = apply_page_order(sequence, ITEMS, overrides)

        # M'[j] = M[order[j]]
        for new_index, old_index in enumerate(result.item_order):
            for kind_map, new_map in (
                (overrides.barcodes, result.overrides.barcodes),
                (overrides.author_bio, result.overrides.author_bio),
                (overrides.footer_notes, result.overrides.footer_notes),
            ):
                assert new_map.get(new_index) == kind_map.get(old_index)

    def test_when_synthetic_pages_then_positions_recorded(self):
        sequence = [
            UrlPage(1, "https://b.example"),
            ItemPage((0, 1), "2-up"),
            SummaryPage(SummaryView.TABLE),
            ItemPage((2, 3, 4), "3-up"),
            UrlPage(0, "https://a.example"),
        ]

        result = apply_page_order(sequence, ITEMS, ItemOverrides())

        assert result.url_page_positions == {1: 0, 0: 4}
        assert result.url_page_anchors == {1: 0, 0: 2}
        assert result.summary_page_index == 2
        assert result.summary_view is SummaryView.TABLE
        assert result.is_identity

    def test_when_item_missing_then_raises(self):
        sequence = [ItemPage((0, 1, 2, 3), "4-up")]

        with pytest.raises(PageSequenceError, match=r"missing=\[4\]"):
            apply_page_order(sequence, ITEMS, ItemOverrides())

    def test_when_item_duplicated_then_raises(self):
        sequence = [ItemPage((0, 1, 2, 3), "4-up"), ItemPage((3, 4), "2-up")]

        with pytest.raises(PageSequenceError, match=r"duplicated=\[3\]"):
            apply_page_order(sequence, ITEMS, ItemOverrides())

    def test_when_unknown_index_then_raises(self):
        sequence = [ItemPage((0, 1, 2, 3), "4-up"), ItemPage((4, 7), "2-up")]

        with pytest.raises(PageSequenceError, match=r"unknown=\[7\]"):
            apply_page_order(sequence, ITEMS, ItemOverrides())

    def test_when_two_summary_pages_then_raises(self):
        sequence = [SummaryPage(), ItemPage((0, 1, 2, 3), "4-up"), ItemPage((4,), "1-up"), SummaryPage()]

        with pytest.raises(PageSequenceError, match="summary"):
            apply_page_order(sequence, ITEMS, ItemOverrides())


class TestMovePage:

    def test_when_in_range_then_swaps_neighbours(self):
        sequence = ["p0", "p1", "p2"]

        assert move_page(sequence, 1, 1) == ["p0", "p2", "p1"]
        assert move_page(sequence, 1, -1) == ["p1", "p0", "p2"]
        assert sequence == ["p0", "p1", "p2"]

    @pytest.mark.parametrize("index, direction", [(0, -1), (2, 1), (5, -1), (-1, 1), (1, 2), (1, 0)])
    def test_when_out_of_range_then_unchanged(self, index, direction):
        sequence = ["p0", "p1", "p2"]

        assert move_page(sequence, index, direction) == sequence


class TestInvertOrder:

    def test_when_inverted_then_maps_old_to_new(self):
        order = (4, 0, 1, 2, 3)

        inverse = invert_order(order)

        assert inverse == (1, 2, 3, 4, 0)
        assert all(inverse[old] == new for new, old in enumerate(order))

    def test_when_reorder_inverted_then_original_order_and_overrides_restored(self):
        # Arrange: reorder, then regroup the reordered catalogue
        items = tuple(f"item-{i}" for i in range(7))
        overrides = ItemOverrides(
            layouts={2: "1-up", 6: "2-up"},
            barcodes={0: "QR Code", 5: "EAN-13"},
            author_bio={3: True},
            footer_notes={1: "Signed"},
            internals_count={2: 3},
        )
        sequence = build_page_groups(items, "4-up", overrides.layouts)
        moved = move_page(move_page(sequence, 2, -1), 1, -1)
        result = apply_page_order(moved, items, overrides)
        regrouped = build_page_groups(result.items, "4-up", result.overrides.layouts)
        assert sorted(i for g in regrouped for i in g.indices) == list(range(len(items)))

        # Act: one page per item, ordered by the inverse permutation
        inverse = invert_order(result.item_order)
        restore = [ItemPage((inverse[old],), "1-up") for old in range(len(items))]
        restored = apply_page_order(restore, result.items, result.overrides)

        # Assert
        assert not result.is_identity
        assert restored.items == items
        assert restored.overrides == overrides


class TestTenItemScenario:

    ITEMS = tuple(f"item{i}" for i in range(10))

    def test_when_grouped_then_partial_last_page(self):
        groups = build_page_groups(self.ITEMS, "4-up", {4: "1-up"})

        assert groups == [
            ItemPage((0, 1, 2, 3), "4-up"),
            ItemPage((4,), "1-up"),
            ItemPage((5, 6, 7, 8), "4-up"),
            ItemPage((9,), "4-up"),
        ]

    def test_when_one_up_page_moved_first_then_items_and_layout_follow(self):
        # Arrange
        overrides = ItemOverrides(layouts={4: "1-up"})
        groups = build_page_groups(self.ITEMS, "4-up", overrides.layouts)

        # Act
        result = apply_page_order(move_page(groups, 1, -1), self.ITEMS, overrides)

        # Assert
        assert list(result.items) == [
            "item4", "item0", "item1", "item2", "item3",
            "item5", "item6", "item7", "item8", "item9",
        ]
        assert result.overrides.layouts == {0: LayoutTag.ONE_UP}
        assert build_page_groups(result.items, "4-up", result.overrides.layouts) == [
            ItemPage((0,), "1-up"),
            ItemPage((1, 2, 3, 4), "4-up"),
            ItemPage((5, 6, 7, 8), "4-up"),
            ItemPage((9,), "4-up"),
        ]
