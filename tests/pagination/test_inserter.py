"""
Unit tests for splicing URL pages and the summary page into item pages.
"""

from catalogue_pager.core.models import (
    ItemPage,
    SummaryPage,
    SummaryView,
    UrlPage,
    UrlPageRequest,
)
from catalogue_pager.pagination import insert_synthetic_pages


def _groups(count):
    return [ItemPage((i,), "1-up") for i in range(count)]


def _kinds(sequence):
    out = []
    for g in sequence:
        if isinstance(g, ItemPage):
            out.append(f"i{g.indices[0]}")
        elif isinstance(g, UrlPage):
            out.append(f"u{g.source_index}")
        else:
            out.append("s")
    return out


class TestUrlPages:

    def test_when_no_requests_then_groups_unchanged(self):
        groups = _groups(3)

        assert insert_synthetic_pages(groups) == groups

    def test_when_page_index_then_after_that_many_item_pages(self):
        sequence = insert_synthetic_pages(
            _groups(3), [UrlPageRequest(0, "https://a.example", page_index=1)]
        )

        assert _kinds(sequence) == ["i0", "u0", "i1", "i2"]

    def test_when_index_beyond_end_then_clamped_to_end(self):
        sequence = insert_synthetic_pages(
            _groups(2), [UrlPageRequest(0, "https://a.example", page_index=99)]
        )

        assert _kinds(sequence) == ["i0", "i1", "u0"]

    def test_when_several_requests_then_relative_to_item_pages(self):
        # Arrange: given out of order, indices refer to the original item pages
        requests = [
            UrlPageRequest(0, "https://a.example", page_index=3),
            UrlPageRequest(1, "https://b.example", page_index=0),
            UrlPageRequest(2, "https://c.example", page_index=1),
        ]

        # Act
        sequence = insert_synthetic_pages(_groups(3), requests)

        # Assert
        assert _kinds(sequence) == ["u1", "i0", "u2", "i1", "i2", "u0"]

    def test_when_equal_index_then_ascending_slot_order(self):
        requests = [
            UrlPageRequest(3, "https://d.example", page_index=1),
            UrlPageRequest(1, "https://b.example", page_index=1),
        ]

        sequence = insert_synthetic_pages(_groups(2), requests)

        assert _kinds(sequence) == ["i0", "u1", "u3", "i1"]

    def test_when_equal_index_and_order_set_then_order_wins(self):
        requests = [
            UrlPageRequest(0, "https://a.example", page_index=1, order=1),
            UrlPageRequest(1, "https://b.example", page_index=1, order=0),
            # Clamped to the end, so it shares no position with the others
            UrlPageRequest(2, "https://c.example", page_index=9, order=0),
        ]

        sequence = insert_synthetic_pages(_groups(2), requests)

        assert _kinds(sequence) == ["i0", "u1", "u0", "i1", "u2"]

    def test_when_unplaced_or_blank_then_ignored(self):
        requests = [
            UrlPageRequest(0, "https://a.example", page_index=None),
            UrlPageRequest(1, "   ", page_index=0),
        ]

        assert _kinds(insert_synthetic_pages(_groups(2), requests)) == ["i0", "i1"]

    def test_when_title_given_then_carried(self):
        sequence = insert_synthetic_pages(
            _groups(1), [UrlPageRequest(2, "https://a.example", "Visit us", page_index=0)]
        )

        assert sequence[0] == UrlPage(source_index=2, url="https://a.example", title="Visit us")


class TestSummaryPage:

    def test_when_requested_without_index_then_last(self):
        sequence = insert_synthetic_pages(
            _groups(2),
            [UrlPageRequest(0, "https://a.example", page_index=5)],
            summary_view=SummaryView.TABLE,
        )

        assert _kinds(sequence) == ["i0", "i1", "u0", "s"]
        assert sequence[-1] == SummaryPage(view=SummaryView.TABLE)

    def test_when_index_given_then_absolute_position(self):
        sequence = insert_synthetic_pages(
            _groups(3),
            [UrlPageRequest(0, "https://a.example", page_index=0)],
            summary_view="compact-list",
            summary_index=1,
        )

        assert _kinds(sequence) == ["u0", "s", "i0", "i1", "i2"]

    def test_when_index_beyond_end_then_clamped(self):
        sequence = insert_synthetic_pages(_groups(1), summary_view="list", summary_index=40)

        assert _kinds(sequence) == ["i0", "s"]

    def test_when_no_view_then_no_summary(self):
        sequence = insert_synthetic_pages(_groups(1), summary_view=None, summary_index=0)

        assert _kinds(sequence) == ["i0"]

    def test_when_only_synthetic_pages_then_still_produced(self):
        sequence = insert_synthetic_pages(
            [], [UrlPageRequest(0, "https://a.example", page_index=4)], summary_view="list"
        )

        assert _kinds(sequence) == ["u0", "s"]
