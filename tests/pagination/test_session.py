"""
Unit tests for the interactive reorder session.
"""

import pytest

from catalogue_pager.config import CatalogueConfig, UrlPageSlot, load_catalogue, save_catalogue
from catalogue_pager.core.models import (
    FooterNote,
    ItemOverrides,
    ItemPage,
    LayoutOverride,
    LayoutTag,
    OverrideKind,
    SummaryPage,
    SummaryView,
    UrlPage,
)
from catalogue_pager.pagination import ReorderSession, build_sequence


@pytest.fixture
def session(catalogue_factory):
    """Five items, item 4 on its own page, URL page after the first page."""
    catalogue = catalogue_factory(5, ItemOverrides(layouts={4: "1-up"}))
    config = CatalogueConfig(
        default_layout="4-up",
        url_pages=(UrlPageSlot("https://shop.example/sale", "Sale", page_index=1),),
    )
    return ReorderSession(catalogue, config)


class TestBuildSequence:

    def test_when_config_then_groups_and_synthetic_pages(self, catalogue_factory):
        catalogue = catalogue_factory(6)
        config = CatalogueConfig(
            default_layout=4,
            url_pages=(UrlPageSlot("https://a.example", page_index=1),),
            summary_view="list",
        )

        sequence = build_sequence(catalogue, config)

        assert sequence == [
            ItemPage((0, 1, 2, 3), "4-up"),
            UrlPage(0, "https://a.example"),
            ItemPage((4, 5), "4-up"),
            SummaryPage(SummaryView.LIST),
        ]


class TestReorderSession:

    def test_init_when_built_then_preview_matches_config(self, session):
        assert session.sequence == (
            ItemPage((0, 1, 2, 3), "4-up"),
            UrlPage(0, "https://shop.example/sale", "Sale"),
            ItemPage((4,), "1-up"),
        )
        assert not session.has_pending_moves

    def test_move_page_when_out_of_range_then_false(self, session):
        assert session.move_page(0, -1) is False
        assert session.move_page(2, 1) is False
        assert not session.has_pending_moves

    def test_snapshot_when_session_moves_later_then_unaffected(self, session):
        # Arrange
        snapshot = session.snapshot()

        # Act
        session.move_page(1, 1)

        # Assert
        assert isinstance(snapshot[1], UrlPage)
        assert isinstance(session.sequence[1], ItemPage)

    def test_commit_when_item_page_moved_then_items_and_overrides_follow(self, session):
        # Arrange: bring item 4's page to the front
        session.move_page(2, -1)
        session.move_page(1, -1)

        # Act
        committed = session.commit()

        # Assert
        identifiers = [item.identifier for item in committed.catalogue.items]
        assert identifiers == ["item-4", "item-0", "item-1", "item-2", "item-3"]
        assert committed.catalogue.overrides.layouts == {0: LayoutTag.ONE_UP}
        assert committed.config.url_pages[0].page_index == 2
        assert not session.has_pending_moves

    def test_commit_when_url_page_moved_then_position_persisted(self, session):
        session.move_page(1, -1)

        committed = session.commit()

        assert committed.result.is_identity
        assert committed.config.url_pages[0].page_index == 0
        assert isinstance(session.sequence[0], UrlPage)

    def test_commit_when_rebuilt_then_preview_reproduces_committed_order(self, session):
        session.move_page(2, -1)
        session.move_page(1, -1)
        expected = [type(g) for g in session.sequence]

        session.commit()

        assert [type(g) for g in session.sequence] == expected

    def test_commit_when_url_pages_share_anchor_and_swapped_then_swap_kept(self, catalogue_factory):
        # Arrange: two URL pages both after the first of two 1-up pages
        config = CatalogueConfig(
            default_layout="1-up",
            url_pages=(
                UrlPageSlot("https://a.example", page_index=1),
                UrlPageSlot("https://b.example", page_index=1),
            ),
        )
        session = ReorderSession(catalogue_factory(2), config)

        # Act
        assert session.move_page(2, -1) is True
        committed = session.commit()

        # Assert
        assert [getattr(g, "source_index", None) for g in session.sequence] == [None, 1, 0, None]
        assert [s.page_index for s in committed.config.url_pages] == [1, 1]
        assert [s.order for s in committed.config.url_pages] == [1, 0]

    def test_commit_when_swapped_url_pages_saved_then_reload_keeps_order(self, catalogue_factory, tmp_path):
        config = CatalogueConfig(
            default_layout="1-up",
            url_pages=(
                UrlPageSlot("https://a.example", page_index=1),
                UrlPageSlot("https://b.example", page_index=1),
            ),
        )
        session = ReorderSession(catalogue_factory(2), config)
        session.move_page(2, -1)
        committed = session.commit()
        path = tmp_path / "catalogue.json"

        save_catalogue(path, committed.catalogue, committed.config)
        catalogue, reloaded = load_catalogue(path)

        urls = [g.url for g in build_sequence(catalogue, reloaded) if isinstance(g, UrlPage)]
        assert urls == ["https://b.example", "https://a.example"]

    def test_commit_when_summary_last_then_stays_appended(self, catalogue_factory):
        config = CatalogueConfig(summary_view="table")
        session = ReorderSession(catalogue_factory(3), config)

        committed = session.commit()

        assert committed.config.summary_index is None

    def test_commit_when_summary_moved_then_index_persisted(self, catalogue_factory):
        config = CatalogueConfig(default_layout="1-up", summary_view="table")
        session = ReorderSession(catalogue_factory(3), config)

        session.move_page(3, -1)
        committed = session.commit()

        assert committed.config.summary_index == 2
        assert isinstance(session.sequence[2], SummaryPage)


class TestPerItemEdits:

    def test_set_override_when_layout_then_preview_regrouped(self, session):
        session.set_override(LayoutOverride(0, LayoutTag.ONE_UP))

        assert session.sequence[0] == ItemPage((0,), "1-up")
        assert session.catalogue.overrides.layouts == {0: LayoutTag.ONE_UP, 4: LayoutTag.ONE_UP}

    def test_set_override_when_pending_moves_then_discarded(self, session):
        session.move_page(1, -1)

        session.set_override(FooterNote(2, "Last copies"))

        assert not session.has_pending_moves
        assert isinstance(session.sequence[1], UrlPage)

    def test_set_override_when_index_missing_then_ignored(self, session):
        before = session.catalogue

        session.set_override(FooterNote(9, "nope"))

        assert session.catalogue is before

    def test_clear_override_when_set_then_removed(self, session):
        session.clear_override(OverrideKind.LAYOUT, 4)

        assert session.catalogue.overrides.layouts == {}
        assert session.sequence[-1] == ItemPage((4,), "4-up")

    def test_move_item_when_in_range_then_overrides_follow(self, session):
        moved = session.move_item(4, -1)

        assert moved is True
        assert session.catalogue.items[3].identifier == "item-4"
        assert session.catalogue.overrides.layouts == {3: LayoutTag.ONE_UP}

    def test_move_item_when_out_of_range_then_false(self, session):
        assert session.move_item(0, -1) is False
        assert session.move_item(4, 1) is False
