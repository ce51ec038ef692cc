"""
Module: pagination.session

Purpose:
    Operator-facing editing session. Holds the committed catalogue and
    configuration plus the page sequence being previewed, applies page
    moves and per-item edits, and commits a reordered sequence back into
    a new item order, re-keyed overrides and persisted page positions.

Key Functions:
    - build_sequence(): Items + overrides + config -> full page sequence

Key Classes:
    - ReorderSession: Mutable editing session
    - SessionCommit: Result of ReorderSession.commit()

Dependencies:
    - pagination.grouper, pagination.inserter, pagination.reorder
    - config: CatalogueConfig

Used By:
    - controller: build_sequence()
    - cli: preview command
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import List, Tuple

from catalogue_pager.config import CatalogueConfig
from catalogue_pager.core.models import (
    Catalogue,
    Item,
    ItemOverrides,
    OverrideKind,
    PageGroup,
)
from catalogue_pager.core.models.overrides import Override

from .grouper import build_page_groups
from .inserter import insert_synthetic_pages
from .reorder import ReorderResult, apply_page_order, move_page

logger = logging.getLogger(__name__)


def build_sequence(catalogue: Catalogue, config: CatalogueConfig) -> List[PageGroup]:
    """
    Derive the full page sequence.

    Args:
        catalogue: Items and overrides
        config: Default layout, URL page slots and summary request

    Returns:
        Item pages with URL pages and the summary page spliced in
    """
    groups = build_page_groups(
        catalogue.items,
        config.default_layout,
        catalogue.overrides.layouts,
    )
    return insert_synthetic_pages(
        groups,
        config.url_page_requests(),
        summary_view=config.summary_view,
        summary_index=config.summary_index,
    )


@dataclass(frozen=True)
class SessionCommit:
    """
    Committed state after a reorder.

    Attributes:
        catalogue: Items in their new order with re-keyed overrides
        config: Configuration with persisted URL page / summary positions
        result: Raw reorder result (positions, item order)
    """

    catalogue: Catalogue
    config: CatalogueConfig
    result: ReorderResult[Item]


class ReorderSession:
    """
    Editing session over one catalogue.

    The preview sequence is derived from the committed state and then
    edited with move_page(). Per-item edits (overrides, item moves) change
    the committed state directly and re-derive the preview, discarding
    page moves that were not committed.

    Rendering should always work from snapshot(), never from the live
    session.

    Example:
        >>> session = ReorderSession(catalogue, config)
        >>> session.move_page(1, -1)
        True
        >>> committed = session.commit()
        >>> committed.catalogue.items[0].identifier
        'item-4'
    """

    def __init__(self, catalogue: Catalogue, config: CatalogueConfig) -> None:
        self._catalogue = catalogue
        self._config = config
        self._sequence: List[PageGroup] = build_sequence(catalogue, config)
        self._dirty = False

    # ─────────────────────────────────────────────────────────────────────────
    # State
    # ─────────────────────────────────────────────────────────────────────────

    @property
    def catalogue(self) -> Catalogue:
        return self._catalogue

    @property
    def config(self) -> CatalogueConfig:
        return self._config

    @property
    def sequence(self) -> Tuple[PageGroup, ...]:
        return tuple(self._sequence)

    @property
    def has_pending_moves(self) -> bool:
        return self._dirty

    def snapshot(self) -> Tuple[PageGroup, ...]:
        """Immutable copy of the preview sequence for rendering."""
        return tuple(self._sequence)

    # ─────────────────────────────────────────────────────────────────────────
    # Page moves
    # ─────────────────────────────────────────────────────────────────────────

    def move_page(self, index: int, direction: int) -> bool:
        """
        Move one page up (-1) or down (+1).

        Returns:
            True if the page moved, False for an out-of-range move
        """
        moved = move_page(self._sequence, index, direction)
        if moved == self._sequence:
            return False
        self._sequence = moved
        self._dirty = True
        return True

    def reset(self) -> None:
        """Drop uncommitted page moves."""
        self._sequence = build_sequence(self._catalogue, self._config)
        self._dirty = False

    def commit(self) -> SessionCommit:
        """
        Apply the previewed page order.

        The new item order and overrides replace the committed catalogue;
        URL page anchors, their relative order and the summary position
        are written back into the configuration. The preview is re-derived
        from the new state.

        Raises:
            PageSequenceError: If the preview no longer covers every item
        """
        result = apply_page_order(self._sequence, self._catalogue.items, self._catalogue.overrides)
        catalogue = Catalogue(items=result.items, overrides=result.overrides)
        config = self._config.with_positions(
            result.url_page_anchors,
            self._summary_position(result),
            result.url_page_order,
        )

        logger.info(
            f"Committed page order: {len(result.items)} items, "
            f"{len(result.url_page_positions)} URL pages"
            f"{'' if result.is_identity else ' (items reordered)'}"
        )
        self._catalogue = catalogue
        self._config = config
        self.reset()
        return SessionCommit(catalogue=catalogue, config=config, result=result)

    def _summary_position(self, result: ReorderResult[Item]) -> int | None:
        if result.summary_page_index is None:
            return None
        # Appended at the end stays "appended" so later pages still precede it
        if result.summary_page_index == len(self._sequence) - 1:
            return None
        return result.summary_page_index

    # ─────────────────────────────────────────────────────────────────────────
    # Per-item edits
    # ─────────────────────────────────────────────────────────────────────────

    def set_override(self, override: Override) -> None:
        """Set one per-item override on the committed catalogue."""
        if not 0 <= override.index < len(self._catalogue.items):
            logger.debug(f"Ignored override for missing item {override.index}")
            return
        self._replace_overrides(self._catalogue.overrides.with_override(override))

    def clear_override(self, kind: OverrideKind, index: int) -> None:
        """Clear one per-item override (no-op if unset)."""
        self._replace_overrides(self._catalogue.overrides.without_override(kind, index))

    def move_item(self, index: int, direction: int) -> bool:
        """
        Swap an item with its neighbour, carrying its overrides along.

        Returns:
            True if the item moved, False for an out-of-range move
        """
        count = len(self._catalogue.items)
        target = index + direction
        if direction not in (-1, 1) or not (0 <= index < count and 0 <= target < count):
            return False
        order = list(range(count))
        order[index], order[target] = order[target], order[index]
        items = tuple(self._catalogue.items[i] for i in order)
        overrides = self._catalogue.overrides.remap(order)
        self._catalogue = Catalogue(items=items, overrides=overrides)
        self.reset()
        return True

    def _replace_overrides(self, overrides: ItemOverrides) -> None:
        if self._dirty:
            logger.debug("Per-item edit discards uncommitted page moves")
        self._catalogue = replace(self._catalogue, overrides=overrides)
        self.reset()
