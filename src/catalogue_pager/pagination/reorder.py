"""
Module: pagination.reorder

Purpose:
    Turn an operator-reordered page sequence back into a canonical item
    order, re-key every override map so overrides follow their items, and
    record where the synthetic pages ended up.

Key Functions:
    - apply_page_order(): Flatten a reordered sequence (main entry point)
    - move_page(): Swap a page with its neighbour
    - invert_order(): Inverse of a new-to-old index mapping

Key Classes:
    - ReorderResult: Output of apply_page_order()
    - PageSequenceError: Sequence does not partition the item list

Dependencies:
    - core.models: pages, ItemOverrides

Used By:
    - pagination.session: Commit of a reorder session
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Generic, List, Optional, Sequence, Tuple, TypeVar

from catalogue_pager.core.models import (
    ItemOverrides,
    ItemPage,
    PageGroup,
    SummaryPage,
    SummaryView,
    UrlPage,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


class PageSequenceError(ValueError):
    """Item pages do not cover every item exactly once."""
    pass


@dataclass(frozen=True)
class ReorderResult(Generic[T]):
    """
    Outcome of applying a page order (immutable).

    Attributes:
        item_order: Old index of the item now at each position
        items: Items in their new order
        overrides: Override maps re-keyed to the new order
        url_page_positions: URL page slot -> absolute page position
        url_page_anchors: URL page slot -> number of item pages before it,
            the value to persist as the slot's page_index
        url_page_order: URL page slot -> rank among the URL pages, in
            sequence order; persisted to keep pages that share an anchor
            in their committed order
        summary_page_index: Absolute position of the summary page, if any
        summary_view: View of the summary page, if any
    """

    item_order: Tuple[int, ...]
    items: Tuple[T, ...]
    overrides: ItemOverrides
    url_page_positions: Dict[int, int] = field(default_factory=dict)
    url_page_anchors: Dict[int, int] = field(default_factory=dict)
    url_page_order: Dict[int, int] = field(default_factory=dict)
    summary_page_index: Optional[int] = None
    summary_view: Optional[SummaryView] = None

    @property
    def is_identity(self) -> bool:
        return self.item_order == tuple(range(len(self.item_order)))


def apply_page_order(
    sequence: Sequence[PageGroup],
    items: Sequence[T],
    overrides: ItemOverrides,
) -> ReorderResult[T]:
    """
    Apply a (possibly reordered) page sequence.

    Walks the sequence once. Item pages contribute their indices, in
    their existing order, to the flat old-index list; URL pages and the
    summary page record their positions instead.

    Args:
        sequence: Page sequence, typically after move_page() calls
        items: Items in their current order
        overrides: Override maps keyed by current index

    Returns:
        ReorderResult with the new item order and re-keyed overrides

    Raises:
        PageSequenceError: If the item pages are not a permutation of
            0..len(items)-1 (missing, duplicated or unknown indices)

    Example:
        >>> result = apply_page_order([ItemPage((1,), "1-up"), ItemPage((0,), "1-up")],
        ...                           ["a", "b"], ItemOverrides())
        >>> result.items
        ('b', 'a')
    """
    flat_old_indices: List[int] = []
    url_positions: Dict[int, int] = {}
    url_anchors: Dict[int, int] = {}
    url_order: Dict[int, int] = {}
    summary_index: Optional[int] = None
    summary_view: Optional[SummaryView] = None
    item_pages_seen = 0

    for position, group in enumerate(sequence):
        if isinstance(group, ItemPage):
            flat_old_indices.extend(group.indices)
            item_pages_seen += 1
        elif isinstance(group, UrlPage):
            url_positions[group.source_index] = position
            url_anchors[group.source_index] = item_pages_seen
            url_order[group.source_index] = len(url_order)
        elif isinstance(group, SummaryPage):
            if summary_index is not None:
                raise PageSequenceError(
                    f"Sequence holds more than one summary page "
                    f"(positions {summary_index} and {position})"
                )
            summary_index = position
            summary_view = group.view
        else:
            raise PageSequenceError(f"Unknown page group: {group!r}")

    _check_permutation(flat_old_indices, len(items))

    new_items = tuple(items[old] for old in flat_old_indices)
    new_overrides = overrides.remap(flat_old_indices)

    logger.debug(
        f"Applied page order over {len(sequence)} pages: "
        f"{len(url_positions)} URL pages, summary at {summary_index}"
    )
    return ReorderResult(
        item_order=tuple(flat_old_indices),
        items=new_items,
        overrides=new_overrides,
        url_page_positions=url_positions,
        url_page_anchors=url_anchors,
        url_page_order=url_order,
        summary_page_index=summary_index,
        summary_view=summary_view,
    )


def _check_permutation(order: Sequence[int], item_count: int) -> None:
    if len(order) == item_count and sorted(order) == list(range(item_count)):
        return
    seen: set[int] = set()
    duplicates: set[int] = set()
    for i in order:
        if i in seen:
            duplicates.add(i)
        seen.add(i)
    duplicated = sorted(duplicates)
    missing = sorted(set(range(item_count)) - seen)
    unknown = sorted(i for i in seen if not 0 <= i < item_count)
    raise PageSequenceError(
        f"Item pages do not cover {item_count} items exactly once "
        f"(missing={missing}, duplicated={duplicated}, unknown={unknown})"
    )


def move_page(sequence: Sequence[PageGroup], index: int, direction: int) -> List[PageGroup]:
    """
    Swap the page at `index` with its neighbour.

    Out-of-range moves are not errors: the sequence comes back unchanged
    (as a new list).

    Args:
        sequence: Current page sequence
        index: Position of the page to move
        direction: -1 to move up, +1 to move down

    Returns:
        New page sequence
    """
    moved = list(sequence)
    target = index + direction
    if direction not in (-1, 1) or not (0 <= index < len(moved) and 0 <= target < len(moved)):
        logger.debug(f"Ignored out-of-range page move {index} -> {target}")
        return moved
    moved[index], moved[target] = moved[target], moved[index]
    return moved


def invert_order(order: Sequence[int]) -> Tuple[int, ...]:
    """
    Inverse permutation of a new-to-old mapping.

    If `order[j]` is the old index at new position j, the result maps
    each old index back: `inverse[order[j]] == j`.
    """
    inverse = [0] * len(order)
    for new_index, old_index in enumerate(order):
        inverse[old_index] = new_index
    return tuple(inverse)
