"""
Module: pagination.grouper

Purpose:
    Group an ordered item list into item pages under the per-item
    layout capacity model.

Key Functions:
    - build_page_groups(): Main grouping function
    - effective_layouts(): Layout of every item after overrides

Algorithm:
    Single left-to-right pass:
    1. Effective layout of item i is override[i], else the default
    2. Close the current page when the layout changes or it is full
    3. Append the item to the current page
    A layout change always starts a new page, even if the previous one
    has spare capacity. Pages are never padded.

Dependencies:
    - core.models: LayoutTag, ItemPage, OverrideMismatchError

Used By:
    - pagination.session: Preview sequence
    - controller: Build pipeline
"""

from __future__ import annotations

import logging
from typing import List, Mapping, Sequence, Union

from catalogue_pager.core.models import (
    ItemPage,
    LayoutTag,
    OverrideMismatchError,
)

logger = logging.getLogger(__name__)


def effective_layouts(
    item_count: int,
    default_layout: Union[LayoutTag, str, int],
    layout_overrides: Mapping[int, Union[LayoutTag, str, int]],
) -> List[LayoutTag]:
    """
    Resolve the layout of every item.

    Args:
        item_count: Number of items
        default_layout: Layout for items without an override
        layout_overrides: Sparse index -> layout map

    Returns:
        One LayoutTag per item

    Raises:
        InvalidLayoutTag: If the default or an override is not a layout
        OverrideMismatchError: If an override key is outside 0..item_count-1
    """
    default = LayoutTag.parse(default_layout)
    stray = sorted(i for i in layout_overrides if not 0 <= int(i) < item_count)
    if stray:
        raise OverrideMismatchError(
            f"Layout overrides reference indices {stray} but only "
            f"{item_count} items exist"
        )
    resolved = {int(i): LayoutTag.parse(tag) for i, tag in layout_overrides.items()}
    return [resolved.get(i, default) for i in range(item_count)]


def build_page_groups(
    items: Sequence[object],
    default_layout: Union[LayoutTag, str, int],
    layout_overrides: Mapping[int, Union[LayoutTag, str, int]] | None = None,
) -> List[ItemPage]:
    """
    Arrange items onto item pages.

    Args:
        items: Items in catalogue order (only the length is used)
        default_layout: Layout for items without an override
        layout_overrides: Sparse index -> layout map

    Returns:
        Item pages in order; empty list for no items

    Raises:
        InvalidLayoutTag: If a layout is unknown
        OverrideMismatchError: If an override key is out of range

    Example:
        >>> groups = build_page_groups(range(5), "4-up", {4: "1-up"})
        >>> [g.indices for g in groups]
        [(0, 1, 2, 3), (4,)]
    """
    layouts = effective_layouts(len(items), default_layout, layout_overrides or {})

    groups: List[ItemPage] = []
    current: List[int] = []
    current_layout: LayoutTag | None = None
    remaining = 0

    for i, layout in enumerate(layouts):
        if current and (layout is not current_layout or remaining == 0):
            groups.append(ItemPage(tuple(current), current_layout))
            current = []
        if not current:
            current_layout = layout
            remaining = layout.capacity
        current.append(i)
        remaining -= 1

    if current:
        groups.append(ItemPage(tuple(current), current_layout))

    logger.debug(f"Grouped {len(layouts)} items onto {len(groups)} pages")
    return groups
