"""
Module: core.models.pages

Purpose:
    Page groups: one page's worth of content. A page is either a run
    of items sharing one layout, or a synthetic page (external URL page
    or the appended summary page). A page never mixes both.

Key Classes:
    - ItemPage: Item indices sharing one layout
    - UrlPage: External-URL page from a configuration slot
    - SummaryPage: Appended summary view (list / compact list / table)
    - SummaryView: Summary page styles
    - UrlPageRequest: Caller request to place a URL page

Key Functions:
    - is_synthetic(): True for URL and summary pages
    - flatten_item_indices(): Item indices in page order
    - describe_sequence(): Human-readable one-line-per-page summary

Dependencies:
    - core.models.layouts: LayoutTag, capacity

Used By:
    - pagination: Builds, inserts and reorders page groups
    - output.renderer: Renders each group
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional, Sequence, Union

from .layouts import LayoutTag


class SummaryView(str, Enum):
    LIST = "list"
    COMPACT_LIST = "compact-list"
    TABLE = "table"


@dataclass(frozen=True, slots=True)
class ItemPage:
    """
    A page of real items (immutable).

    Attributes:
        indices: Item indices on this page, in order (non-empty)
        layout: Effective layout shared by every item on the page

    Invariants:
        - 1 <= len(indices) <= layout.capacity
    """

    indices: tuple[int, ...]
    layout: LayoutTag

    def __post_init__(self) -> None:
        object.__setattr__(self, "indices", tuple(self.indices))
        object.__setattr__(self, "layout", LayoutTag.parse(self.layout))
        if not self.indices:
            raise ValueError("ItemPage must contain at least one item")
        if len(self.indices) > self.layout.capacity:
            raise ValueError(
                f"ItemPage holds {len(self.indices)} items but layout "
                f"{self.layout.value} has capacity {self.layout.capacity}"
            )

    @property
    def item_count(self) -> int:
        return len(self.indices)

    @property
    def is_full(self) -> bool:
        return len(self.indices) == self.layout.capacity


@dataclass(frozen=True, slots=True)
class UrlPage:
    """
    External-URL page.

    Attributes:
        source_index: Configuration slot this page came from; stable
            across reorders and used to persist its position
        url: Page target
        title: Optional heading (falls back to the URL host)
    """

    source_index: int
    url: str
    title: Optional[str] = None


@dataclass(frozen=True, slots=True)
class SummaryPage:
    """Appended summary of every item in the catalogue."""

    view: SummaryView = SummaryView.LIST


PageGroup = Union[ItemPage, UrlPage, SummaryPage]
PageSequence = List[PageGroup]


@dataclass(frozen=True, slots=True)
class UrlPageRequest:
    """
    Request to place a URL page.

    Attributes:
        source_index: Configuration slot index
        url: Page target
        title: Optional heading
        page_index: Position among item pages; None means "not placed"
        order: Tie-break among requests sharing a page_index
    """

    source_index: int
    url: str
    title: Optional[str] = None
    page_index: Optional[int] = None
    order: int = 0

    @property
    def is_placed(self) -> bool:
        return self.page_index is not None and bool(self.url.strip())


def is_synthetic(group: PageGroup) -> bool:
    return not isinstance(group, ItemPage)


def flatten_item_indices(sequence: Iterable[PageGroup]) -> list[int]:
    """Item indices in page order, skipping synthetic pages."""
    flat: list[int] = []
    for group in sequence:
        if isinstance(group, ItemPage):
            flat.extend(group.indices)
    return flat


def describe_group(group: PageGroup) -> str:
    if isinstance(group, ItemPage):
        indices = ", ".join(str(i) for i in group.indices)
        return f"{group.layout.value} [{indices}]"
    if isinstance(group, UrlPage):
        return f"url #{group.source_index} {group.url}"
    return f"summary ({group.view.value})"


def describe_sequence(sequence: Sequence[PageGroup]) -> list[str]:
    return [f"{i + 1:>3}. {describe_group(g)}" for i, g in enumerate(sequence)]
