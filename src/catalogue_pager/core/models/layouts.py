"""
Module: core.models.layouts

Purpose:
    The closed set of page layout tags and their capacity table.
    A layout tag says how many items one page holds and how the
    reference renderer arranges them (columns x rows).

Key Classes:
    - LayoutTag: Enumeration of supported layouts
    - LayoutSpec: Capacity and grid for one tag
    - InvalidLayoutTag: Raised for unknown tags

Key Functions:
    - capacity_of(): Slots per page for a tag

Dependencies:
    - enum, dataclasses (std)

Used By:
    - pagination.grouper: Capacity while grouping
    - core.models.pages: ItemPage validation
    - output.renderer: Grid geometry
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union


class InvalidLayoutTag(ValueError):
    """Layout tag is not part of the supported enumeration."""
    pass


class LayoutTag(str, Enum):
    """
    Supported page layouts.

    The `1L` layout is a single item with extra "internals" preview
    images; `2-int` is two items with interior spreads. Both behave like
    their N-up counterparts for capacity purposes but are distinct tags,
    so a switch between `1-up` and `1L` still starts a new page.
    """

    ONE_UP = "1-up"
    ONE_L = "1L"
    TWO_UP = "2-up"
    TWO_INT = "2-int"
    THREE_UP = "3-up"
    FOUR_UP = "4-up"
    EIGHT_UP = "8-up"
    NINE_UP = "9-up"
    TWELVE_UP = "12-up"

    @classmethod
    def parse(cls, value: Union["LayoutTag", str, int]) -> "LayoutTag":
        """
        Normalise a layout value to a LayoutTag.

        Accepts the tag itself, its string value ("4-up"), or the numeric
        aliases used by older catalogue files (4, "4").

        Raises:
            InvalidLayoutTag: If the value names no known layout

        Example:
            >>> LayoutTag.parse(8)
            <LayoutTag.EIGHT_UP: '8-up'>
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, bool):
            raise InvalidLayoutTag(f"Unknown layout tag: {value!r}")
        if isinstance(value, int):
            value = f"{value}-up"
        elif isinstance(value, str) and value.strip().isdigit():
            value = f"{value.strip()}-up"
        try:
            return cls(value)
        except ValueError:
            raise InvalidLayoutTag(f"Unknown layout tag: {value!r}") from None

    @property
    def spec(self) -> "LayoutSpec":
        return _LAYOUT_TABLE[self]

    @property
    def capacity(self) -> int:
        return _LAYOUT_TABLE[self].capacity


@dataclass(frozen=True, slots=True)
class LayoutSpec:
    """
    Capacity and grid geometry of one layout.

    Attributes:
        capacity: Item slots per page (>= 1)
        columns: Grid columns used by the renderer
        rows: Grid rows used by the renderer
    """

    capacity: int
    columns: int
    rows: int

    def __post_init__(self) -> None:
        if self.capacity < 1:
            raise ValueError(f"capacity must be >= 1: {self.capacity}")
        if self.columns * self.rows < self.capacity:
            raise ValueError(
                f"grid {self.columns}x{self.rows} cannot hold {self.capacity} items"
            )


_LAYOUT_TABLE: dict[LayoutTag, LayoutSpec] = {
    LayoutTag.ONE_UP: LayoutSpec(1, 1, 1),
    LayoutTag.ONE_L: LayoutSpec(1, 1, 1),
    LayoutTag.TWO_UP: LayoutSpec(2, 1, 2),
    LayoutTag.TWO_INT: LayoutSpec(2, 1, 2),
    LayoutTag.THREE_UP: LayoutSpec(3, 1, 3),
    LayoutTag.FOUR_UP: LayoutSpec(4, 2, 2),
    LayoutTag.EIGHT_UP: LayoutSpec(8, 2, 4),
    LayoutTag.NINE_UP: LayoutSpec(9, 3, 3),
    LayoutTag.TWELVE_UP: LayoutSpec(12, 3, 4),
}


def capacity_of(tag: Union[LayoutTag, str, int]) -> int:
    """
    Number of item slots on a page of the given layout.

    Args:
        tag: Layout tag or one of its aliases

    Returns:
        Capacity, always >= 1

    Raises:
        InvalidLayoutTag: If tag is unknown

    Example:
        >>> capacity_of("2-int")
        2
    """
    return LayoutTag.parse(tag).capacity
