"""
Core Models Package

Immutable, validated data models shared by pagination and output.

All models are frozen dataclasses: edits (setting an override, moving a
page) produce new instances, so a snapshot handed to the renderer can
never change underneath it.
"""

from .layouts import LayoutTag, LayoutSpec, InvalidLayoutTag, capacity_of
from .overrides import (
    BarcodeType,
    OverrideKind,
    LayoutOverride,
    BarcodeOverride,
    BioToggle,
    FooterNote,
    InternalsCount,
    ItemOverrides,
    OverrideMismatchError,
)
from .items import Item, Catalogue
from .pages import (
    ItemPage,
    UrlPage,
    SummaryPage,
    SummaryView,
    PageGroup,
    PageSequence,
    UrlPageRequest,
    is_synthetic,
    flatten_item_indices,
)
from .regions import ClickableRegion

__all__ = [
    "LayoutTag",
    "LayoutSpec",
    "InvalidLayoutTag",
    "capacity_of",
    "BarcodeType",
    "OverrideKind",
    "LayoutOverride",
    "BarcodeOverride",
    "BioToggle",
    "FooterNote",
    "InternalsCount",
    "ItemOverrides",
    "OverrideMismatchError",
    "Item",
    "Catalogue",
    "ItemPage",
    "UrlPage",
    "SummaryPage",
    "SummaryView",
    "PageGroup",
    "PageSequence",
    "UrlPageRequest",
    "is_synthetic",
    "flatten_item_indices",
    "ClickableRegion",
]
