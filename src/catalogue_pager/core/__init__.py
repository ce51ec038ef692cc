"""
Catalogue Pager Core Package

Data models and schema validation shared by every other subpackage.
Nothing in here performs I/O apart from loading the JSON schema.
"""

from .models import (
    Item,
    Catalogue,
    ItemOverrides,
    LayoutTag,
    ItemPage,
    UrlPage,
    SummaryPage,
    ClickableRegion,
)

__all__ = [
    "Item",
    "Catalogue",
    "ItemOverrides",
    "LayoutTag",
    "ItemPage",
    "UrlPage",
    "SummaryPage",
    "ClickableRegion",
]
