"""
Module: core.models.items

Purpose:
    Item record supplied by the product source, and the Catalogue
    bundle (ordered items plus their per-item overrides) read from a
    catalogue file.

Key Classes:
    - Item: One catalogue product (read-only to the pager)
    - Catalogue: Ordered items with their ItemOverrides

Dependencies:
    - core.models.overrides: ItemOverrides

Used By:
    - pagination: Item order and counts
    - output.renderer: Titles, links and images
    - controller: Pipeline input
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from .overrides import ItemOverrides


@dataclass(frozen=True, slots=True)
class Item:
    """
    Catalogue product.

    Only `identifier` and `display_title` matter to pagination; the other
    fields are carried for the renderer.

    Attributes:
        identifier: Stable product identifier (handle / SKU), never reused
        display_title: Title for rendering and diagnostics
        url: Product page the rendered card links to
        image_url: Cover image location
        author: Author or vendor line
        price: Display price
        isbn: ISBN / barcode payload
    """

    identifier: str
    display_title: str
    url: Optional[str] = None
    image_url: Optional[str] = None
    author: Optional[str] = None
    price: Optional[str] = None
    isbn: Optional[str] = None

    def __post_init__(self) -> None:
        if not self.identifier:
            raise ValueError("identifier must be non-empty")

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "identifier": self.identifier,
            "display_title": self.display_title,
        }
        for key in ("url", "image_url", "author", "price", "isbn"):
            value = getattr(self, key)
            if value is not None:
                data[key] = value
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Item":
        """
        Build an Item from a product-source payload.

        Accepts `handle`/`title` as fallbacks for `identifier`/`display_title`
        because exports from the storefront use those names.
        """
        identifier = data.get("identifier") or data.get("handle")
        title = data.get("display_title") or data.get("title") or ""
        if not identifier:
            raise ValueError(f"Item has no identifier: {data!r}")
        price = data.get("price")
        return cls(
            identifier=str(identifier),
            display_title=str(title),
            url=data.get("url"),
            image_url=data.get("image_url") or data.get("imageUrl"),
            author=data.get("author"),
            price=str(price) if price is not None else None,
            isbn=data.get("isbn"),
        )


@dataclass(frozen=True)
class Catalogue:
    """
    Ordered items with their per-item overrides.

    Attributes:
        items: Items in catalogue order
        overrides: Override maps keyed by index into `items`

    Raises:
        ValueError: If two items share an identifier
        OverrideMismatchError: If an override key is out of range
    """

    items: tuple[Item, ...]
    overrides: ItemOverrides = field(default_factory=ItemOverrides)

    def __post_init__(self) -> None:
        object.__setattr__(self, "items", tuple(self.items))
        seen: set[str] = set()
        for item in self.items:
            if item.identifier in seen:
                raise ValueError(f"Duplicate item identifier: {item.identifier}")
            seen.add(item.identifier)
        self.overrides.validate(len(self.items))

    @property
    def item_count(self) -> int:
        return len(self.items)

    def to_dict(self) -> dict[str, Any]:
        return {
            "items": [item.to_dict() for item in self.items],
            "overrides": self.overrides.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Catalogue":
        items = tuple(Item.from_dict(entry) for entry in data.get("items", []))
        overrides = ItemOverrides.from_dict(data.get("overrides") or {})
        return cls(items=items, overrides=overrides)
