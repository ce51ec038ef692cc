"""
Module: config

Purpose:
    Catalogue-level configuration: default layout, URL page slots,
    summary page request, per-page headers, UTM tagging of item links
    and output settings. Immutable with validation on construction.

Key Classes:
    - CatalogueConfig: Main configuration for building a catalogue
    - UrlPageSlot: One configured external-URL page
    - UtmParams: Campaign parameters appended to item links

Key Functions:
    - load_catalogue(): Read items, overrides and settings from JSON

Dependencies:
    - core.schemas.validator: Catalogue file validation
    - output.config: OutputConfig
    - PIL.ImageColor: Banner colour check

Used By:
    - pagination.session: Sequence preview and persisted positions
    - controller: Build pipeline
    - cli: Command line entry point
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from PIL import ImageColor

from catalogue_pager.core.models import BarcodeType, Catalogue, LayoutTag, SummaryView, UrlPageRequest
from catalogue_pager.core.schemas import CATALOGUE_SCHEMA_VERSION, validate_catalogue
from catalogue_pager.output.config import OutputConfig

logger = logging.getLogger(__name__)

MAX_URL_PAGES = 4


@dataclass(frozen=True, slots=True)
class UrlPageSlot:
    """
    Configured external-URL page.

    Attributes:
        url: Page target (blank slots are ignored)
        title: Optional heading
        page_index: Position among item pages; None = not placed
        order: Tie-break among slots sharing a page_index (lower first)
    """

    url: str
    title: Optional[str] = None
    page_index: Optional[int] = None
    order: int = 0

    def __post_init__(self) -> None:
        if self.page_index is not None and self.page_index < 0:
            raise ValueError(f"page_index must be >= 0: {self.page_index}")
        if self.order < 0:
            raise ValueError(f"order must be >= 0: {self.order}")


@dataclass(frozen=True, slots=True)
class UtmParams:
    """Campaign parameters added to every item link."""

    source: str = ""
    medium: str = ""
    campaign: str = ""
    content: str = ""
    term: str = ""

    @property
    def is_empty(self) -> bool:
        return not any((self.source, self.medium, self.campaign, self.content, self.term))

    def tag(self, url: str) -> str:
        """
        Append the non-empty utm_* parameters to a URL.

        Existing query parameters are kept; existing utm_* values are
        replaced.

        Example:
            >>> UtmParams(source="mail").tag("https://shop.example/p?id=1")
            'https://shop.example/p?id=1&utm_source=mail'
        """
        if self.is_empty or not url:
            return url
        parts = urlsplit(url)
        params = {
            f"utm_{name}": value
            for name, value in (
                ("source", self.source),
                ("medium", self.medium),
                ("campaign", self.campaign),
                ("content", self.content),
                ("term", self.term),
            )
            if value
        }
        query = [(k, v) for k, v in parse_qsl(parts.query, keep_blank_values=True) if k not in params]
        query.extend(params.items())
        return urlunsplit(parts._replace(query=urlencode(query)))


@dataclass(frozen=True)
class CatalogueConfig:
    """
    Configuration for building a catalogue (immutable).

    Attributes:
        default_layout: Layout for items without a layout override
        url_pages: Up to MAX_URL_PAGES external-URL page slots
        summary_view: Appended summary style, None for no summary page
        summary_index: Absolute position of the summary page (None = last)
        page_headers: Page position -> header text drawn on that page
        utm: Campaign parameters for item links
        output: Rendering and compositing settings
        barcode_type: Barcode type for items without a barcode override
        website_name: Banner text on pages without a custom header
        banner_color: Banner colour
        show_footer: Draw the page number and version footer
        footer_text: Extra text after the page number and version in the
            footer, e.g. the shop address

    Example:
        >>> config = CatalogueConfig(default_layout="4-up")
        >>> config.default_layout
        <LayoutTag.FOUR_UP: '4-up'>
    """

    default_layout: LayoutTag = LayoutTag.FOUR_UP
    url_pages: Tuple[UrlPageSlot, ...] = ()
    summary_view: Optional[SummaryView] = None
    summary_index: Optional[int] = None
    page_headers: Mapping[int, str] = field(default_factory=dict)
    utm: UtmParams = field(default_factory=UtmParams)
    output: OutputConfig = field(default_factory=OutputConfig)
    barcode_type: BarcodeType = BarcodeType.NONE
    website_name: str = ""
    banner_color: str = "#F7981D"
    show_footer: bool = True
    footer_text: str = ""

    def __post_init__(self) -> None:
        """Validate and normalise on construction."""
        object.__setattr__(self, "default_layout", LayoutTag.parse(self.default_layout))
        object.__setattr__(self, "barcode_type", BarcodeType(self.barcode_type))
        try:
            ImageColor.getrgb(self.banner_color)
        except ValueError as e:
            raise ValueError(f"banner_color is not a colour: {self.banner_color!r}") from e
        object.__setattr__(self, "url_pages", tuple(self.url_pages))
        if len(self.url_pages) > MAX_URL_PAGES:
            raise ValueError(
                f"At most {MAX_URL_PAGES} URL pages are supported: {len(self.url_pages)}"
            )
        if self.summary_view is not None:
            object.__setattr__(self, "summary_view", SummaryView(self.summary_view))
        if self.summary_index is not None and self.summary_index < 0:
            raise ValueError(f"summary_index must be >= 0: {self.summary_index}")
        object.__setattr__(
            self, "page_headers", {int(k): str(v) for k, v in self.page_headers.items()}
        )

    def url_page_requests(self) -> list[UrlPageRequest]:
        """URL page slots as inserter requests; slot position is the source index."""
        return [
            UrlPageRequest(
                source_index=i,
                url=slot.url,
                title=slot.title,
                page_index=slot.page_index,
                order=slot.order,
            )
            for i, slot in enumerate(self.url_pages)
        ]

    def with_positions(
        self,
        url_page_anchors: Mapping[int, int],
        summary_index: Optional[int],
        url_page_order: Optional[Mapping[int, int]] = None,
    ) -> "CatalogueConfig":
        """
        Persist page positions recorded by a reorder.

        Slots missing from `url_page_anchors` keep their page_index and
        order. `url_page_order` ranks the placed URL pages so that pages
        sharing an anchor come back in the same order.
        """
        url_page_order = url_page_order or {}
        slots = tuple(
            replace(
                slot,
                page_index=url_page_anchors[i],
                order=url_page_order.get(i, slot.order),
            )
            if i in url_page_anchors
            else slot
            for i, slot in enumerate(self.url_pages)
        )
        return replace(self, url_pages=slots, summary_index=summary_index)

    def to_dict(self) -> dict[str, Any]:
        return {
            "default_layout": self.default_layout.value,
            "url_pages": [
                {"url": s.url, "title": s.title, "page_index": s.page_index, "order": s.order}
                for s in self.url_pages
            ],
            "summary_view": self.summary_view.value if self.summary_view else None,
            "summary_index": self.summary_index,
            "page_headers": {str(k): v for k, v in sorted(self.page_headers.items())},
            "utm": {
                name: getattr(self.utm, name)
                for name in ("source", "medium", "campaign", "content", "term")
                if getattr(self.utm, name)
            },
            "output": self.output.to_dict(),
            "barcode_type": self.barcode_type.value,
            "website_name": self.website_name,
            "banner_color": self.banner_color,
            "show_footer": self.show_footer,
            "footer_text": self.footer_text,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "CatalogueConfig":
        summary_view = data.get("summary_view")
        if summary_view == "none":
            summary_view = None
        return cls(
            default_layout=data.get("default_layout", LayoutTag.FOUR_UP),
            url_pages=tuple(
                UrlPageSlot(
                    url=entry.get("url", ""),
                    title=entry.get("title"),
                    page_index=entry.get("page_index"),
                    order=entry.get("order", 0),
                )
                for entry in data.get("url_pages", [])
            ),
            summary_view=summary_view,
            summary_index=data.get("summary_index"),
            page_headers=data.get("page_headers") or {},
            utm=UtmParams(**(data.get("utm") or {})),
            output=OutputConfig.from_dict(data.get("output") or {}),
            barcode_type=data.get("barcode_type", BarcodeType.NONE),
            website_name=data.get("website_name", ""),
            banner_color=data.get("banner_color", "#F7981D"),
            show_footer=data.get("show_footer", True),
            footer_text=data.get("footer_text", ""),
        )


def load_catalogue(path: Path) -> Tuple[Catalogue, CatalogueConfig]:
    """
    Load a catalogue file.

    Args:
        path: JSON file with schema_version, items, overrides, settings

    Returns:
        Tuple of (catalogue, config)

    Raises:
        ValidationError: If the file fails schema validation
        OSError: If the file cannot be read
        json.JSONDecodeError: If the file is not JSON
    """
    data: Dict[str, Any] = json.loads(Path(path).read_text(encoding="utf-8"))
    validate_catalogue(data)
    catalogue = Catalogue.from_dict(data)
    config = CatalogueConfig.from_dict(data.get("settings") or {})
    logger.info(f"Loaded {catalogue.item_count} items from {path}")
    return catalogue, config


def save_catalogue(path: Path, catalogue: Catalogue, config: CatalogueConfig) -> None:
    """Write a catalogue file that load_catalogue() reads back unchanged."""
    payload = {"schema_version": CATALOGUE_SCHEMA_VERSION, **catalogue.to_dict()}
    payload["settings"] = config.to_dict()
    Path(path).write_text(json.dumps(payload, indent=2), encoding="utf-8")
