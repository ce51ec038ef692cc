"""
Module: controller

Purpose:
    Orchestrate the complete catalogue build pipeline.
    Validate → Group → Insert synthetic pages → Fetch images → Render
    → Composite → Write PDF → Write metadata

Key Functions:
    - build_catalogue(): Main entry point for building a catalogue PDF

Key Classes:
    - BuildResult: Complete build result
    - BuildError: Exception for build failures

Dependencies:
    - pagination: Page sequence
    - assets: Image acquisition
    - output: Rendering, compositing and PDF writing

Used By:
    - cli: build command
"""

from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple

from catalogue_pager.assets import ImageFetcher, fetch_images, http_fetcher
from catalogue_pager.config import CatalogueConfig
from catalogue_pager.core.models import (
    Catalogue,
    ItemPage,
    OverrideMismatchError,
    PageGroup,
    SummaryPage,
    UrlPage,
)
from catalogue_pager.output import (
    CatalogueRenderer,
    CompositeError,
    CompositedDocument,
    PageRasterCompositor,
    PageRenderer,
    RenderContext,
    write_pdf,
)
from catalogue_pager.pagination import PageSequenceError, apply_page_order, build_sequence

logger = logging.getLogger(__name__)

METADATA_FILENAME = "build_metadata.json"


class BuildError(Exception):
    """Error during build pipeline."""
    pass


@dataclass(frozen=True)
class BuildResult:
    """
    Complete build result (immutable).

    Attributes:
        pdf_path: Path to generated PDF
        metadata_path: Path to build_metadata.json
        sequence: Page sequence that was rendered
        page_count: Number of pages generated
        link_count: Number of link annotations written
        metadata: Build metadata dictionary
        warnings: Any warnings during build

    Example:
        >>> result = build_catalogue(catalogue, config, Path("out/catalogue.pdf"))
        >>> print(f"Generated {result.page_count} pages with {result.link_count} links")
    """

    pdf_path: Path
    metadata_path: Path
    sequence: Tuple[PageGroup, ...]
    page_count: int
    link_count: int
    metadata: dict
    warnings: Tuple[str, ...]


def _get_footer_text(config: CatalogueConfig) -> str:
    """Get footer text with current version number and any configured text."""
    from catalogue_pager import __version__
    text = f"Generated with catalogue-pager v{__version__}"
    if config.footer_text:
        text = f"{text}: {config.footer_text}"
    return text


def build_catalogue(
    catalogue: Catalogue,
    config: CatalogueConfig,
    output_path: Path,
    *,
    renderer: Optional[PageRenderer] = None,
    fetcher: Optional[ImageFetcher] = None,
    sequence: Optional[Sequence[PageGroup]] = None,
) -> BuildResult:
    """
    Build a catalogue PDF from start to finish.

    Pipeline:
    1. Validate overrides against the item count
    2. Derive the page sequence (or check the one supplied)
    3. Fetch item images
    4. Render every page
    5. Composite pages onto output pages
    6. Write PDF and build metadata

    Args:
        catalogue: Items and overrides
        config: Catalogue configuration
        output_path: Path to write PDF
        renderer: Content renderer (defaults to CatalogueRenderer)
        fetcher: Image fetcher (defaults to HTTP via requests)
        sequence: Pre-arranged page sequence, e.g. a session snapshot;
            derived from catalogue and config when omitted

    Returns:
        BuildResult with paths and metadata

    Raises:
        BuildError: If any step fails

    Example:
        >>> catalogue, config = load_catalogue(Path("spring.json"))
        >>> result = build_catalogue(catalogue, config, Path("out/spring.pdf"))
        >>> result.page_count
        7
    """
    warnings: List[str] = []
    start_time = time.perf_counter()
    output_path = Path(output_path)

    logger.info(f"Starting build of {catalogue.item_count} items to {output_path}")

    # 1-2. Page sequence
    try:
        catalogue.overrides.validate(catalogue.item_count)
        if sequence is None:
            pages = tuple(build_sequence(catalogue, config))
        else:
            pages = tuple(sequence)
            apply_page_order(pages, catalogue.items, catalogue.overrides)
    except (OverrideMismatchError, PageSequenceError) as e:
        raise BuildError(f"Invalid page sequence: {e}") from e

    if not pages:
        raise BuildError("Nothing to render: catalogue has no items and no synthetic pages")

    logger.info(f"Page sequence has {len(pages)} pages")

    # 3. Images
    urls = {item.identifier: item.image_url for item in catalogue.items}
    images = fetch_images(
        urls,
        fetcher or http_fetcher(timeout=config.output.fetch_timeout),
        max_workers=config.output.fetch_workers,
    )
    for item in catalogue.items:
        if item.image_url and images.get(item.identifier) is None:
            warnings.append(f"No image for {item.identifier}")

    # 4. Render
    context = RenderContext(
        items=catalogue.items,
        overrides=catalogue.overrides,
        images=images,
        link_tagger=config.utm.tag,
        page_headers=config.page_headers,
        default_barcode=config.barcode_type,
        website_name=config.website_name,
        banner_color=config.banner_color,
        show_footer=config.show_footer,
        footer_text=_get_footer_text(config),
    )
    page_renderer = renderer or CatalogueRenderer(config.output)
    rendered = []
    for i, group in enumerate(pages):
        try:
            rendered.append(page_renderer.render(group, context, i))
        except Exception as e:
            raise BuildError(f"Failed to render page {i + 1}: {e}") from e

    # 5. Composite
    try:
        document = PageRasterCompositor(config.output).composite(rendered)
    except CompositeError as e:
        raise BuildError(f"Failed to composite pages: {e}") from e

    # 6. Write
    try:
        write_pdf(document, output_path, config.output)
    except OSError as e:
        raise BuildError(f"Failed to write PDF: {e}") from e

    elapsed = time.perf_counter() - start_time
    logger.info(f"Catalogue generation completed in {elapsed:.2f}s")

    metadata = _build_metadata(catalogue, config, pages, document, elapsed, warnings)
    metadata_path = _write_metadata(output_path.parent, metadata)
    logger.info(f"Wrote build metadata to {metadata_path}")

    return BuildResult(
        pdf_path=output_path,
        metadata_path=metadata_path,
        sequence=pages,
        page_count=document.page_count,
        link_count=document.link_count,
        metadata=metadata,
        warnings=tuple(warnings),
    )


def _describe_page(group: PageGroup, catalogue: Catalogue) -> Dict[str, Any]:
    if isinstance(group, ItemPage):
        return {
            "kind": "items",
            "layout": group.layout.value,
            "items": [catalogue.items[i].identifier for i in group.indices],
        }
    if isinstance(group, UrlPage):
        return {"kind": "url", "url": group.url, "title": group.title}
    if isinstance(group, SummaryPage):
        return {"kind": "summary", "view": group.view.value}
    raise BuildError(f"Unknown page group: {group!r}")


def _build_metadata(
    catalogue: Catalogue,
    config: CatalogueConfig,
    pages: Sequence[PageGroup],
    document: CompositedDocument,
    elapsed: float,
    warnings: List[str],
) -> dict:
    """
    Build metadata dictionary for a generated catalogue.

    Contains the page manifest (what each page holds and how many links
    it carries), the settings used, and timing.

    Returns:
        Metadata dictionary ready for JSON serialization
    """
    from catalogue_pager import __version__

    manifest = []
    for group, composited in zip(pages, document.pages):
        entry = {"page": composited.index + 1, **_describe_page(group, catalogue)}
        entry["links"] = len(composited.links)
        manifest.append(entry)

    return {
        "generated_at": datetime.now().isoformat(timespec="seconds"),
        "generator_version": __version__,
        "item_count": catalogue.item_count,
        "page_count": document.page_count,
        "link_count": document.link_count,
        "elapsed_seconds": round(elapsed, 3),
        "pages": manifest,
        "settings": config.to_dict(),
        "warnings": list(warnings),
    }


def _write_metadata(output_dir: Path, metadata: dict) -> Path:
    """
    Write metadata JSON file to output directory.

    Raises:
        BuildError: If the file cannot be written
    """
    metadata_path = output_dir / METADATA_FILENAME
    try:
        with open(metadata_path, "w", encoding="utf-8") as f:
            json.dump(metadata, f, indent=2)
    except OSError as e:
        raise BuildError(f"Failed to write metadata: {e}") from e
    return metadata_path
