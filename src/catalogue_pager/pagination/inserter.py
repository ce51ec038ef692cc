"""
Module: pagination.inserter

Purpose:
    Splice synthetic pages (external-URL pages and the summary page)
    into a sequence of item pages.

Key Functions:
    - insert_synthetic_pages(): Build the full page sequence

Rules:
    - Only URL requests with a page_index and a non-blank url take part
    - page_index refers to the item-page sequence as built, before any
      insertion, and is clamped to [0, len(groups)]
    - Requests are inserted in ascending page_index; equal page_index
      values go by ascending order, then ascending source_index
    - The summary page goes last, or at summary_index (clamped) when set

Dependencies:
    - core.models.pages: page group types

Used By:
    - pagination.session: Preview sequence
    - controller: Build pipeline
"""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Sequence

from catalogue_pager.core.models import (
    ItemPage,
    PageGroup,
    SummaryPage,
    SummaryView,
    UrlPage,
    UrlPageRequest,
)

logger = logging.getLogger(__name__)


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(value, high))


def insert_synthetic_pages(
    groups: Sequence[ItemPage],
    url_pages: Iterable[UrlPageRequest] = (),
    summary_view: Optional[SummaryView] = None,
    summary_index: Optional[int] = None,
) -> List[PageGroup]:
    """
    Merge URL pages and the summary page into the item pages.

    Args:
        groups: Item pages from build_page_groups()
        url_pages: URL page requests; unplaced ones are ignored
        summary_view: Summary style, or None for no summary page
        summary_index: Absolute position for the summary page;
            None appends it at the end

    Returns:
        Full page sequence

    Example:
        >>> seq = insert_synthetic_pages(
        ...     groups, [UrlPageRequest(0, "https://a.example", page_index=1000)]
        ... )
        >>> isinstance(seq[-1], UrlPage)
        True
    """
    sequence: List[PageGroup] = list(groups)
    original_length = len(groups)

    placed = sorted(
        (request for request in url_pages if request.is_placed),
        key=lambda r: (_clamp(r.page_index, 0, original_length), r.order, r.source_index),
    )
    for inserted, request in enumerate(placed):
        target = _clamp(request.page_index, 0, original_length)
        if target != request.page_index:
            logger.debug(
                f"URL page #{request.source_index} index {request.page_index} "
                f"clamped to {target}"
            )
        sequence.insert(
            target + inserted,
            UrlPage(source_index=request.source_index, url=request.url, title=request.title),
        )

    if summary_view is not None:
        summary = SummaryPage(view=SummaryView(summary_view))
        if summary_index is None:
            sequence.append(summary)
        else:
            sequence.insert(_clamp(summary_index, 0, len(sequence)), summary)

    logger.debug(
        f"Inserted {len(placed)} URL pages"
        f"{' and a summary page' if summary_view is not None else ''}: "
        f"{len(sequence)} pages total"
    )
    return sequence
