"""
Module: pagination

Purpose:
    Page sequencing for catalogues.
    Groups items onto fixed-capacity pages, splices in synthetic pages
    and applies operator reorders while keeping overrides index-consistent.

Key Functions:
    - build_page_groups(): Items -> item pages
    - insert_synthetic_pages(): Item pages -> full page sequence
    - build_sequence(): Both steps from a catalogue and its config
    - apply_page_order(): Reordered sequence -> new item order
    - move_page(): Swap adjacent pages

Key Classes:
    - ReorderSession: Interactive editing session
    - ReorderResult: Output of apply_page_order()

Dependencies:
    - core.models: Page groups, overrides, layouts

Used By:
    - controller: Build pipeline
    - cli: preview command
"""

from .grouper import build_page_groups, effective_layouts
from .inserter import insert_synthetic_pages
from .reorder import (
    ReorderResult,
    PageSequenceError,
    apply_page_order,
    move_page,
    invert_order,
)
from .session import ReorderSession, SessionCommit, build_sequence

__all__ = [
    "build_page_groups",
    "effective_layouts",
    "insert_synthetic_pages",
    "ReorderResult",
    "PageSequenceError",
    "apply_page_order",
    "move_page",
    "invert_order",
    "ReorderSession",
    "SessionCommit",
    "build_sequence",
]
