"""
Module: assets

Purpose:
    Best-effort acquisition of item images ahead of rendering.

Key Functions:
    - fetch_images(): Concurrent fetch, failures become None
    - http_fetcher(): Default HTTP fetcher

Used By:
    - controller: Asset phase of the build pipeline
"""

from .fetcher import ImageFetcher, fetch_images, http_fetcher

__all__ = [
    "ImageFetcher",
    "fetch_images",
    "http_fetcher",
]
