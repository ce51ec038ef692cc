"""
Module: assets.fetcher

Purpose:
    Concurrent acquisition of item images before rendering. Every fetch
    is issued at once on a thread pool and awaited together; a failed
    fetch resolves to None ("no image") instead of failing the batch.

Key Functions:
    - fetch_images(): Fetch all images, best effort
    - http_fetcher(): Default fetcher built on requests

Dependencies:
    - concurrent.futures: Thread pool execution
    - requests: HTTP downloads
    - PIL.Image: Decoding

Used By:
    - controller: Asset phase of the build pipeline
"""

from __future__ import annotations

import io
import logging
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Callable, Dict, Mapping, Optional

import requests
from PIL import Image

logger = logging.getLogger(__name__)

ImageFetcher = Callable[[str], Image.Image]

DEFAULT_TIMEOUT = 15.0
USER_AGENT = "catalogue-pager/asset-fetcher"


def http_fetcher(
    timeout: float = DEFAULT_TIMEOUT,
    session: Optional[requests.Session] = None,
) -> ImageFetcher:
    """
    Build a fetcher that downloads and decodes an image over HTTP.

    Args:
        timeout: Per-request timeout in seconds
        session: Shared requests session (one is created if omitted)

    Returns:
        Callable mapping a URL to a decoded RGB image
    """
    http = session or requests.Session()
    http.headers.setdefault("User-Agent", USER_AGENT)

    def _fetch(url: str) -> Image.Image:
        response = http.get(url, timeout=timeout)
        response.raise_for_status()
        with Image.open(io.BytesIO(response.content)) as img:
            return img.convert("RGB")

    return _fetch


def fetch_images(
    urls: Mapping[str, Optional[str]],
    fetcher: Optional[ImageFetcher] = None,
    *,
    max_workers: int = 8,
) -> Dict[str, Optional[Image.Image]]:
    """
    Fetch images for many items concurrently.

    Args:
        urls: Item identifier -> image URL (None or blank = no image)
        fetcher: Callable that returns a decoded image for a URL;
            defaults to http_fetcher()
        max_workers: Concurrent fetches

    Returns:
        Item identifier -> image, or None where no image was available

    Example:
        >>> images = fetch_images({"a": "https://cdn.example/a.jpg", "b": None})
        >>> images["b"] is None
        True
    """
    fetch = fetcher or http_fetcher()
    results: Dict[str, Optional[Image.Image]] = {key: None for key in urls}
    pending = {key: url for key, url in urls.items() if url and url.strip()}
    if not pending:
        return results

    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        futures: Dict[str, Future] = {
            key: executor.submit(fetch, url) for key, url in pending.items()
        }
        for key, future in futures.items():
            try:
                results[key] = future.result()
            except Exception as e:
                logger.warning(f"Image unavailable for {key} ({pending[key]}): {e}")

    fetched = sum(1 for img in results.values() if img is not None)
    logger.info(f"Fetched {fetched}/{len(pending)} item images")
    return results
