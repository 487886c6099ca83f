"""
Cursor pagination over the Instantly API.

A page fetcher is any callable taking the current cursor (None for the first
page) and returning (items, next_cursor). Pages are requested strictly one
after another; a falsy next_cursor ends the sequence.
"""

import logging
from typing import Callable, Iterator, List, Optional, Tuple

from common.exceptions import SyncException

logger = logging.getLogger(__name__)

PageFetcher = Callable[[Optional[str]], Tuple[list, Optional[str]]]

DEFAULT_MAX_PAGES = 10000


def iter_pages(
    fetch_page: PageFetcher, max_pages: int = DEFAULT_MAX_PAGES
) -> Iterator[list]:
    """
    Lazily yield one list of items per page.

    Errors raised by fetch_page propagate to the caller unchanged.

    Args:
        fetch_page: Page fetcher returning (items, next_cursor)
        max_pages: Guard against an API that never stops returning cursors

    Raises:
        SyncException: If page max_pages still returns a next cursor
    """
    cursor = None
    page = 0

    while True:
        items, next_cursor = fetch_page(cursor)
        page += 1
        logger.debug("Page %d: %d items", page, len(items))
        yield items

        if not next_cursor:
            return
        if page >= max_pages:
            logger.error(
                "Aborting pagination after %d pages; cursor never ended", page
            )
            raise SyncException(
                f"Pagination exceeded {max_pages} pages without a final page",
                details={"pages": page, "cursor": next_cursor},
            )
        cursor = next_cursor


def fetch_all(fetch_page: PageFetcher, max_pages: int = DEFAULT_MAX_PAGES) -> List:
    """Fetch every page and return all items in API response order."""
    all_items = []
    pages = 0
    for items in iter_pages(fetch_page, max_pages=max_pages):
        all_items.extend(items)
        pages += 1

    logger.info("Pagination complete: %d items in %d pages", len(all_items), pages)
    return all_items
