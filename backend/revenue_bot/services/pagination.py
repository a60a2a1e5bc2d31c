"""Cursor pagination over Stripe list endpoints."""
import logging
from collections.abc import Awaitable, Callable

from revenue_bot.schemas.stats import TimeWindow
from revenue_bot.schemas.stripe import Page, TransactionRecord

logger = logging.getLogger(__name__)

MAX_PAGE_SIZE = 100

# (window, limit, starting_after) -> Page
FetchPage = Callable[[TimeWindow, int, str | None], Awaitable[Page]]


async def collect_all(
    window: TimeWindow,
    fetch_page: FetchPage,
    page_size: int = MAX_PAGE_SIZE,
) -> list[TransactionRecord]:
    """Fetch every record created inside ``window``.

    Pages are requested sequentially, each one starting after the id of the
    previous page's last item. Iteration stops when the source reports no
    further pages or returns an empty page, whatever its ``has_more`` flag
    says. Fetch errors propagate to the caller.
    """
    if not 1 <= page_size <= MAX_PAGE_SIZE:
        raise ValueError(f"page_size must be between 1 and {MAX_PAGE_SIZE}, got {page_size}")

    records: list[TransactionRecord] = []
    cursor: str | None = None
    pages = 0

    while True:
        page = await fetch_page(window, page_size, cursor)
        pages += 1
        records.extend(page.items)

        if not page.items:
            if page.has_more:
                logger.warning("collect_all: empty page %d reported has_more; stopping", pages)
            break
        if not page.has_more:
            break
        cursor = page.items[-1].id

    logger.debug("collect_all: %d records in %d pages for window %s-%s", len(records), pages, window.start, window.end)
    return records
