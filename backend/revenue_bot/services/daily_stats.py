"""Daily Stripe statistics: gross volume, unique customers, payment count."""
import asyncio
import logging
from datetime import date, datetime, timezone
from typing import Protocol

from revenue_bot.rules.reconciliation import reconcile
from revenue_bot.schemas.stats import DailyMetrics, TimeWindow
from revenue_bot.schemas.stripe import Page
from revenue_bot.services.pagination import MAX_PAGE_SIZE, collect_all
from revenue_bot.services.time_window import local_today, resolve_day_window

logger = logging.getLogger(__name__)


class TransactionSource(Protocol):
    async def fetch_payment_intents(self, window: TimeWindow, limit: int, starting_after: str | None = None) -> Page: ...

    async def fetch_charges(self, window: TimeWindow, limit: int, starting_after: str | None = None) -> Page: ...


async def get_stats_for_date(
    source: TransactionSource,
    target_date: date,
    offset_hours: int,
    page_size: int = MAX_PAGE_SIZE,
) -> DailyMetrics:
    """Metrics for one local calendar day.

    Both lists are paged in full concurrently; reconciliation only starts
    once both are complete, and any fetch error aborts the whole request.
    """
    window = resolve_day_window(target_date, offset_hours)
    logger.debug(
        "get_stats_for_date: local date %s (UTC%+d) -> %s .. %s",
        target_date.isoformat(), offset_hours,
        datetime.fromtimestamp(window.start, tz=timezone.utc).isoformat(),
        datetime.fromtimestamp(window.end, tz=timezone.utc).isoformat(),
    )

    payment_intents, charges = await asyncio.gather(
        collect_all(window, source.fetch_payment_intents, page_size),
        collect_all(window, source.fetch_charges, page_size),
    )

    _, metrics = reconcile(payment_intents, charges)
    logger.info(
        "Daily stats for %s: volume=%d customers=%d payments=%d",
        target_date.isoformat(), metrics.gross_volume, metrics.customers, metrics.payments,
    )
    return metrics


async def get_today_stats(
    source: TransactionSource,
    offset_hours: int,
    now: datetime | None = None,
) -> tuple[date, DailyMetrics]:
    today = local_today(offset_hours, now)
    return today, await get_stats_for_date(source, today, offset_hours)
