"""Revenue and profit/loss composition.

Total revenue counts everything Stripe has ever settled for the account:
what is still in the balance plus what has already been paid out or is on
its way out. Stripe figures are cents, expenses are dollars; the cents total
is converted exactly once.
"""
import logging
from collections.abc import Iterable
from decimal import Decimal

from revenue_bot.schemas.stats import RevenueSummary
from revenue_bot.schemas.stripe import BalanceSnapshot, Payout
from revenue_bot.services.formatting import cents_to_dollars

logger = logging.getLogger(__name__)

PAID_STATUS = "paid"
REVENUE_PAYOUT_LIMIT = 100


def payout_totals(payouts: Iterable[Payout], pending_payouts: Iterable[Payout]) -> tuple[int, int]:
    """(paid total, pending total) in cents."""
    paid = sum(p.amount for p in payouts if p.status == PAID_STATUS)
    pending = sum(p.amount for p in pending_payouts)
    return paid, pending


def compose_revenue(
    balance: BalanceSnapshot,
    paid_payouts_total: int,
    pending_payouts_total: int,
    total_expenses: Decimal,
) -> RevenueSummary:
    revenue_cents = balance.available + balance.pending + paid_payouts_total + pending_payouts_total
    total_revenue = cents_to_dollars(revenue_cents)
    expenses = abs(Decimal(total_expenses))
    return RevenueSummary(
        available=balance.available,
        pending=balance.pending,
        paid_payouts_total=paid_payouts_total,
        pending_payouts_total=pending_payouts_total,
        total_revenue_cents=revenue_cents,
        total_revenue=total_revenue,
        total_expenses=expenses,
        true_total=total_revenue - expenses,
    )


async def get_revenue_summary(gateway, total_expenses: Decimal) -> RevenueSummary:
    """Read balance and payouts from Stripe and combine them with expenses."""
    balance = await gateway.get_balance()
    payouts = await gateway.list_payouts(REVENUE_PAYOUT_LIMIT)
    pending_payouts = await gateway.list_pending_payouts()

    paid_total, pending_total = payout_totals(payouts, pending_payouts)
    summary = compose_revenue(balance, paid_total, pending_total, total_expenses)
    logger.info(
        "Revenue summary: revenue=%s expenses=%s true_total=%s",
        summary.total_revenue, summary.total_expenses, summary.true_total,
    )
    return summary
