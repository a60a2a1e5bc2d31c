"""PaymentIntent / Charge reconciliation into daily metrics.

A successful PaymentIntent settles into a Charge, and both show up in their
own list endpoints. Charges already represented by a successful intent are
dropped so each payment is counted once; charges with no such intent
(legacy Charges API, some one-off payment links) are kept.
"""
import logging
from collections.abc import Iterable

from revenue_bot.schemas.stats import DailyMetrics, ReconciledTransactions
from revenue_bot.schemas.stripe import SUCCEEDED, TransactionRecord

logger = logging.getLogger(__name__)

EMAIL_KEY_PREFIX = "email:"


# ─── Filters ───

def is_successful_payment_intent(record: TransactionRecord) -> bool:
    return record.status == SUCCEEDED


def is_successful_charge(record: TransactionRecord) -> bool:
    return record.status == SUCCEEDED and record.paid


# ─── De-duplication ───

def dedupe(
    payment_intents: Iterable[TransactionRecord],
    charges: Iterable[TransactionRecord],
) -> ReconciledTransactions:
    """Keep successful intents, and successful charges no intent points at."""
    succeeded_pis = [pi for pi in payment_intents if is_successful_payment_intent(pi)]
    succeeded_charges = [ch for ch in charges if is_successful_charge(ch)]

    linked_charge_ids = {pi.linked_charge_id for pi in succeeded_pis if pi.linked_charge_id}
    standalone = [ch for ch in succeeded_charges if ch.id not in linked_charge_ids]

    return ReconciledTransactions(payment_intents=succeeded_pis, standalone_charges=standalone)


# ─── Customer identity ───

def resolve_customer_key(record: TransactionRecord) -> str | None:
    """Stable identity for a transaction's customer, or None.

    Priority: the Stripe customer id (opaque, used verbatim), then the
    receipt email (intents) or billing email (charges), normalised and
    namespaced so it cannot collide with a customer id.
    """
    if record.customer_id:
        return record.customer_id

    email = record.receipt_email if record.is_payment_intent else record.billing_email
    if email:
        normalised = email.strip().lower()
        if normalised:
            return f"{EMAIL_KEY_PREFIX}{normalised}"
    return None


def unique_customers(records: Iterable[TransactionRecord]) -> set[str]:
    keys = {resolve_customer_key(record) for record in records}
    keys.discard(None)
    return keys


# ─── Reduction ───

def payment_intent_volume(record: TransactionRecord) -> int:
    # amount_received of 0 means not (yet) captured; fall back to amount.
    return record.amount_received or record.amount or 0


def charge_volume(record: TransactionRecord) -> int:
    return record.amount or 0


def reduce_metrics(
    payment_intents: list[TransactionRecord],
    standalone_charges: list[TransactionRecord],
) -> DailyMetrics:
    gross_volume = sum(payment_intent_volume(pi) for pi in payment_intents)
    gross_volume += sum(charge_volume(ch) for ch in standalone_charges)

    customers = unique_customers([*payment_intents, *standalone_charges])

    return DailyMetrics(
        gross_volume=gross_volume,
        customers=len(customers),
        payments=len(payment_intents) + len(standalone_charges),
    )


def reconcile(
    payment_intents: list[TransactionRecord],
    charges: list[TransactionRecord],
) -> tuple[ReconciledTransactions, DailyMetrics]:
    reconciled = dedupe(payment_intents, charges)
    metrics = reduce_metrics(reconciled.payment_intents, reconciled.standalone_charges)
    logger.debug(
        "reconcile: %d intents (%d succeeded), %d charges (%d standalone) -> %s",
        len(payment_intents), len(reconciled.payment_intents),
        len(charges), len(reconciled.standalone_charges),
        metrics.model_dump(),
    )
    return reconciled, metrics
