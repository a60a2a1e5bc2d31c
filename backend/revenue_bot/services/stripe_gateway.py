"""Stripe read API wrapper.

One gateway is built at startup and handed to whatever needs Stripe data.
The SDK is synchronous, so every call runs in a worker thread. Stripe
objects are normalised here; nothing past this module sees SDK types.
"""
import asyncio
import logging
from collections.abc import Mapping
from typing import Any

import stripe

from revenue_bot.schemas.stats import TimeWindow
from revenue_bot.schemas.stripe import CHARGE, PAYMENT_INTENT, BalanceSnapshot, Page, Payout, TransactionRecord

logger = logging.getLogger(__name__)

PENDING_PAYOUT_LIMIT = 100


# ─── Field access ───

def _field(obj: Any, name: str) -> Any:
    if obj is None:
        return None
    if isinstance(obj, Mapping):
        return obj.get(name)
    return getattr(obj, name, None)


def _ref_id(value: Any) -> str | None:
    """Id of a reference that may be a bare id string or an expanded object."""
    if value is None:
        return None
    if isinstance(value, str):
        return value or None
    return _field(value, "id") or None


def _first_amount(entries: Any) -> int:
    if not entries:
        return 0
    return int(_field(entries[0], "amount") or 0)


# ─── Normalisation ───

def payment_intent_record(obj: Any) -> TransactionRecord:
    return TransactionRecord(
        id=_field(obj, "id"),
        kind=PAYMENT_INTENT,
        status=_field(obj, "status") or "",
        created=int(_field(obj, "created") or 0),
        amount=_field(obj, "amount"),
        amount_received=_field(obj, "amount_received"),
        customer_id=_ref_id(_field(obj, "customer")),
        receipt_email=_field(obj, "receipt_email"),
        linked_charge_id=_ref_id(_field(obj, "latest_charge")),
    )


def charge_record(obj: Any) -> TransactionRecord:
    return TransactionRecord(
        id=_field(obj, "id"),
        kind=CHARGE,
        status=_field(obj, "status") or "",
        created=int(_field(obj, "created") or 0),
        amount=_field(obj, "amount"),
        paid=bool(_field(obj, "paid")),
        customer_id=_ref_id(_field(obj, "customer")),
        billing_email=_field(_field(obj, "billing_details"), "email"),
    )


def payout_record(obj: Any) -> Payout:
    return Payout(
        id=_field(obj, "id"),
        amount=int(_field(obj, "amount") or 0),
        status=_field(obj, "status") or "",
        arrival_date=int(_field(obj, "arrival_date") or 0),
        description=_field(obj, "description") or None,
    )


# ─── Gateway ───

class StripeGateway:
    def __init__(self, api_key: str, api_version: str | None = None) -> None:
        if not api_key:
            raise ValueError("STRIPE_SECRET_KEY is not defined")
        self._api_key = api_key
        self._api_version = api_version

    def _request_options(self) -> dict[str, str]:
        options = {"api_key": self._api_key}
        if self._api_version:
            options["stripe_version"] = self._api_version
        return options

    async def _call(self, fn, **params) -> Any:
        return await asyncio.to_thread(fn, **params, **self._request_options())

    async def _list_created(self, resource, window: TimeWindow, limit: int, starting_after: str | None) -> Any:
        params: dict[str, Any] = {"limit": limit, "created": window.as_created_filter()}
        if starting_after:
            params["starting_after"] = starting_after
        return await self._call(resource.list, **params)

    async def fetch_payment_intents(
        self, window: TimeWindow, limit: int, starting_after: str | None = None
    ) -> Page:
        result = await self._list_created(stripe.PaymentIntent, window, limit, starting_after)
        items = [payment_intent_record(obj) for obj in _field(result, "data") or []]
        return Page(items=items, has_more=bool(_field(result, "has_more")))

    async def fetch_charges(
        self, window: TimeWindow, limit: int, starting_after: str | None = None
    ) -> Page:
        result = await self._list_created(stripe.Charge, window, limit, starting_after)
        items = [charge_record(obj) for obj in _field(result, "data") or []]
        return Page(items=items, has_more=bool(_field(result, "has_more")))

    async def get_balance(self) -> BalanceSnapshot:
        """Balance in the account's first currency."""
        balance = await self._call(stripe.Balance.retrieve)
        return BalanceSnapshot(
            available=_first_amount(_field(balance, "available")),
            pending=_first_amount(_field(balance, "pending")),
        )

    async def list_payouts(self, limit: int = 10) -> list[Payout]:
        result = await self._call(stripe.Payout.list, limit=limit)
        return [payout_record(obj) for obj in _field(result, "data") or []]

    async def list_pending_payouts(self) -> list[Payout]:
        result = await self._call(stripe.Payout.list, limit=PENDING_PAYOUT_LIMIT, status="pending")
        return [payout_record(obj) for obj in _field(result, "data") or []]
