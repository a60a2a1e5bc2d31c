"""Normalised views of Stripe objects used by the aggregation core."""
from typing import Literal

from pydantic import BaseModel, ConfigDict

PAYMENT_INTENT = "payment_intent"
CHARGE = "charge"
SUCCEEDED = "succeeded"


class TransactionRecord(BaseModel):
    """A PaymentIntent-like or Charge-like record.

    ``customer_id`` is already unwrapped from either a string reference or an
    expanded customer object. ``linked_charge_id`` is only set for payment
    intents and names the charge the intent settled into.
    """
    model_config = ConfigDict(frozen=True)

    id: str
    kind: Literal["payment_intent", "charge"]
    status: str
    created: int
    amount: int | None = None
    amount_received: int | None = None
    paid: bool = False
    customer_id: str | None = None
    receipt_email: str | None = None
    billing_email: str | None = None
    linked_charge_id: str | None = None

    @property
    def is_payment_intent(self) -> bool:
        return self.kind == PAYMENT_INTENT


class Page(BaseModel):
    items: list[TransactionRecord]
    has_more: bool = False


class BalanceSnapshot(BaseModel):
    available: int = 0
    pending: int = 0

    @property
    def total(self) -> int:
        return self.available + self.pending


class Payout(BaseModel):
    id: str
    amount: int
    status: str
    arrival_date: int
    description: str | None = None
