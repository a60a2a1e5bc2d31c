"""Schemas for daily statistics and revenue views."""
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, model_validator

from revenue_bot.schemas.stripe import TransactionRecord


class TimeWindow(BaseModel):
    """Closed interval of creation timestamps, inclusive on both ends."""
    model_config = ConfigDict(frozen=True)

    start: int
    end: int

    @model_validator(mode="after")
    def _check_order(self) -> "TimeWindow":
        if self.start > self.end:
            raise ValueError("window start must not be after its end")
        return self

    def as_created_filter(self) -> dict[str, int]:
        return {"gte": self.start, "lte": self.end}


class DateOption(BaseModel):
    value: str
    label: str


class ReconciledTransactions(BaseModel):
    payment_intents: list[TransactionRecord]
    standalone_charges: list[TransactionRecord]


class DailyMetrics(BaseModel):
    gross_volume: int = 0
    customers: int = 0
    payments: int = 0


class RevenueSummary(BaseModel):
    available: int
    pending: int
    paid_payouts_total: int
    pending_payouts_total: int
    total_revenue_cents: int
    total_revenue: Decimal
    total_expenses: Decimal
    true_total: Decimal

    @property
    def is_profitable(self) -> bool:
        return self.true_total >= 0
