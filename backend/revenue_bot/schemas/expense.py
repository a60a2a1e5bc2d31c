"""Pydantic schemas for the expense ledger."""
from decimal import Decimal

from pydantic import BaseModel


class CategoryTotal(BaseModel):
    category: str | None
    total: Decimal
