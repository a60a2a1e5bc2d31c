"""Seed script: imports the initial expense history.

Idempotent: skips the import when rows from a previous run exist.
Run: python backend/scripts/seed.py
"""
import asyncio
import os
import sys
from datetime import datetime, timedelta, timezone
from decimal import Decimal

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from revenue_bot.core.config import settings
from revenue_bot.db.session import build_engine, build_sessionmaker, init_db
from revenue_bot.models.expense import Expense
from revenue_bot.services.formatting import format_expense

SEED_AUTHOR = "System (Initial Import)"
NOW = datetime.now(timezone.utc)

# Oldest first.
INITIAL_EXPENSES = [
    (Decimal("20"), "Dripfeed"),
    (Decimal("20"), "Dripfeed"),
    (Decimal("40"), "Tiktok Ads"),
    (Decimal("20"), "Dripfeed"),
    (Decimal("20"), "Dripfeed"),
    (Decimal("20"), "Dripfeed"),
    (Decimal("20"), "Dripfeed"),
    (Decimal("50"), "Dripfeed"),
    (Decimal("50"), "Dripfeed"),
    (Decimal("50"), "Dripfeed"),
]


async def _already_seeded(db: AsyncSession) -> bool:
    result = await db.execute(select(func.count()).select_from(Expense).where(Expense.created_by == SEED_AUTHOR))
    return result.scalar_one() > 0


async def main() -> None:
    engine = build_engine(settings)
    SessionLocal = build_sessionmaker(engine)
    await init_db(engine)

    async with SessionLocal() as db:
        if await _already_seeded(db):
            print("  [skip] Initial expenses already imported")
            await engine.dispose()
            return

        print("\n── Expenses ──")
        count = len(INITIAL_EXPENSES)
        for i, (amount, category) in enumerate(INITIAL_EXPENSES):
            # Stagger timestamps so newest-first listings keep the import order.
            created_at = NOW - timedelta(seconds=count - i)
            db.add(Expense(amount=amount, category=category, created_by=SEED_AUTHOR, created_at=created_at))
            print(f"  [new]  {format_expense(amount)} {category}")
        await db.commit()

    await engine.dispose()
    print(f"\nSeed complete: {count} expenses added.")


if __name__ == "__main__":
    asyncio.run(main())
