"""Expense ledger service.

All functions accept an AsyncSession; callers own the transaction scope.
Amounts are positive dollar values; an expense is always an outflow.
"""
import logging
import re
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from revenue_bot.models.expense import Expense
from revenue_bot.schemas.expense import CategoryTotal

logger = logging.getLogger(__name__)

NEW_CATEGORY = "__new_category__"
NO_CATEGORY = "__no_category__"
MAX_CATEGORY_LENGTH = 100
MAX_AMOUNT = Decimal("99999999.99")  # NUMERIC(10, 2)

_AMOUNT_NOISE = re.compile(r"[\s$,]")


class ExpenseInputError(ValueError):
    """User-supplied expense data failed validation."""


# ─── Input validation ───

def parse_expense_amount(raw: str) -> Decimal:
    """Parse a user-typed amount such as ``50``, ``$50.00`` or ``1,200.5``.

    Negative input is rejected rather than silently flipped.
    """
    text = (raw or "").strip()
    if "-" in text:
        raise ExpenseInputError("Please enter a positive number only. Do not use a negative sign.")

    try:
        amount = Decimal(_AMOUNT_NOISE.sub("", text))
    except InvalidOperation:
        raise ExpenseInputError("Please enter a valid number (e.g. 50.00).") from None

    if not amount.is_finite() or amount <= 0:
        raise ExpenseInputError("Please enter a positive number (e.g. 50.00).")

    amount = amount.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    if amount <= 0 or amount > MAX_AMOUNT:
        raise ExpenseInputError(f"Amount must be between $0.01 and ${MAX_AMOUNT:,}.")
    return amount


def resolve_category(selection: str, typed: str | None) -> str:
    """Pick the category for a new expense from the select menu and modal.

    ``selection`` is the select-menu value (an existing category or one of
    the sentinels); ``typed`` is what the user left in the modal field.
    """
    typed = (typed or "").strip()
    if selection in (NEW_CATEGORY, NO_CATEGORY):
        category = typed
    else:
        category = typed or selection.strip()

    if not category:
        raise ExpenseInputError("Please enter a category name (e.g. Dripfeed, TikTok Ads).")
    if len(category) > MAX_CATEGORY_LENGTH:
        raise ExpenseInputError(f"Category names are limited to {MAX_CATEGORY_LENGTH} characters.")
    return category


# ─── Writes ───

async def add_expense(
    db: AsyncSession,
    amount: Decimal,
    category: str | None = None,
    created_by: str | None = None,
) -> Expense:
    expense = Expense(amount=amount, category=category or None, created_by=created_by or None)
    db.add(expense)
    await db.commit()
    await db.refresh(expense)
    logger.info("Expense #%s added: %s (%s) by %s", expense.id, amount, category, created_by)
    return expense


async def delete_expense(db: AsyncSession, expense_id: int) -> bool:
    result = await db.execute(delete(Expense).where(Expense.id == expense_id).returning(Expense.id))
    deleted = result.scalar_one_or_none() is not None
    await db.commit()
    if deleted:
        logger.info("Expense #%s removed", expense_id)
    return deleted


# ─── Reads ───

async def get_expense(db: AsyncSession, expense_id: int) -> Expense | None:
    result = await db.execute(select(Expense).where(Expense.id == expense_id))
    return result.scalar_one_or_none()


async def list_expenses(db: AsyncSession, limit: int | None = None) -> list[Expense]:
    stmt = select(Expense).order_by(Expense.created_at.desc(), Expense.id.desc())
    if limit:
        stmt = stmt.limit(limit)
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def get_total_expenses(db: AsyncSession) -> Decimal:
    result = await db.execute(select(func.coalesce(func.sum(Expense.amount), 0)))
    return Decimal(result.scalar_one() or 0)


async def get_expenses_by_category(db: AsyncSession) -> list[CategoryTotal]:
    total = func.coalesce(func.sum(Expense.amount), 0).label("total")
    stmt = select(Expense.category, total).group_by(Expense.category).order_by(total.desc())
    result = await db.execute(stmt)
    return [CategoryTotal(category=category, total=Decimal(amount or 0)) for category, amount in result.all()]


async def list_categories(db: AsyncSession) -> list[str]:
    stmt = (
        select(Expense.category)
        .where(Expense.category.is_not(None))
        .distinct()
        .order_by(Expense.category)
    )
    result = await db.execute(stmt)
    return [category for category in result.scalars().all() if category]
