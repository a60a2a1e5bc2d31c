"""Tests for the expense ledger service.

Input parsing is tested directly; persistence uses mocked AsyncSession
objects following the existing test patterns.
"""
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest

from revenue_bot.models.expense import Expense
from revenue_bot.services.expenses import (
    NEW_CATEGORY,
    NO_CATEGORY,
    ExpenseInputError,
    add_expense,
    delete_expense,
    get_expense,
    get_expenses_by_category,
    get_total_expenses,
    list_categories,
    list_expenses,
    parse_expense_amount,
    resolve_category,
)


# ─── Helpers ──────────────────────────────────────────────────────────────────

def _mock_db(result: MagicMock | None = None) -> MagicMock:
    db = MagicMock()
    db.execute = AsyncMock(return_value=result or MagicMock())
    db.commit = AsyncMock()
    db.refresh = AsyncMock()
    return db


def _executed_sql(db: MagicMock) -> str:
    stmt = db.execute.await_args.args[0]
    return str(stmt)


# ─── parse_expense_amount ─────────────────────────────────────────────────────

@pytest.mark.parametrize("raw, expected", [
    ("50", Decimal("50.00")),
    ("$50.00", Decimal("50.00")),
    (" 12.345 ", Decimal("12.35")),
    ("1,200.5", Decimal("1200.50")),
    ("0.01", Decimal("0.01")),
])
def test_parse_valid_amounts(raw, expected):
    assert parse_expense_amount(raw) == expected


def test_negative_sign_is_rejected_not_flipped():
    with pytest.raises(ExpenseInputError, match="negative sign"):
        parse_expense_amount("-50")


@pytest.mark.parametrize("raw", ["", "abc", "0", "0.00", "0.004", "NaN", "Infinity", "$"])
def test_parse_rejects_invalid_amounts(raw):
    with pytest.raises(ExpenseInputError):
        parse_expense_amount(raw)


def test_unparseable_amount_hides_decimal_error():
    with pytest.raises(ExpenseInputError, match="valid number") as exc_info:
        parse_expense_amount("abc")

    assert exc_info.value.__cause__ is None
    assert exc_info.value.__suppress_context__ is True


def test_parse_rejects_amount_beyond_column_precision():
    with pytest.raises(ExpenseInputError):
        parse_expense_amount("100000000")


# ─── resolve_category ─────────────────────────────────────────────────────────

def test_new_category_uses_typed_value():
    assert resolve_category(NEW_CATEGORY, "  TikTok Ads ") == "TikTok Ads"


@pytest.mark.parametrize("selection", [NEW_CATEGORY, NO_CATEGORY])
def test_sentinel_with_blank_input_is_rejected(selection):
    with pytest.raises(ExpenseInputError, match="category name"):
        resolve_category(selection, "   ")


def test_existing_category_falls_back_to_selection():
    assert resolve_category("Dripfeed", "") == "Dripfeed"
    assert resolve_category("Dripfeed", None) == "Dripfeed"


def test_existing_category_can_be_edited():
    assert resolve_category("Dripfeed", "Dripfeed Boost") == "Dripfeed Boost"


def test_overlong_category_is_rejected():
    with pytest.raises(ExpenseInputError):
        resolve_category(NEW_CATEGORY, "x" * 101)


# ─── Persistence ──────────────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_add_expense_commits_and_refreshes():
    db = _mock_db()

    expense = await add_expense(db, Decimal("50.00"), "Dripfeed", created_by="alice")

    assert isinstance(expense, Expense)
    assert expense.amount == Decimal("50.00")
    assert expense.category == "Dripfeed"
    assert expense.created_by == "alice"
    db.add.assert_called_once_with(expense)
    db.commit.assert_awaited_once()
    db.refresh.assert_awaited_once_with(expense)


@pytest.mark.asyncio
async def test_add_expense_stores_blank_category_as_null():
    expense = await add_expense(_mock_db(), Decimal("5.00"), "")
    assert expense.category is None


@pytest.mark.asyncio
@pytest.mark.parametrize("returned_id, expected", [(7, True), (None, False)])
async def test_delete_expense_reports_whether_a_row_was_removed(returned_id, expected):
    result = MagicMock()
    result.scalar_one_or_none.return_value = returned_id
    db = _mock_db(result)

    assert await delete_expense(db, 7) is expected
    db.commit.assert_awaited_once()


@pytest.mark.asyncio
async def test_total_expenses():
    result = MagicMock()
    result.scalar_one.return_value = Decimal("290.00")
    db = _mock_db(result)

    assert await get_total_expenses(db) == Decimal("290.00")
    assert "sum(expenses.amount)" in _executed_sql(db)


@pytest.mark.asyncio
async def test_total_expenses_empty_table_is_zero():
    result = MagicMock()
    result.scalar_one.return_value = 0
    db = _mock_db(result)

    total = await get_total_expenses(db)

    assert total == Decimal("0")
    assert isinstance(total, Decimal)


@pytest.mark.asyncio
async def test_list_expenses_newest_first_with_limit():
    rows = [MagicMock(spec=Expense), MagicMock(spec=Expense)]
    result = MagicMock()
    result.scalars.return_value.all.return_value = rows
    db = _mock_db(result)

    assert await list_expenses(db, 10) == rows

    sql = _executed_sql(db)
    assert "ORDER BY expenses.created_at DESC" in sql
    assert "LIMIT" in sql


@pytest.mark.asyncio
async def test_list_expenses_without_limit():
    result = MagicMock()
    result.scalars.return_value.all.return_value = []
    db = _mock_db(result)

    assert await list_expenses(db) == []
    assert "LIMIT" not in _executed_sql(db)


@pytest.mark.asyncio
async def test_expenses_by_category():
    result = MagicMock()
    result.all.return_value = [("Dripfeed", Decimal("250.00")), (None, Decimal("40.00"))]
    db = _mock_db(result)

    totals = await get_expenses_by_category(db)

    assert [(t.category, t.total) for t in totals] == [("Dripfeed", Decimal("250.00")), (None, Decimal("40.00"))]
    sql = _executed_sql(db)
    assert "GROUP BY expenses.category" in sql
    assert "ORDER BY total DESC" in sql


@pytest.mark.asyncio
async def test_list_categories_skips_null():
    result = MagicMock()
    result.scalars.return_value.all.return_value = ["Dripfeed", "Tiktok Ads"]
    db = _mock_db(result)

    assert await list_categories(db) == ["Dripfeed", "Tiktok Ads"]
    sql = _executed_sql(db)
    assert "DISTINCT" in sql
    assert "expenses.category IS NOT NULL" in sql


@pytest.mark.asyncio
async def test_get_expense_by_id():
    row = MagicMock(spec=Expense)
    result = MagicMock()
    result.scalar_one_or_none.return_value = row
    db = _mock_db(result)

    assert await get_expense(db, 3) is row
    assert "WHERE expenses.id = " in _executed_sql(db)
