from revenue_bot.models.expense import Expense

__all__ = [
    "Expense",
]
