from discord import app_commands

from revenue_bot.commands import balance, daily, expense, revenue, stats

COMMANDS = (
    balance.balance,
    revenue.revenue,
    daily.daily,
    stats.stats,
    expense.expense,
)


def register_commands(tree: app_commands.CommandTree) -> None:
    for command in COMMANDS:
        tree.add_command(command)
