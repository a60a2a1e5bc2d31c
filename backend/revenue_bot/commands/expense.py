"""/expense command group: add, list, remove, total."""
import logging

import discord
from discord import app_commands

from revenue_bot.commands.common import (
    COLOR_SUCCESS,
    EMBED_DESCRIPTION_LIMIT,
    EMBED_FIELD_LIMIT,
    OwnedView,
    base_embed,
    clip,
    error_embed,
    failure_message,
    send_error,
)
from revenue_bot.core.permissions import require_role
from revenue_bot.models.expense import Expense
from revenue_bot.schemas.expense import CategoryTotal
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
from revenue_bot.services.formatting import format_dollars, format_expense

logger = logging.getLogger(__name__)

MAX_SELECT_OPTIONS = 25
MAX_EXISTING_CATEGORIES = MAX_SELECT_OPTIONS - 2
REMOVE_CANDIDATES = 25
OPTION_TEXT_LIMIT = 100
CATEGORY_LABEL_PREVIEW = 50

expense = app_commands.Group(name="expense", description="Manage expenses")


# ─── Embeds and options ───

def category_options(categories: list[str]) -> list[discord.SelectOption]:
    """Sentinel choices first, then up to 23 existing categories."""
    options = [
        discord.SelectOption(
            label="➕ Create New Category", value=NEW_CATEGORY,
            description="Add expense with a new category",
        ),
        discord.SelectOption(
            label="📝 No Category", value=NO_CATEGORY,
            description="Add expense without a category",
        ),
    ]
    for category in categories[:MAX_EXISTING_CATEGORIES]:
        options.append(discord.SelectOption(
            label=clip(category, OPTION_TEXT_LIMIT),
            value=category,
            description=clip(f"Use existing category: {category}", OPTION_TEXT_LIMIT),
        ))
    return options


def removal_option(item: Expense) -> discord.SelectOption:
    category = item.category or "No Category"
    return discord.SelectOption(
        label=f"{format_dollars(item.amount)} - {clip(category, CATEGORY_LABEL_PREVIEW)}",
        value=str(item.id),
        description=f"ID: #{item.id}",
    )


def build_expense_added_embed(item: Expense, guild: discord.Guild | None = None) -> discord.Embed:
    embed = base_embed("✅ Expense Added", guild, color=COLOR_SUCCESS)
    embed.add_field(
        name="Expense Details",
        value=(
            f"**Amount:** {format_expense(item.amount)}\n"
            f"**Category:** {item.category or 'None'}\n"
            f"**Expense ID:** #{item.id}\n"
            f"**Created By:** {item.created_by or 'Unknown'}"
        ),
        inline=False,
    )
    return embed


def build_expense_list_embed(items: list[Expense], guild: discord.Guild | None = None) -> discord.Embed:
    embed = base_embed("📋 Expenses List", guild)
    if not items:
        embed.description = "No expenses found."
        return embed

    lines = [
        f"{n}. **#{item.id}** - {format_expense(item.amount)} - {item.category or 'No Category'}"
        f" - {discord.utils.format_dt(item.created_at, style='R')}"
        for n, item in enumerate(items, start=1)
    ]
    embed.description = clip("\n".join(lines), EMBED_DESCRIPTION_LIMIT)
    embed.set_footer(text=f"Showing {len(items)} expense{'s' if len(items) != 1 else ''}")
    return embed


def build_expense_total_embed(
    total, by_category: list[CategoryTotal], guild: discord.Guild | None = None
) -> discord.Embed:
    embed = base_embed("💰 Total Expenses", guild)
    embed.add_field(name="💸 Total Expenses", value=f"**{format_expense(total)}**", inline=False)
    if by_category:
        lines = [f"- **{row.category or 'Uncategorized'}**: {format_dollars(row.total)}" for row in by_category]
        embed.add_field(name="📊 By Category", value=clip("\n".join(lines), EMBED_FIELD_LIMIT), inline=False)
    return embed


def build_removal_embed(expense_id: int, removed: Expense | None) -> discord.Embed:
    if removed is None:
        return error_embed(f"Expense **#{expense_id}** could not be found.", title="Expense Not Found")
    embed = discord.Embed(
        title="✅ Expense Removed",
        description=f"Expense **#{expense_id}** has been successfully removed.",
        color=COLOR_SUCCESS,
    )
    embed.add_field(name="💵 Amount", value=format_expense(removed.amount), inline=True)
    embed.add_field(name="📁 Category", value=removed.category or "No Category", inline=True)
    return embed


# ─── Add flow: category select -> modal ───

class ExpenseModal(discord.ui.Modal, title="Add New Expense"):
    def __init__(self, selection: str) -> None:
        super().__init__()
        self.selection = selection

        self.amount = discord.ui.TextInput(
            label="Amount ($) - Enter POSITIVE number only",
            placeholder="Enter amount (e.g. 50.00) - DO NOT use negative sign",
            required=True,
            max_length=20,
        )
        if selection == NEW_CATEGORY:
            self.category = discord.ui.TextInput(
                label="Category (e.g. Dripfeed, TikTok Ads)",
                placeholder="Enter category name",
                required=True,
                max_length=100,
            )
        elif selection == NO_CATEGORY:
            self.category = discord.ui.TextInput(
                label="Category (optional)",
                placeholder="Leave empty for no category",
                required=False,
                max_length=100,
            )
        else:
            # Existing category: prefilled but editable.
            self.category = discord.ui.TextInput(
                label="Category",
                placeholder=clip(selection, OPTION_TEXT_LIMIT),
                default=selection,
                required=False,
                max_length=100,
            )
        self.add_item(self.amount)
        self.add_item(self.category)

    async def on_submit(self, interaction: discord.Interaction) -> None:
        try:
            amount = parse_expense_amount(self.amount.value)
            category = resolve_category(self.selection, self.category.value)
        except ExpenseInputError as exc:
            await interaction.response.send_message(embed=error_embed(str(exc), title="Invalid Input"), ephemeral=True)
            return

        await interaction.response.defer(thinking=True)
        async with interaction.client.services.session() as db:
            item = await add_expense(db, amount, category, created_by=str(interaction.user))
        await interaction.followup.send(embed=build_expense_added_embed(item, interaction.guild))

    async def on_error(self, interaction: discord.Interaction, error: Exception) -> None:
        logger.error("Expense modal failed for %s", interaction.user, exc_info=error)
        await send_error(interaction, failure_message("expense add:submit"))


class CategorySelect(discord.ui.Select):
    def __init__(self, categories: list[str]) -> None:
        super().__init__(
            placeholder="Select a category or create new",
            min_values=1,
            max_values=1,
            options=category_options(categories),
        )

    async def callback(self, interaction: discord.Interaction) -> None:
        await interaction.response.send_modal(ExpenseModal(self.values[0]))


class CategoryView(OwnedView):
    def __init__(self, owner_id: int, categories: list[str]) -> None:
        super().__init__(owner_id, action="expense add")
        self.add_item(CategorySelect(categories))


# ─── Remove flow ───

class RemoveSelect(discord.ui.Select):
    def __init__(self, items: list[Expense]) -> None:
        super().__init__(
            placeholder="Select an expense to remove",
            min_values=1,
            max_values=1,
            options=[removal_option(item) for item in items[:REMOVE_CANDIDATES]],
        )

    async def callback(self, interaction: discord.Interaction) -> None:
        await interaction.response.defer()
        expense_id = int(self.values[0])
        async with interaction.client.services.session() as db:
            removed = await get_expense(db, expense_id)
            if removed is not None and not await delete_expense(db, expense_id):
                removed = None

        await interaction.edit_original_response(view=None)
        await interaction.followup.send(embed=build_removal_embed(expense_id, removed))


class RemoveView(OwnedView):
    def __init__(self, owner_id: int, items: list[Expense]) -> None:
        super().__init__(owner_id, action="expense remove:select")
        self.add_item(RemoveSelect(items))


# ─── Subcommands ───

@expense.command(name="add", description="Add a new expense (opens category selection)")
@require_role()
async def expense_add(interaction: discord.Interaction) -> None:
    await interaction.response.defer()
    async with interaction.client.services.session() as db:
        categories = await list_categories(db)

    view = CategoryView(interaction.user.id, categories)
    await interaction.followup.send("📋 **Select a category for your expense:**", view=view)


@expense.command(name="list", description="List expenses, newest first")
@app_commands.describe(limit="Number of expenses to show (default: 10)")
@require_role()
async def expense_list(interaction: discord.Interaction, limit: app_commands.Range[int, 1, 25] = 10) -> None:
    await interaction.response.defer(thinking=True)
    async with interaction.client.services.session() as db:
        items = await list_expenses(db, limit)
    await interaction.followup.send(embed=build_expense_list_embed(items, interaction.guild))


@expense.command(name="remove", description="Remove an expense (opens selection menu)")
@require_role()
async def expense_remove(interaction: discord.Interaction) -> None:
    await interaction.response.defer()
    async with interaction.client.services.session() as db:
        items = await list_expenses(db, REMOVE_CANDIDATES)

    if not items:
        await interaction.followup.send("❌ No expenses found to remove.", ephemeral=True)
        return

    view = RemoveView(interaction.user.id, items)
    await interaction.followup.send("🗑️ **Select an expense to remove:**", view=view)


@expense.command(name="total", description="Show total expenses")
@require_role()
async def expense_total(interaction: discord.Interaction) -> None:
    await interaction.response.defer(thinking=True)
    async with interaction.client.services.session() as db:
        total = await get_total_expenses(db)
        by_category = await get_expenses_by_category(db)
    await interaction.followup.send(embed=build_expense_total_embed(total, by_category, interaction.guild))
