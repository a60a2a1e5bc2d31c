import discord
from discord import app_commands

from revenue_bot.commands.common import COLOR_ERROR, COLOR_SUCCESS, base_embed
from revenue_bot.core.permissions import require_role
from revenue_bot.schemas.stats import RevenueSummary
from revenue_bot.services.expenses import get_total_expenses
from revenue_bot.services.formatting import format_currency, format_dollars, format_expense
from revenue_bot.services.revenue import get_revenue_summary


def build_revenue_embed(summary: RevenueSummary, guild: discord.Guild | None = None) -> discord.Embed:
    color = COLOR_SUCCESS if summary.is_profitable else COLOR_ERROR
    marker = "✅" if summary.is_profitable else "❌"

    embed = base_embed("💰 Revenue Summary", guild, color=color)
    embed.add_field(name="📈 Total Revenue", value=format_currency(summary.total_revenue_cents), inline=False)
    embed.add_field(name="💸 Total Expenses", value=format_expense(summary.total_expenses), inline=False)
    embed.add_field(
        name=f"{marker} True Total (Profit/Loss)",
        value=f"**{format_dollars(summary.true_total)}**",
        inline=False,
    )
    embed.add_field(
        name="📊 Breakdown",
        value=(
            f"**Available:** {format_currency(summary.available)}\n"
            f"**Pending:** {format_currency(summary.pending)}\n"
            f"**Paid Payouts:** {format_currency(summary.paid_payouts_total)}\n"
            f"**Pending Payouts:** {format_currency(summary.pending_payouts_total)}"
        ),
        inline=False,
    )
    return embed


@app_commands.command(name="revenue", description="Show total revenue, expenses and profit/loss")
@require_role()
async def revenue(interaction: discord.Interaction) -> None:
    await interaction.response.defer(thinking=True)
    services = interaction.client.services

    async with services.session() as db:
        total_expenses = await get_total_expenses(db)
    summary = await get_revenue_summary(services.stripe, total_expenses)

    await interaction.followup.send(embed=build_revenue_embed(summary, interaction.guild))
