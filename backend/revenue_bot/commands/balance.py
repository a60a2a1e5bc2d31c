import logging

import discord
from discord import app_commands

from revenue_bot.commands.common import base_embed
from revenue_bot.core.permissions import require_role
from revenue_bot.schemas.stripe import BalanceSnapshot, Payout
from revenue_bot.services.formatting import format_currency
from revenue_bot.services.time_window import format_payout_date

logger = logging.getLogger(__name__)

PAYOUT_FETCH_LIMIT = 10
RECENT_PAYOUTS_SHOWN = 5


def payout_line(payout: Payout, offset_hours: int) -> str:
    status = "Paid" if payout.status == "paid" else payout.status
    return f"- {format_currency(payout.amount)} - {status} - {format_payout_date(payout.arrival_date, offset_hours)}"


def build_balance_embed(
    balance: BalanceSnapshot,
    payouts: list[Payout],
    pending_payouts: list[Payout],
    offset_hours: int,
    guild: discord.Guild | None = None,
) -> discord.Embed:
    in_transit = sum(p.amount for p in pending_payouts)

    embed = base_embed("💰 Stripe Balance", guild)
    embed.add_field(
        name="Available Funds",
        value=(
            f"**Available to Pay Out:** {format_currency(balance.available)}\n"
            f"**Available Soon (Estimated):** {format_currency(balance.pending)}\n"
            f"**In Transit Payouts:** {format_currency(in_transit)}"
        ),
        inline=False,
    )
    embed.add_field(name="Total Balance", value=format_currency(balance.total), inline=False)

    if payouts:
        lines = [payout_line(p, offset_hours) for p in payouts[:RECENT_PAYOUTS_SHOWN]]
        embed.add_field(name="Recent Payouts", value="\n".join(lines), inline=False)
    return embed


@app_commands.command(name="balance", description="Show Stripe balance and recent payouts")
@require_role()
async def balance(interaction: discord.Interaction) -> None:
    await interaction.response.defer(thinking=True)
    services = interaction.client.services

    snapshot = await services.stripe.get_balance()
    payouts = await services.stripe.list_payouts(PAYOUT_FETCH_LIMIT)
    pending_payouts = await services.stripe.list_pending_payouts()

    embed = build_balance_embed(
        snapshot, payouts, pending_payouts,
        services.settings.TIMEZONE_OFFSET_HOURS, interaction.guild,
    )
    await interaction.followup.send(embed=embed)
