import discord
from discord import app_commands

from revenue_bot.commands.common import base_embed
from revenue_bot.core.permissions import require_role
from revenue_bot.schemas.stats import DailyMetrics
from revenue_bot.services.daily_stats import get_today_stats
from revenue_bot.services.formatting import format_currency
from revenue_bot.services.time_window import format_calendar_label


def build_metrics_embed(
    title: str,
    heading: str,
    metrics: DailyMetrics,
    guild: discord.Guild | None = None,
) -> discord.Embed:
    """Embed for one day's metrics; shared with /stats."""
    embed = base_embed(title, guild)
    embed.description = f"**{heading}**"
    embed.add_field(name="💰 Gross Volume", value=format_currency(metrics.gross_volume), inline=False)
    embed.add_field(name="👥 Customers", value=str(metrics.customers), inline=False)
    embed.add_field(name="💳 Payments", value=str(metrics.payments), inline=False)
    return embed


@app_commands.command(name="daily", description="Show today's stats (gross volume, customers, and payments)")
@require_role()
async def daily(interaction: discord.Interaction) -> None:
    await interaction.response.defer(thinking=True)
    services = interaction.client.services
    offset = services.settings.TIMEZONE_OFFSET_HOURS

    today, metrics = await get_today_stats(services.stripe, offset)

    heading = f"Today {format_calendar_label(today, offset)}"
    await interaction.followup.send(embed=build_metrics_embed("📊 Today's Stats", heading, metrics, interaction.guild))
