"""/stats: pick one of the last 25 local dates and show its metrics."""
import discord
from discord import app_commands

from revenue_bot.commands.common import OwnedView
from revenue_bot.commands.daily import build_metrics_embed
from revenue_bot.core.permissions import require_role
from revenue_bot.schemas.stats import DateOption
from revenue_bot.services.daily_stats import get_stats_for_date
from revenue_bot.services.time_window import format_calendar_label, parse_local_date, recent_local_dates


class DateSelect(discord.ui.Select):
    def __init__(self, options: list[DateOption]) -> None:
        super().__init__(
            placeholder="Select a date to view stats",
            min_values=1,
            max_values=1,
            options=[discord.SelectOption(label=o.label, value=o.value) for o in options],
        )

    async def callback(self, interaction: discord.Interaction) -> None:
        await interaction.response.defer()
        services = interaction.client.services
        offset = services.settings.TIMEZONE_OFFSET_HOURS

        selected = parse_local_date(self.values[0])
        metrics = await get_stats_for_date(services.stripe, selected, offset)

        embed = build_metrics_embed(
            "📊 Daily Stats",
            format_calendar_label(selected, offset, include_year=True),
            metrics,
            interaction.guild,
        )
        await interaction.edit_original_response(content=None, embed=embed, view=None)


class DatePickerView(OwnedView):
    def __init__(self, owner_id: int, options: list[DateOption]) -> None:
        super().__init__(owner_id, action="stats:select")
        self.add_item(DateSelect(options))


@app_commands.command(name="stats", description="View stats for a specific date")
@require_role()
async def stats(interaction: discord.Interaction) -> None:
    offset = interaction.client.services.settings.TIMEZONE_OFFSET_HOURS
    view = DatePickerView(interaction.user.id, recent_local_dates(offset))
    await interaction.response.send_message("📅 **Select a date to view stats:**", view=view, ephemeral=True)
