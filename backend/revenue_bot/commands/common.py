"""Shared embed and reply helpers for slash commands."""
import logging

import discord

logger = logging.getLogger(__name__)

COLOR_INFO = discord.Color.blurple()
COLOR_SUCCESS = discord.Color.green()
COLOR_ERROR = discord.Color.red()

EMBED_FIELD_LIMIT = 1024
EMBED_DESCRIPTION_LIMIT = 4096

GENERIC_FAILURE = "An error occurred while processing your request."

# Keyed by qualified command name, or by view/modal action.
FAILURE_MESSAGES = {
    "balance": "Failed to fetch Stripe balance. Please check the configuration.",
    "revenue": "Failed to fetch revenue data. Please check the configuration.",
    "daily": "Failed to generate daily stats. Please check the configuration.",
    "stats": "Failed to load the date picker. Please try again.",
    "stats:select": "Failed to fetch stats for the selected date. Please try again.",
    "expense add": "Failed to load categories. Please try again.",
    "expense add:submit": "Failed to add expense. Please try again.",
    "expense list": "Failed to list expenses. Please try again.",
    "expense remove": "Failed to load expenses. Please try again.",
    "expense remove:select": "Failed to remove expense. Please try again.",
    "expense total": "Failed to get total expenses. Please try again.",
}


def failure_message(action: str | None) -> str:
    return FAILURE_MESSAGES.get(action or "", GENERIC_FAILURE)


def clip(text: str, limit: int) -> str:
    if len(text) <= limit:
        return text
    return text[: limit - 3] + "..."


def guild_icon_url(guild: discord.Guild | None) -> str | None:
    if guild is None or guild.icon is None:
        return None
    return guild.icon.url


def base_embed(title: str, guild: discord.Guild | None = None, color: discord.Color = COLOR_INFO) -> discord.Embed:
    embed = discord.Embed(title=title, color=color)
    icon = guild_icon_url(guild)
    if icon:
        embed.set_thumbnail(url=icon)
    return embed


def error_embed(message: str, title: str = "Error") -> discord.Embed:
    return discord.Embed(title=f"❌ {title}", description=message, color=COLOR_ERROR)


async def send_error(interaction: discord.Interaction, message: str, title: str = "Error") -> None:
    """Reply with an error embed whether or not the interaction was answered."""
    embed = error_embed(message, title)
    try:
        if interaction.response.is_done():
            await interaction.followup.send(embed=embed, ephemeral=True)
        else:
            await interaction.response.send_message(embed=embed, ephemeral=True)
    except discord.HTTPException as exc:
        logger.warning("Could not deliver error reply: %s", exc)


class OwnedView(discord.ui.View):
    """View usable only by the member who ran the command.

    Component callbacks that raise are logged and answered with the
    failure message registered under ``action``.
    """

    def __init__(self, owner_id: int, action: str, timeout: float | None = 180) -> None:
        super().__init__(timeout=timeout)
        self.owner_id = owner_id
        self.action = action

    async def interaction_check(self, interaction: discord.Interaction) -> bool:
        if interaction.user.id != self.owner_id:
            await interaction.response.send_message(
                "Only the member who ran this command can use this menu.", ephemeral=True
            )
            return False
        return True

    async def on_error(self, interaction: discord.Interaction, error: Exception, item: discord.ui.Item) -> None:
        logger.error("Component %s failed for %s", self.action, interaction.user, exc_info=error)
        await send_error(interaction, failure_message(self.action))
