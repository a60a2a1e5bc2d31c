"""Discord client: command tree, startup hooks and the global error handler."""
import logging

import discord
from discord import app_commands

from revenue_bot.commands.common import failure_message, send_error
from revenue_bot.commands.router import register_commands
from revenue_bot.core.deps import BotServices
from revenue_bot.core.permissions import PERMISSION_DENIED
from revenue_bot.db.session import init_db

logger = logging.getLogger(__name__)

PRESENCE = discord.Game("Financial Tracking")


class RevenueBot(discord.Client):
    def __init__(self, services: BotServices) -> None:
        super().__init__(intents=discord.Intents.default(), application_id=services.settings.DISCORD_CLIENT_ID)
        self.services = services
        self.tree = app_commands.CommandTree(self)
        self.tree.error(self.on_app_command_error)
        register_commands(self.tree)

    async def setup_hook(self) -> None:
        await init_db(self.services.engine)
        await self.sync_commands()

    async def sync_commands(self) -> None:
        guild_id = self.services.settings.DISCORD_GUILD_ID
        if guild_id:
            guild = discord.Object(id=guild_id)
            self.tree.copy_global_to(guild=guild)
            synced = await self.tree.sync(guild=guild)
            # Drop global registrations so the guild does not list every command twice.
            self.tree.clear_commands(guild=None)
            await self.tree.sync()
            logger.info("Synced %d command(s) to guild %s", len(synced), guild_id)
        else:
            synced = await self.tree.sync()
            logger.info("Synced %d global command(s); propagation can take up to an hour", len(synced))

    async def on_ready(self) -> None:
        logger.info("Bot logged in as %s", self.user)
        logger.info("Connected to %d guild(s)", len(self.guilds))
        await self.change_presence(status=discord.Status.online, activity=PRESENCE)

    async def close(self) -> None:
        await super().close()
        await self.services.close()

    async def on_app_command_error(
        self, interaction: discord.Interaction, error: app_commands.AppCommandError
    ) -> None:
        if isinstance(error, app_commands.CheckFailure):
            logger.info("Permission denied for %s on /%s", interaction.user, _command_name(interaction))
            await send_error(interaction, str(error) or PERMISSION_DENIED, title="Permission Denied")
            return

        name = _command_name(interaction)
        logger.error("Command /%s failed", name, exc_info=error)
        await send_error(interaction, failure_message(name))


def _command_name(interaction: discord.Interaction) -> str | None:
    command = interaction.command
    return command.qualified_name if command else None
