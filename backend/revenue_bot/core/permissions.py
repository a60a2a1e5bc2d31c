"""Role gate for every bot command."""
import logging

import discord
from discord import app_commands

logger = logging.getLogger(__name__)

PERMISSION_DENIED = (
    "You do not have permission to use this bot. "
    "You need the required role to access these commands."
)


class MissingRequiredRole(app_commands.CheckFailure):
    """Raised when the invoking member lacks the configured role."""


def has_required_role(interaction: discord.Interaction, role_id: int | None) -> bool:
    if role_id is None:
        logger.warning("DISCORD_REQUIRED_ROLE_ID is not set; denying %s", interaction.user)
        return False
    if interaction.guild is None:
        return False

    member = interaction.user
    if not isinstance(member, discord.Member):
        return False
    return member.get_role(role_id) is not None


def require_role():
    """app_commands check reading the role id from the bot's settings."""
    async def predicate(interaction: discord.Interaction) -> bool:
        role_id = interaction.client.services.settings.DISCORD_REQUIRED_ROLE_ID
        if not has_required_role(interaction, role_id):
            raise MissingRequiredRole(PERMISSION_DENIED)
        return True
    return app_commands.check(predicate)
