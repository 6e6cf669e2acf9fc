"""Command errors and the replies users see for them."""
import logging

import discord
from discord import app_commands
from discord.ext import commands

log = logging.getLogger(__name__)

MISSING_PERMISSIONS = '❌ You need the "Manage Messages" permission to use this command.'
GUILD_ONLY = "❌ This command can only be used in a server."
GENERIC_FAILURE = "❌ An error occurred while processing the command."

_WRAPPERS = (commands.HybridCommandError, commands.CommandInvokeError, app_commands.CommandInvokeError)


class StickyNotConfigured(commands.CommandError):
    def __init__(self, channel):
        self.channel = channel
        super().__init__(f"No sticky message found in {channel}.")


def unwrap(error: Exception) -> Exception:
    # hybrid commands nest the app_commands wrapper inside their own
    while isinstance(error, _WRAPPERS):
        error = error.original
    return error


def error_text(error: Exception):
    """Reply text for a known command error, or None if it is unexpected."""
    if isinstance(error, (commands.MissingPermissions, app_commands.MissingPermissions)):
        return MISSING_PERMISSIONS
    if isinstance(error, (commands.NoPrivateMessage, app_commands.NoPrivateMessage)):
        return GUILD_ONLY
    if isinstance(error, StickyNotConfigured):
        return f"❌ No sticky message found in {error.channel.mention}."
    if isinstance(error, commands.UserInputError):
        return f"❌ {error}"
    return None


async def reply_with_error(ctx: commands.Context, error: Exception, tag: str) -> str:
    error = unwrap(error)
    text = error_text(error)
    if text is None:
        log.error("[%s] Error handling command %s", tag, ctx.command, exc_info=error)
        text = GENERIC_FAILURE

    try:
        await ctx.reply(text, ephemeral=True, mention_author=False)
    except discord.HTTPException:
        log.exception("[%s] Failed to send error response", tag)
    return text
