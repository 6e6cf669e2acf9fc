
import discord
from discord.ext import commands

from utils.constants import HELP_COLOR
from utils.errors import reply_with_error


def build_help_embed() -> discord.Embed:
    embed = discord.Embed(
        title="📌 Sticky Bot Help",
        description="A bot that creates sticky messages that reappear at the bottom of a channel when new messages are sent.",
        color=HELP_COLOR,
        timestamp=discord.utils.utcnow(),
    )
    embed.add_field(
        name="/sticky-set",
        value=(
            "Set a sticky message in a channel\n"
            "`content`: The message content (supports Discord formatting)\n"
            "`channel`: Target channel (optional)\n"
            "`embed`: Display as embed (true/false, default: true)\n"
            "`footer`: Custom footer text (optional)\n"
            "`color`: Embed color (optional, default: yellow)"
        ),
        inline=False,
    )
    embed.add_field(
        name="📝 Supported Variables",
        value=(
            "`{server_name}` - Server name\n"
            "`{time}` - Current time\n"
            "`{date}` - Current date\n"
            "`{datetime}` - Date and time\n"
            "`{channel_name}` - Channel name\n"
            "`{member_count}` - Server member count"
        ),
        inline=False,
    )
    embed.add_field(
        name="🎨 Color Options",
        value=(
            "Color names: `Red`, `Blue`, `Green`, `Purple`, `Orange`, `Pink`, `Discord`, `Blurple`\n"
            "Hex codes: `#FF0000`, `#00FF00`, `#0000FF`\n"
            "Default: `Yellow` (#FFFF00)"
        ),
        inline=False,
    )
    embed.add_field(
        name="🎨 Discord Formatting",
        value=(
            "**Bold**, *Italic*, ~~Strikethrough~~\n"
            "`Code`, ```Code Block```\n"
            "> Quote, >>> Multi-line quote\n"
            "<@&roleID> for role mentions\n"
            "<#channelID> for channel mentions"
        ),
        inline=False,
    )
    embed.add_field(name="/sticky-remove", value="Remove a sticky message from a channel\n`channel`: Target channel (optional)", inline=False)
    embed.add_field(name="/sticky-list", value="List all sticky messages in the server", inline=False)
    embed.add_field(name="/sticky-help", value="Show this help message", inline=False)
    embed.add_field(name="/sticky-force-cleanup", value="Force cleanup ALL bot messages in a channel\n`channel`: Target channel (optional)", inline=False)
    embed.set_footer(text='Note: You need "Manage Messages" permission to use this bot')
    return embed


class Help(commands.Cog):
    def __init__(self, bot):
        self.bot = bot

    @commands.hybrid_command(name="sticky-help", aliases=["help"], description="Show help information for the sticky bot")
    @commands.has_permissions(manage_messages=True)
    async def sticky_help(self, ctx: commands.Context):
        await ctx.reply(embed=build_help_embed(), ephemeral=True, mention_author=False)

    # ---------- Error handler ----------
    @sticky_help.error
    async def sticky_help_error(self, ctx, error):
        await reply_with_error(ctx, error, "Help")


async def setup(bot):
    await bot.add_cog(Help(bot))
