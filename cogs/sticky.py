import logging
from typing import List, Optional, Tuple

import discord
from discord import app_commands
from discord.ext import commands

from db.sticky_json import StickyConfig, StickyStore
from utils.colors import resolve_color
from utils.constants import (
    DEFAULT_COLOR,
    LIST_COLOR,
    STARTUP_SCAN_LIMIT,
    STICKY_DATA_PATH,
    TIMINGS,
    Timings,
)
from utils.engine import StickyEngine
from utils.errors import StickyNotConfigured, reply_with_error
from utils.reconcile import delete_tracked, purge_own_messages
from utils.scheduler import DebounceScheduler, SchedulerState

log = logging.getLogger(__name__)

PREVIEW_LENGTH = 50


def describe_entry(channel, config: StickyConfig) -> str:
    """One line of sticky-list output."""
    content = config.content
    preview = content[:PREVIEW_LENGTH] + "..." if len(content) > PREVIEW_LENGTH else content
    kind = "📋 Embed" if config.render_as_rich_card else "💬 Text"
    footer = " (Custom footer)" if config.custom_footer_template else ""
    color = f" ({config.card_color})" if config.card_color and config.card_color != DEFAULT_COLOR else ""
    return f"**{channel.name}** {kind}{footer}{color}: {preview}"


class Sticky(commands.Cog):
    def __init__(self, bot, store: Optional[StickyStore] = None, timings: Timings = TIMINGS):
        self.bot = bot
        if store is None:
            store = StickyStore(STICKY_DATA_PATH)
            store.load()
        self.store = store
        self.timings = timings
        self.state = SchedulerState()
        self.engine = StickyEngine(bot, store, self.state, timings)
        self.scheduler = DebounceScheduler(
            self.state,
            self.engine.refresh,
            delay=timings.debounce_delay,
            max_wait=timings.max_wait,
        )

    def cog_unload(self):
        self.scheduler.cancel_all()

    # ------------------------- ACTIVITY -------------------------
    @commands.Cog.listener()
    async def on_message(self, message: discord.Message):
        if message.author.bot or message.guild is None:
            return
        if message.channel.id in self.store:
            self.scheduler.on_activity(message.channel.id)

    # ------------------------- OPERATIONS -------------------------
    async def set_sticky(
        self,
        channel,
        content: str,
        author_id,
        *,
        embed: bool = True,
        footer: Optional[str] = None,
        color: Optional[str] = None,
    ) -> Tuple[StickyConfig, Optional[discord.Message]]:
        """Create or overwrite the sticky for ``channel`` and post it right away.

        If a refresh is already running there, the post is handed to the
        debouncer instead and the returned message is None.
        """
        config = StickyConfig(
            content=content,
            channel_id=str(channel.id),
            author_id=str(author_id),
            render_as_rich_card=embed,
            custom_footer_template=footer or None,
            card_color=resolve_color(color),
        )
        self.store.put(config)
        self.scheduler.cancel(channel.id)

        if str(channel.id) in self.state.in_flight:
            self.scheduler.on_activity(channel.id)
            return config, None
        return config, await self.engine.refresh(channel.id)

    async def remove_sticky(self, channel) -> bool:
        config = self.store.get(channel.id)
        if config is None:
            return False
        self.scheduler.cancel(channel.id)
        # evict first so a refresh still in flight deletes its own post
        self.store.pop(channel.id)
        await delete_tracked(channel, config.last_message_id)
        log.info("[Sticky] Removed sticky message from #%s", channel.name)
        return True

    def list_entries(self, guild) -> List[Tuple[object, StickyConfig]]:
        entries = []
        for channel_id, config in self.store.items():
            channel = self.bot.get_channel(int(channel_id))
            if channel is not None and channel.guild.id == guild.id:
                entries.append((channel, config))
        return entries

    async def force_cleanup(self, channel) -> int:
        deleted = await purge_own_messages(
            channel,
            self_id=self.bot.user.id,
            scan_limit=STARTUP_SCAN_LIMIT,
            delete_spacing=self.timings.startup_delete_spacing,
        )
        config = self.store.get(channel.id)
        if config is not None and config.last_message_id:
            config.last_message_id = None
            self.store.save()
        return deleted

    # ------------------------- COMMANDS -------------------------
    @commands.hybrid_command(name="sticky-set", description="Set a sticky message in a channel")
    @commands.has_permissions(manage_messages=True)
    @app_commands.describe(
        content="The sticky message content (supports formatting & variables)",
        channel="The channel to set the sticky message in (defaults to current channel)",
        embed="Display as embed (true) or regular message (false) - default: true",
        footer="Custom footer text (supports variables)",
        color="Embed color (hex code like #FF0000, or color name like Red, Blue, Green)",
    )
    async def sticky_set(
        self,
        ctx: commands.Context,
        content: str,
        channel: Optional[discord.TextChannel] = None,
        embed: Optional[bool] = None,
        footer: Optional[str] = None,
        color: Optional[str] = None,
    ):
        channel = channel or ctx.channel
        if not content.strip():
            return await ctx.reply("❌ Sticky content can't be empty.", ephemeral=True, mention_author=False)

        await ctx.defer(ephemeral=True)
        _, message = await self.set_sticky(
            channel, content, ctx.author.id,
            embed=True if embed is None else embed,
            footer=footer,
            color=color,
        )
        if message is None and not self.scheduler.is_pending(channel.id):
            return await ctx.reply("❌ Failed to set sticky message. Please try again.", ephemeral=True, mention_author=False)
        await ctx.reply(f"✅ Sticky message set in {channel.mention}!", ephemeral=True, mention_author=False)

    @commands.hybrid_command(name="sticky-remove", description="Remove a sticky message from a channel")
    @commands.has_permissions(manage_messages=True)
    @app_commands.describe(channel="The channel to remove the sticky message from (defaults to current channel)")
    async def sticky_remove(self, ctx: commands.Context, channel: Optional[discord.TextChannel] = None):
        channel = channel or ctx.channel
        if channel.id not in self.store:
            raise StickyNotConfigured(channel)
        await ctx.defer(ephemeral=True)
        await self.remove_sticky(channel)
        await ctx.reply(f"✅ Sticky message removed from {channel.mention}!", ephemeral=True, mention_author=False)

    @commands.hybrid_command(name="sticky-list", description="List all sticky messages in this server")
    @commands.has_permissions(manage_messages=True)
    async def sticky_list(self, ctx: commands.Context):
        entries = self.list_entries(ctx.guild)
        if not entries:
            return await ctx.reply("📋 No sticky messages found in this server.", ephemeral=True, mention_author=False)

        embed = discord.Embed(
            title="📌 Sticky Messages in this Server",
            description="\n".join(describe_entry(channel, config) for channel, config in entries),
            color=LIST_COLOR,
            timestamp=discord.utils.utcnow(),
        )
        await ctx.reply(embed=embed, ephemeral=True, mention_author=False)

    @commands.hybrid_command(name="sticky-force-cleanup", description="Force cleanup ALL bot messages in a channel")
    @commands.has_permissions(manage_messages=True)
    @app_commands.describe(channel="The channel to clean up (defaults to current channel)")
    async def sticky_force_cleanup(self, ctx: commands.Context, channel: Optional[discord.TextChannel] = None):
        channel = channel or ctx.channel
        await ctx.defer(ephemeral=True)
        deleted = await self.force_cleanup(channel)
        await ctx.reply(f"🧹 Deleted {deleted} bot message(s) in {channel.mention}.", ephemeral=True, mention_author=False)

    # ---------- Error handler ----------
    async def cog_command_error(self, ctx: commands.Context, error: Exception):
        await reply_with_error(ctx, error, "Sticky")


# -------------------------
# Cog setup
# -------------------------
async def setup(bot):
    await bot.add_cog(Sticky(bot))
