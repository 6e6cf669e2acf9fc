"""Re-posting sticky messages: reconcile, render, send, record."""
import asyncio
import logging
from typing import Optional

import discord

from db.sticky_json import StickyConfig, StickyStore
from utils.colors import to_discord_color
from utils.constants import (
    DEFAULT_FOOTER,
    REFRESH_SCAN_LIMIT,
    STARTUP_SCAN_LIMIT,
    TIMINGS,
    Timings,
)
from utils.reconcile import reconcile
from utils.render import ChannelContext, render
from utils.scheduler import SchedulerState

log = logging.getLogger(__name__)

UNKNOWN_CHANNEL = 10003


def is_unknown_channel(error: Exception) -> bool:
    return isinstance(error, discord.NotFound) and getattr(error, "code", None) == UNKNOWN_CHANNEL


def build_payload(config: StickyConfig, channel, ctx: Optional[ChannelContext] = None) -> dict:
    """Keyword arguments for ``channel.send`` carrying the rendered sticky."""
    ctx = ctx or ChannelContext.from_channel(channel)
    body = render(config.content, ctx)
    footer = render(config.custom_footer_template, ctx) if config.custom_footer_template else DEFAULT_FOOTER

    if config.render_as_rich_card:
        embed = discord.Embed(
            description=body,
            color=to_discord_color(config.card_color),
            timestamp=discord.utils.utcnow(),
        )
        embed.set_footer(text=footer)
        return {"embed": embed}
    return {"content": f"{body}\n\n*{footer}*"}


class StickyEngine:
    def __init__(self, bot, store: StickyStore, state: SchedulerState, timings: Timings = TIMINGS):
        self.bot = bot
        self.store = store
        self.state = state
        self.timings = timings

    @property
    def self_id(self) -> int:
        return self.bot.user.id

    def get_channel(self, channel_id):
        return self.bot.get_channel(int(channel_id))

    def evict(self, channel_id, save: bool = True) -> None:
        if self.store.pop(channel_id, save=save) is not None:
            log.info("[Sticky] Channel %s not found, removing from sticky data", channel_id)

    # ------------------------- REFRESH -------------------------
    async def refresh(self, channel_id) -> Optional[discord.Message]:
        """Put the sticky back at the bottom of ``channel_id``.

        Returns the new message, or None when nothing was posted. Never raises.
        """
        key = str(channel_id)
        if key in self.state.in_flight:
            log.debug("[Sticky] Already processing channel %s, skipping", key)
            return None
        config = self.store.get(key)
        if config is None:
            return None

        self.state.in_flight.add(key)
        try:
            channel = self.get_channel(key)
            if channel is None:
                self.evict(key)
                return None

            await reconcile(
                channel, config,
                self_id=self.self_id,
                scan_limit=REFRESH_SCAN_LIMIT,
                delete_spacing=self.timings.refresh_delete_spacing,
            )
            await asyncio.sleep(self.timings.settle_delay)

            message = await channel.send(**build_payload(config, channel))
            return await self._record(key, config, message)
        except Exception as e:
            if is_unknown_channel(e):
                self.evict(key)
            else:
                log.exception("[Sticky] Error handling sticky message in channel %s", key)
            return None
        finally:
            self.state.in_flight.discard(key)

    async def _record(self, key: str, config: StickyConfig, message) -> Optional[discord.Message]:
        current = self.store.get(key)
        if current is None:
            # removed while we were posting; don't leave an orphan behind
            log.info("[Sticky] Sticky in channel %s was removed mid-refresh, deleting new post", key)
            try:
                await message.delete()
            except discord.HTTPException as e:
                log.warning("[Sticky] Could not delete orphaned sticky %s: %s", message.id, e)
            return None

        # a fresh sticky-set may have replaced the config; it still has to
        # know about this post so the next refresh clears it
        current.last_message_id = str(message.id)
        self.store.save()
        if current is not config:
            return None
        return message

    # ------------------------- STARTUP -------------------------
    async def sweep(self) -> int:
        """Clear old sticky posts everywhere, dropping configs of vanished channels."""
        log.info("[Sticky] 🧹 Starting comprehensive sticky message cleanup...")
        processed = 0
        for key, config in self.store.items():
            try:
                channel = self.get_channel(key)
                if channel is None:
                    self.evict(key, save=False)
                    continue
                log.info("[Sticky] Cleaning up sticky messages in #%s...", channel.name)
                await reconcile(
                    channel, config,
                    self_id=self.self_id,
                    scan_limit=STARTUP_SCAN_LIMIT,
                    delete_spacing=self.timings.startup_delete_spacing,
                )
                processed += 1
            except Exception as e:
                if is_unknown_channel(e):
                    self.evict(key, save=False)
                else:
                    log.exception("[Sticky] Error cleaning up sticky messages in channel %s", key)
        self.store.save()
        log.info("[Sticky] ✅ Cleanup complete across %d channel(s)", processed)
        return processed

    async def refresh_all(self) -> int:
        log.info("[Sticky] 🔄 Refreshing all sticky messages...")
        posted = 0
        for key in self.store.channel_ids():
            if self.get_channel(key) is None:
                continue
            try:
                if await self.refresh(key) is not None:
                    posted += 1
            except Exception:
                log.exception("[Sticky] Error refreshing sticky message in channel %s", key)
            await asyncio.sleep(self.timings.refresh_spacing)
        log.info("[Sticky] ✅ All sticky messages refreshed (%d posted)", posted)
        return posted

    async def startup(self) -> None:
        await asyncio.sleep(self.timings.startup_grace)
        await self.sweep()
        await asyncio.sleep(self.timings.refresh_grace)
        await self.refresh_all()
