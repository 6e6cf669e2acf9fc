"""Finding and deleting earlier sticky posts in a channel.

The matching rules in ``is_sticky_like`` are a contract with everything the
bot has posted before (including posts made by older versions), so they are
kept exactly as they are. A sticky whose content changed by more than its
first 30 characters and whose footer was customised away from the marker will
not be recognised.
"""
import asyncio
import logging

import discord

from utils.constants import DEFAULT_FOOTER

log = logging.getLogger(__name__)

PIN = "📌"
PREFIX_MATCH_LENGTH = 30


def is_sticky_like(message, config) -> bool:
    if message.embeds:
        footer = message.embeds[0].footer.text or ""
        if PIN in footer or "sticky" in footer.lower() or "This is a sticky message" in footer:
            return True

    content = message.content or ""
    if content:
        if "*" + PIN in content or DEFAULT_FOOTER in content:
            return True
        if "*sticky message*" in content.lower():
            return True
        template = getattr(config, "content", None)
        if template and template[:PREFIX_MATCH_LENGTH] in content:
            return True
    return False


async def delete_tracked(channel, message_id) -> bool:
    """Delete the message we last posted, if it is still there."""
    if not message_id:
        return False
    try:
        message = await channel.fetch_message(int(message_id))
        await message.delete()
    except discord.NotFound:
        log.debug("[Reconcile] Stored message %s already gone in #%s", message_id, channel.name)
        return False
    except discord.HTTPException as e:
        log.info("[Reconcile] Stored message %s couldn't be deleted: %s", message_id, e)
        return False
    log.info("[Reconcile] Deleted stored sticky message %s in #%s", message_id, channel.name)
    return True


async def _delete_matching(channel, self_id, scan_limit, delete_spacing, predicate) -> int:
    # collect first so deletions don't race the history iterator
    own = [m async for m in channel.history(limit=scan_limit) if m.author.id == self_id]
    deleted = 0
    for msg in own:
        if not predicate(msg):
            continue
        try:
            await msg.delete()
        except discord.HTTPException as e:
            log.warning("[Reconcile] Could not delete message %s: %s", msg.id, e)
            continue
        deleted += 1
        log.debug("[Reconcile] Deleted message %s in #%s", msg.id, channel.name)
        await asyncio.sleep(delete_spacing)
    return deleted


async def reconcile(channel, config, *, self_id: int, scan_limit: int, delete_spacing: float) -> int:
    """Clear every earlier sticky post out of the recent history of ``channel``.

    Returns how many messages the bulk scan deleted. ``config.last_message_id``
    is cleared afterwards since nothing it could point at is live any more.
    Errors fetching the history propagate.
    """
    await delete_tracked(channel, config.last_message_id)
    config.last_message_id = None

    deleted = await _delete_matching(
        channel, self_id, scan_limit, delete_spacing,
        lambda msg: is_sticky_like(msg, config),
    )
    if deleted:
        log.info("[Reconcile] Deleted %d sticky message(s) in #%s", deleted, channel.name)
    return deleted


async def purge_own_messages(channel, *, self_id: int, scan_limit: int, delete_spacing: float) -> int:
    """Delete every message the bot itself wrote among the last ``scan_limit``."""
    deleted = await _delete_matching(channel, self_id, scan_limit, delete_spacing, lambda msg: True)
    log.info("[Reconcile] Force cleanup removed %d message(s) in #%s", deleted, channel.name)
    return deleted
