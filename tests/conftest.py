"""In-memory stand-ins for the bits of discord.py the sticky core touches."""
import asyncio
import itertools
from types import SimpleNamespace

import discord
import pytest

from cogs.sticky import Sticky
from db.sticky_json import StickyStore
from utils.constants import Timings

_ids = itertools.count(1000)


def http_error(cls=discord.HTTPException, status=500, code=0, text="boom"):
    return cls(SimpleNamespace(status=status, reason="error"), {"code": code, "message": text})


def unknown_message():
    return http_error(discord.NotFound, 404, 10008, "Unknown Message")


def unknown_channel():
    return http_error(discord.NotFound, 404, 10003, "Unknown Channel")


class FakeUser:
    def __init__(self, user_id, name="user", bot=False):
        self.id = user_id
        self.name = name
        self.bot = bot

    def __str__(self):
        return self.name


class FakeGuild:
    def __init__(self, guild_id=1, name="Test Server", member_count=42):
        self.id = guild_id
        self.name = name
        self.member_count = member_count


class FakeMessage:
    def __init__(self, channel, author, content=None, embeds=None):
        self.id = next(_ids)
        self.channel = channel
        self.author = author
        self.content = content or ""
        self.embeds = list(embeds or [])
        self.guild = channel.guild

    async def delete(self):
        self.channel.delete_calls.append(self.id)
        if self.id in self.channel.undeletable:
            raise http_error(discord.Forbidden, 403, 50013, "Missing Permissions")
        if self not in self.channel.messages:
            raise unknown_message()
        self.channel.messages.remove(self)


class FakeChannel:
    def __init__(self, channel_id, guild, bot_user, name="general"):
        self.id = channel_id
        self.name = name
        self.guild = guild
        self.bot_user = bot_user
        self.messages = []  # oldest first
        self.sent = []
        self.delete_calls = []
        self.undeletable = set()
        self.send_error = None
        self.history_error = None
        self.fetch_delay = 0

    @property
    def mention(self):
        return f"<#{self.id}>"

    def post(self, author, content=None, embed=None):
        message = FakeMessage(self, author, content, [embed] if embed else None)
        self.messages.append(message)
        return message

    async def send(self, content=None, *, embed=None):
        if self.send_error is not None:
            raise self.send_error
        message = self.post(self.bot_user, content, embed)
        self.sent.append(message)
        return message

    async def fetch_message(self, message_id):
        if self.fetch_delay:
            await asyncio.sleep(self.fetch_delay)
        for message in self.messages:
            if message.id == message_id:
                return message
        raise unknown_message()

    async def history(self, limit=100):
        if self.history_error is not None:
            raise self.history_error
        for message in list(reversed(self.messages))[:limit]:
            yield message

    def own_messages(self):
        return [m for m in self.messages if m.author.id == self.bot_user.id]


class FakeBot:
    def __init__(self):
        self.user = FakeUser(999, "StickyBot", bot=True)
        self.channels = {}

    def get_channel(self, channel_id):
        return self.channels.get(channel_id)

    def add_channel(self, channel_id, guild, name="general"):
        channel = FakeChannel(channel_id, guild, self.user, name)
        self.channels[channel_id] = channel
        return channel


@pytest.fixture()
def guild():
    return FakeGuild()


@pytest.fixture()
def bot():
    return FakeBot()


@pytest.fixture()
def channel(bot, guild):
    return bot.add_channel(111, guild, "general")


@pytest.fixture()
def member():
    return FakeUser(5, "member")


@pytest.fixture()
def timings():
    return Timings(
        debounce_delay=0.05,
        max_wait=0,
        settle_delay=0,
        startup_grace=0,
        refresh_grace=0,
        refresh_spacing=0,
        startup_delete_spacing=0,
        refresh_delete_spacing=0,
    )


@pytest.fixture()
def store(tmp_path):
    return StickyStore(str(tmp_path / "sticky-data.json"))


@pytest.fixture()
def cog(bot, store, timings):
    return Sticky(bot, store=store, timings=timings)
