from datetime import datetime

from tests.conftest import FakeBot, FakeGuild
from utils.render import ChannelContext, render

NOW = datetime(2025, 3, 4, 5, 6, 7)


def make_ctx(**kwargs):
    defaults = dict(server_name="Test Server", channel_name="general", member_count=42, now=NOW)
    defaults.update(kwargs)
    return ChannelContext(**defaults)


def test_channel_and_member_count():
    assert render("{channel_name} has {member_count} members", make_ctx()) == "general has 42 members"


def test_unknown_placeholder_passes_through():
    assert render("hello {foo} in {channel_name}", make_ctx()) == "hello {foo} in general"


def test_case_insensitive():
    assert render("{SERVER_NAME}/{Server_Name}/{server_name}", make_ctx()) == "Test Server/Test Server/Test Server"


def test_time_and_date():
    out = render("{time} | {date} | {datetime}", make_ctx())
    assert out == "05:06:07 | 2025-03-04 | 2025-03-04 05:06:07"


def test_values_are_not_expanded_again():
    assert render("{server_name}", make_ctx(server_name="{channel_name}")) == "{channel_name}"


def test_empty_template():
    assert render("", make_ctx()) == ""
    assert render(None, make_ctx()) == ""


def test_from_channel():
    bot = FakeBot()
    channel = bot.add_channel(1, FakeGuild(name="Guild", member_count=7), "rules")
    ctx = ChannelContext.from_channel(channel, now=NOW)
    assert (ctx.server_name, ctx.channel_name, ctx.member_count, ctx.now) == ("Guild", "rules", 7, NOW)
