import discord
import pytest

from utils.colors import resolve_color, to_discord_color
from utils.constants import DEFAULT_COLOR


class TestResolveColor:
    @pytest.mark.parametrize("value,expected", [
        ("Blue", "#0000FF"),
        ("  blurple ", "#5865F2"),
        ("GREY", "#808080"),
        ("ff0000", "#FF0000"),
        ("#00ff00", "#00FF00"),
        ("abc", "#ABC"),
        ("#AbC", "#ABC"),
    ])
    def test_known_inputs(self, value, expected):
        assert resolve_color(value) == expected

    @pytest.mark.parametrize("value", [None, "", "not-a-color", "#12345", "zzzzzz", "#1234567"])
    def test_falls_back_to_default(self, value):
        assert resolve_color(value) == DEFAULT_COLOR == "#FFFF00"


class TestToDiscordColor:
    def test_six_digit(self):
        assert to_discord_color("#5865F2") == discord.Color(0x5865F2)

    def test_three_digit_expands(self):
        assert to_discord_color("#ABC") == discord.Color(0xAABBCC)

    def test_invalid_uses_default(self):
        assert to_discord_color("nope") == discord.Color(0xFFFF00)
