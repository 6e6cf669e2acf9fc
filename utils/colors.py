import re
from typing import Optional

import discord

from utils.constants import DEFAULT_COLOR

COLOR_NAMES = {
    "red": "#FF0000",
    "blue": "#0000FF",
    "green": "#00FF00",
    "yellow": "#FFFF00",
    "orange": "#FFA500",
    "purple": "#800080",
    "pink": "#FFC0CB",
    "cyan": "#00FFFF",
    "magenta": "#FF00FF",
    "lime": "#00FF00",
    "navy": "#000080",
    "teal": "#008080",
    "silver": "#C0C0C0",
    "gray": "#808080",
    "grey": "#808080",
    "maroon": "#800000",
    "olive": "#808000",
    "aqua": "#00FFFF",
    "fuchsia": "#FF00FF",
    "white": "#FFFFFF",
    "black": "#000000",
    "gold": "#FFD700",
    "discord": "#7289DA",
    "blurple": "#5865F2",
}

_HEX_RE = re.compile(r"^#?((?:[0-9A-F]{3}){1,2})$", re.IGNORECASE)


def resolve_color(value: Optional[str]) -> str:
    """Color name or 3/6 digit hex -> '#RRGGBB' / '#RGB'. Falls back to yellow."""
    if not value:
        return DEFAULT_COLOR
    value = value.strip()
    named = COLOR_NAMES.get(value.lower())
    if named:
        return named
    match = _HEX_RE.match(value)
    if match:
        return "#" + match.group(1).upper()
    return DEFAULT_COLOR


def to_discord_color(value: Optional[str]) -> discord.Color:
    hex_digits = resolve_color(value).lstrip("#")
    if len(hex_digits) == 3:
        hex_digits = "".join(c * 2 for c in hex_digits)
    return discord.Color(int(hex_digits, 16))
