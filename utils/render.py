import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

TIME_FORMAT = "%H:%M:%S"
DATE_FORMAT = "%Y-%m-%d"
DATETIME_FORMAT = "%Y-%m-%d %H:%M:%S"

_PLACEHOLDER_RE = re.compile(
    r"\{(server_name|time|date|datetime|channel_name|member_count)\}", re.IGNORECASE
)


@dataclass(frozen=True)
class ChannelContext:
    server_name: str = ""
    channel_name: str = ""
    member_count: int = 0
    now: datetime = field(default_factory=lambda: datetime.now().astimezone())

    @classmethod
    def from_channel(cls, channel, now: Optional[datetime] = None) -> "ChannelContext":
        guild = getattr(channel, "guild", None)
        return cls(
            server_name=getattr(guild, "name", "") or "",
            channel_name=getattr(channel, "name", "") or "",
            member_count=getattr(guild, "member_count", 0) or 0,
            now=now or datetime.now().astimezone(),
        )

    def values(self) -> dict:
        return {
            "server_name": self.server_name,
            "time": self.now.strftime(TIME_FORMAT),
            "date": self.now.strftime(DATE_FORMAT),
            "datetime": self.now.strftime(DATETIME_FORMAT),
            "channel_name": self.channel_name,
            "member_count": str(self.member_count),
        }


def render(template: Optional[str], ctx: ChannelContext) -> str:
    """Expand {server_name}, {time}, {date}, {datetime}, {channel_name} and
    {member_count} (any case). Anything else in braces is left as written."""
    if not template:
        return ""
    values = ctx.values()
    return _PLACEHOLDER_RE.sub(lambda m: values[m.group(1).lower()], template)
