import json
import logging
import os
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, Iterator, Optional, Tuple

from utils.constants import DEFAULT_COLOR, STICKY_DATA_PATH

log = logging.getLogger(__name__)


def _utcnow_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _id_or_none(value) -> Optional[str]:
    return None if value in (None, "") else str(value)


@dataclass
class StickyConfig:
    content: str
    channel_id: str
    author_id: str = ""
    created_at: str = field(default_factory=_utcnow_iso)
    last_message_id: Optional[str] = None
    render_as_rich_card: bool = True
    custom_footer_template: Optional[str] = None
    card_color: str = DEFAULT_COLOR

    def to_dict(self) -> dict:
        return {
            "content": self.content,
            "channelId": self.channel_id,
            "authorId": self.author_id,
            "createdAt": self.created_at,
            "lastMessageId": self.last_message_id,
            "renderAsRichCard": self.render_as_rich_card,
            "customFooterTemplate": self.custom_footer_template,
            "cardColor": self.card_color,
        }

    @classmethod
    def from_dict(cls, data: dict, channel_id: Optional[str] = None) -> "StickyConfig":
        # Older snapshots used messageId / useEmbed / customFooter / embedColor
        def pick(new, old, default=None):
            if new in data:
                return data[new]
            return data.get(old, default)

        rich = pick("renderAsRichCard", "useEmbed", True)
        return cls(
            content=data.get("content") or "",
            channel_id=str(data.get("channelId") or channel_id or ""),
            author_id=str(data.get("authorId") or ""),
            created_at=data.get("createdAt") or _utcnow_iso(),
            last_message_id=_id_or_none(pick("lastMessageId", "messageId")),
            render_as_rich_card=True if rich is None else bool(rich),
            custom_footer_template=pick("customFooterTemplate", "customFooter") or None,
            card_color=pick("cardColor", "embedColor") or DEFAULT_COLOR,
        )


class StickyStore:
    """channel id -> StickyConfig, snapshotted to a single JSON file.

    Every mutation through ``put``/``pop`` rewrites the whole file. In-place
    edits of a config (e.g. a new ``last_message_id``) need an explicit ``save``.
    """

    def __init__(self, path: str = STICKY_DATA_PATH):
        self.path = path
        self._configs: Dict[str, StickyConfig] = {}

    # --- Load JSON ---
    def load(self) -> int:
        self._configs = {}
        if not os.path.exists(self.path):
            return 0
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError):
            log.exception("[Store] Could not read %s, starting empty", self.path)
            return 0
        if not isinstance(data, dict):
            log.error("[Store] %s does not hold a JSON object, starting empty", self.path)
            return 0

        for channel_id, raw in data.items():
            if not isinstance(raw, dict) or not raw.get("content"):
                log.warning("[Store] Skipping malformed entry for channel %s", channel_id)
                continue
            self._configs[str(channel_id)] = StickyConfig.from_dict(raw, str(channel_id))
        log.info("[Store] Loaded %d sticky messages", len(self._configs))
        return len(self._configs)

    # --- Save JSON ---
    def save(self) -> bool:
        data = {cid: cfg.to_dict() for cid, cfg in self._configs.items()}
        try:
            folder = os.path.dirname(self.path)
            if folder:
                os.makedirs(folder, exist_ok=True)
            with open(self.path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=4, ensure_ascii=False)
            return True
        except OSError:
            log.exception("[Store] Error saving sticky messages to %s", self.path)
            return False

    def get(self, channel_id) -> Optional[StickyConfig]:
        return self._configs.get(str(channel_id))

    def put(self, config: StickyConfig) -> None:
        self._configs[str(config.channel_id)] = config
        self.save()

    def pop(self, channel_id, save: bool = True) -> Optional[StickyConfig]:
        config = self._configs.pop(str(channel_id), None)
        if config is not None and save:
            self.save()
        return config

    def items(self) -> Iterator[Tuple[str, StickyConfig]]:
        # snapshot so callers may mutate the store while iterating
        return iter(list(self._configs.items()))

    def channel_ids(self) -> list:
        return list(self._configs)

    def __contains__(self, channel_id) -> bool:
        return str(channel_id) in self._configs

    def __len__(self) -> int:
        return len(self._configs)
