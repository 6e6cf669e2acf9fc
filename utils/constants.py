import os
from dataclasses import dataclass
from dotenv import load_dotenv

load_dotenv()

TOKEN = os.getenv("TOKEN")
COMMAND_PREFIX = os.getenv("COMMAND_PREFIX", "$")
STICKY_DATA_PATH = os.getenv("STICKY_DATA_PATH", os.path.join("db", "sticky-data.json"))

PORT = int(os.getenv("PORT", "25267"))
WEB_ENABLED = os.getenv("WEB_ENABLED", "1").lower() not in ("0", "false", "no", "off")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Scan windows (messages)
STARTUP_SCAN_LIMIT = 100
REFRESH_SCAN_LIMIT = 50

# Design
DEFAULT_COLOR = "#FFFF00"
DEFAULT_FOOTER = "📌 This is a sticky message"
LIST_COLOR = 0x00D4FF
HELP_COLOR = 0x7289DA


@dataclass(frozen=True)
class Timings:
    """Every delay the sticky core waits on, in seconds."""
    debounce_delay: float = 2.0
    max_wait: float = 0.0  # 0 disables the cap
    settle_delay: float = 0.5
    startup_grace: float = 5.0
    refresh_grace: float = 3.0
    refresh_spacing: float = 1.0
    startup_delete_spacing: float = 0.15
    refresh_delete_spacing: float = 0.10


TIMINGS = Timings(
    debounce_delay=float(os.getenv("STICKY_DEBOUNCE_DELAY", "2.0")),
    max_wait=float(os.getenv("STICKY_MAX_WAIT", "0")),
)
