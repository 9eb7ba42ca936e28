# src/gotestlens/telemetry/logger/processors.py

"""
Custom structlog processors used by the gotestlens logging setup.
"""

import logging
from typing import Any

from structlog.typing import EventDict

LOG_EMOJIS: dict[int | str, str] = {
    logging.DEBUG: "🐛",
    logging.INFO: "ℹ️",
    logging.WARNING: "⚠️",
    logging.ERROR: "❌",
    logging.CRITICAL: "💥",
    "decode": "🧩",
    "resolve": "📁",
    "run": "🏃",
    "report": "📋",
    "time": "⏱️",
    "general": "➡️",
}

# Keys that only matter to the processor chain, never to the rendered event.
_INTERNAL_KEYS = ("emoji_key",)


def add_emoji_processor(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """Prefixes the event message with an emoji for its level or an explicit `emoji_key`."""
    emoji_key = event_dict.get("emoji_key")
    if emoji_key is not None:
        emoji = LOG_EMOJIS.get(emoji_key, LOG_EMOJIS["general"])
    else:
        level = logging.getLevelName(method_name.upper())
        emoji = LOG_EMOJIS.get(level, "") if isinstance(level, int) else ""

    event = event_dict.get("event")
    if emoji and isinstance(event, str):
        event_dict["event"] = f"{emoji} {event}"
    return event_dict


def remove_extra_keys_processor(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """Drops processor-only keys before rendering."""
    for key in _INTERNAL_KEYS:
        event_dict.pop(key, None)
    return event_dict

# 🔼⚙️
