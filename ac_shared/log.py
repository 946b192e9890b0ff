"""
Logging utilities with consistent formatting and emoji indicators.
"""
import json
import logging
from datetime import datetime, timezone
from typing import Any, Final

# Emoji indicators for log levels
EMOJI_MAP: Final[dict[str, str]] = {
    "DEBUG": "🔍",
    "INFO": "ℹ️",
    "WARNING": "⚠️",
    "ERROR": "❌",
    "CRITICAL": "🔥",
    "SUCCESS": "✅",
}

# Global logger prefix
PREFIX: Final[str] = "🗂️ Contents"

LOGGER_ROOT: Final[str] = "asset_contents"


class EmojiFormatter(logging.Formatter):
    """Single-line formatter: prefix, level emoji, logger name, message."""

    def format(self, record: logging.LogRecord) -> str:
        emoji = EMOJI_MAP.get(record.levelname, "🗂️")
        formatter = logging.Formatter(f"{PREFIX} [{emoji}] %(name)s: %(message)s")
        return formatter.format(record)


def _short_name(name: str) -> str:
    if name.startswith("__main__"):
        return "main"
    parts = name.split(".")
    for anchor in ("ac_backend", "ac_shared"):
        if anchor in parts:
            return ".".join(parts[parts.index(anchor) + 1:]) or anchor
    return name


def get_logger(name: str, level: int | None = None) -> logging.Logger:
    """
    Get a logger under the ``asset_contents`` namespace.

    Args:
        name: Logger name (usually __name__)
        level: Optional logging level

    Returns:
        Logger writing through the emoji formatter
    """
    logger = logging.getLogger(f"{LOGGER_ROOT}.{_short_name(name)}")

    if level is not None:
        logger.setLevel(level)

    # One handler on the namespace root; children propagate to it.
    root = logging.getLogger(LOGGER_ROOT)
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(EmojiFormatter())
        root.addHandler(handler)
        root.setLevel(logging.INFO)

    return logger

# Add SUCCESS level
SUCCESS_LEVEL: Final[int] = 25  # Between INFO (20) and WARNING (30)
logging.addLevelName(SUCCESS_LEVEL, "SUCCESS")

def log_success(logger: logging.Logger, message: str) -> None:
    """Log a message at the SUCCESS level."""
    logger.log(SUCCESS_LEVEL, message)

def log_structured(logger: logging.Logger, level: int, message: str, **context: Any) -> None:
    """Emit a structured JSON log entry with contextual fields."""
    payload = {
        "message": message,
        "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
        "context": context,
    }
    logger.log(level, json.dumps(payload, ensure_ascii=False, default=str))
