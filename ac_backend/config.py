"""
Configuration for asset container contents.

Values are read once at import time; `load_settings()` re-reads the
environment for callers (and tests) that change it at runtime.
"""
import logging
import os
from dataclasses import dataclass

from .utils import env_bool

logger = logging.getLogger(__name__)


def _env_raw(*names: str, default: str | None = None) -> str | None:
    for name in names:
        if not name:
            continue
        val = os.getenv(name)
        if val is not None and str(val).strip() != "":
            return str(val).strip()
    return default


def _env_int(default: int, *names: str, min_value: int | None = None, max_value: int | None = None) -> int:
    raw = _env_raw(*names)
    if raw is None:
        return default
    try:
        value = int(raw)
    except (TypeError, ValueError):
        logger.warning("Invalid integer for %s=%r, using default=%s", names[0] if names else "<unknown>", raw, default)
        return default
    if min_value is not None and value < min_value:
        logger.warning("Value too small for %s=%s, clamped to %s", names[0] if names else "<unknown>", value, min_value)
        value = min_value
    if max_value is not None and value > max_value:
        logger.warning("Value too large for %s=%s, clamped to %s", names[0] if names else "<unknown>", value, max_value)
        value = max_value
    return value


def _env_float(default: float, *names: str, min_value: float | None = None) -> float:
    raw = _env_raw(*names)
    if raw is None:
        return default
    try:
        value = float(raw)
    except (TypeError, ValueError):
        logger.warning("Invalid float for %s=%r, using default=%s", names[0] if names else "<unknown>", raw, default)
        return default
    if min_value is not None and value < min_value:
        logger.warning("Value too small for %s=%s, clamped to %s", names[0] if names else "<unknown>", value, min_value)
        value = min_value
    return value


def _env_bool(default: bool, *names: str) -> bool:
    for name in names:
        if name and name in os.environ:
            return env_bool(name, default)
    return default


@dataclass(frozen=True)
class ContentsSettings:
    watcher_enabled: bool
    cache_db: str | None
    cache_db_timeout: float
    watcher_debounce_ms: int


def load_settings() -> ContentsSettings:
    return ContentsSettings(
        # Watch mode: persist listings with TTL 0 and rely on watcher-driven updates.
        watcher_enabled=_env_bool(False, "AC_WATCHER_ENABLED"),
        # Unset means an in-process memory store.
        cache_db=_env_raw("AC_CACHE_DB"),
        cache_db_timeout=_env_float(5.0, "AC_CACHE_DB_TIMEOUT", min_value=0.1),
        watcher_debounce_ms=_env_int(500, "AC_WATCHER_DEBOUNCE_MS", min_value=0, max_value=120_000),
    )


_SETTINGS = load_settings()

CACHE_DB_TIMEOUT = _SETTINGS.cache_db_timeout
WATCHER_DEBOUNCE_MS = _SETTINGS.watcher_debounce_ms

# Prefix of the backing-store key; the container handle is appended.
CONTENTS_CACHE_KEY_PREFIX = "asset-list-contents-"
