"""
SQLite-backed key/value store for container listings.

Listings survive process restarts and can be shared between processes that
point at the same database file. Writes are last-writer-wins; a process that
reloads after another process saved picks up the newer value.

Values are stored as JSON, so they must be JSON-serializable (listings are
plain dicts of plain records).
"""

from __future__ import annotations

import json
import sqlite3
import threading
import time
from pathlib import Path
from typing import Any, Callable

from ...config import CACHE_DB_TIMEOUT
from ...shared import get_logger
from .memory_store import expires_at

logger = get_logger(__name__)

_SCHEMA = """
CREATE TABLE IF NOT EXISTS cache (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL,
    expires_at REAL
)
"""


class SqliteCacheStore:
    def __init__(self, db_path: str | Path, timeout: float = CACHE_DB_TIMEOUT):
        self._db_path = str(db_path)
        self._lock = threading.Lock()
        if self._db_path != ":memory:":
            Path(self._db_path).parent.mkdir(parents=True, exist_ok=True)
        self._conn = sqlite3.connect(self._db_path, timeout=timeout, check_same_thread=False)
        self._conn.execute("PRAGMA journal_mode=WAL")
        self._conn.execute("PRAGMA synchronous=NORMAL")
        self._conn.execute(f"PRAGMA busy_timeout = {max(1000, int(float(timeout) * 1000))}")
        with self._conn:
            self._conn.execute(_SCHEMA)
        logger.debug("Opened cache store at %s", self._db_path)

    @property
    def db_path(self) -> str:
        return self._db_path

    def get(self, key: str) -> Any:
        with self._lock:
            row = self._conn.execute("SELECT value, expires_at FROM cache WHERE key = ?", (key,)).fetchone()
            if row is None:
                return None
            value, deadline = row
            if deadline is not None and time.time() > float(deadline):
                with self._conn:
                    self._conn.execute("DELETE FROM cache WHERE key = ?", (key,))
                return None
        return json.loads(value)

    def put(self, key: str, value: Any, ttl: float | None = None) -> None:
        payload = json.dumps(value, ensure_ascii=False)
        with self._lock, self._conn:
            self._conn.execute(
                "INSERT INTO cache (key, value, expires_at) VALUES (?, ?, ?) "
                "ON CONFLICT(key) DO UPDATE SET value = excluded.value, expires_at = excluded.expires_at",
                (key, payload, expires_at(ttl)),
            )

    def remember(self, key: str, ttl: float | None, producer: Callable[[], Any]) -> Any:
        value = self.get(key)
        if value is not None:
            return value
        value = producer()
        self.put(key, value, ttl)
        return value

    def forget(self, key: str) -> None:
        with self._lock, self._conn:
            self._conn.execute("DELETE FROM cache WHERE key = ?", (key,))

    def prune_expired(self) -> int:
        with self._lock, self._conn:
            cur = self._conn.execute(
                "DELETE FROM cache WHERE expires_at IS NOT NULL AND expires_at < ?", (time.time(),)
            )
            return int(cur.rowcount or 0)

    def close(self) -> None:
        with self._lock:
            self._conn.close()
