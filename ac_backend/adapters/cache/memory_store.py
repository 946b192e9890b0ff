"""In-process TTL key/value store for container listings."""
import copy
import threading
import time
from typing import Any, Callable


def expires_at(ttl: float | None) -> float | None:
    """Absolute expiry for `ttl` seconds; None and values <= 0 never expire."""
    if ttl is None or ttl <= 0:
        return None
    return time.time() + float(ttl)


class MemoryCacheStore:
    def __init__(self):
        self._lock = threading.Lock()
        self._store: dict[str, tuple[float | None, Any]] = {}

    def get(self, key: str) -> Any:
        with self._lock:
            item = self._store.get(key)
            if item is None:
                return None
            deadline, value = item
            if deadline is not None and time.time() > deadline:
                self._store.pop(key, None)
                return None
            return copy.deepcopy(value)

    def put(self, key: str, value: Any, ttl: float | None = None) -> None:
        with self._lock:
            self._store[key] = (expires_at(ttl), copy.deepcopy(value))

    def remember(self, key: str, ttl: float | None, producer: Callable[[], Any]) -> Any:
        value = self.get(key)
        if value is not None:
            return value
        value = producer()
        self.put(key, value, ttl)
        return copy.deepcopy(value)

    def forget(self, key: str) -> None:
        with self._lock:
            self._store.pop(key, None)

    def prune_expired(self) -> int:
        now = time.time()
        with self._lock:
            expired = [k for k, (deadline, _) in self._store.items() if deadline is not None and now > deadline]
            for k in expired:
                self._store.pop(k, None)
        return len(expired)
