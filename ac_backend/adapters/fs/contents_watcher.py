"""
Watch mode for local containers.

Filesystem events are queued by a watchdog handler and applied to the
container's contents index by `flush()`: created/modified paths are added,
deleted paths are forgotten (with their descendants), moves do both. Every
flush that changed something ends with one `save()`.

The index is not thread-safe. Either call `flush()` from the thread that owns
the index, or start with ``auto_flush=True`` and hold `watcher.lock` while
reading the index from other threads.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from typing import Any

from watchdog.events import FileSystemEvent, FileSystemEventHandler, FileSystemMovedEvent
from watchdog.observers import Observer

from ...config import WATCHER_DEBOUNCE_MS
from ...container import AssetContainer
from ...shared import get_logger, log_structured
from .local_driver import LocalFilesystemDriver

logger = get_logger(__name__)

OP_ADD = "add"
OP_FORGET = "forget"
# Forget the old tree, then index whatever is at the path now.
OP_REPLACE = "replace"


def _merge(pending: dict[str, str], path: str, op: str) -> None:
    """Queue `op` for `path`; a later add must not hide an earlier forget."""
    previous = pending.pop(path, None)
    if op == OP_ADD and previous in (OP_FORGET, OP_REPLACE):
        op = OP_REPLACE
    pending[path] = op


class _ContentsEventHandler(FileSystemEventHandler):
    def __init__(self, watcher: "ContentsWatcher"):
        super().__init__()
        self._watcher = watcher

    def on_created(self, event: FileSystemEvent) -> None:
        self._watcher.queue(OP_ADD, str(event.src_path))

    def on_modified(self, event: FileSystemEvent) -> None:
        # Directory mtime changes are noise; child events cover them.
        if event.is_directory:
            return
        self._watcher.queue(OP_ADD, str(event.src_path))

    def on_deleted(self, event: FileSystemEvent) -> None:
        self._watcher.queue(OP_FORGET, str(event.src_path))

    def on_moved(self, event: FileSystemMovedEvent) -> None:  # type: ignore[override]
        self._watcher.queue(OP_FORGET, str(event.src_path))
        self._watcher.queue(OP_ADD, str(event.dest_path))


class ContentsWatcher:
    def __init__(
        self,
        container: AssetContainer,
        observer_factory: Callable[[], Any] = Observer,
        debounce_ms: int = WATCHER_DEBOUNCE_MS,
    ):
        driver = container.driver()
        if not isinstance(driver, LocalFilesystemDriver):
            raise TypeError("Watch mode needs a container backed by LocalFilesystemDriver")
        self._container = container
        self._driver = driver
        self._observer_factory = observer_factory
        self._debounce_s = max(0, int(debounce_ms)) / 1000.0
        self._observer: Any = None
        self._pending_lock = threading.Lock()
        self._pending: dict[str, str] = {}
        self._flush_lock = threading.RLock()
        self._timer: threading.Timer | None = None
        self._auto_flush = False

    @property
    def lock(self) -> threading.RLock:
        """Held while a flush mutates the index."""
        return self._flush_lock

    @property
    def running(self) -> bool:
        return self._observer is not None

    def pending_count(self) -> int:
        with self._pending_lock:
            return len(self._pending)

    # ------------------------------------------------------------------
    # Observer lifecycle
    # ------------------------------------------------------------------

    def start(self, auto_flush: bool = False) -> None:
        if self._observer is not None:
            return
        if not self._container.watcher_enabled():
            logger.warning(
                "Watching '%s' while watch mode is off; saved listings keep the indefinite TTL",
                self._container.handle(),
            )
        self._auto_flush = bool(auto_flush)
        observer = self._observer_factory()
        observer.schedule(_ContentsEventHandler(self), str(self._driver.root), recursive=True)
        observer.start()
        self._observer = observer
        logger.info("Watching %s for container '%s'", self._driver.root, self._container.handle())

    def stop(self, timeout: float = 2.0) -> None:
        observer, self._observer = self._observer, None
        self._cancel_timer()
        if observer is None:
            return
        observer.stop()
        observer.join(timeout=timeout)
        logger.info("Stopped watching container '%s'", self._container.handle())

    # ------------------------------------------------------------------
    # Event queue
    # ------------------------------------------------------------------

    def queue(self, op: str, absolute_path: str) -> None:
        rel = self._driver.relative(absolute_path)
        if not rel:
            return
        with self._pending_lock:
            _merge(self._pending, rel, op)
        if self._auto_flush:
            self._schedule_flush()

    def _schedule_flush(self) -> None:
        self._cancel_timer()
        timer = threading.Timer(self._debounce_s, self._flush_from_timer)
        timer.daemon = True
        self._timer = timer
        timer.start()

    def _flush_from_timer(self) -> None:
        try:
            self.flush()
        except Exception:
            logger.exception("Watcher flush failed for container '%s'", self._container.handle())

    def _cancel_timer(self) -> None:
        timer, self._timer = self._timer, None
        if timer is not None:
            timer.cancel()

    def flush(self) -> int:
        """Apply queued events to the index and save it. Returns the number applied."""
        with self._pending_lock:
            batch, self._pending = self._pending, {}
        if not batch:
            return 0

        with self._flush_lock:
            items = list(batch.items())
            for index, (path, op) in enumerate(items):
                try:
                    self._apply(path, op)
                except Exception:
                    self._requeue(items[index:])
                    raise
            self._container.contents().save()

        log_structured(
            logger,
            logging.INFO,
            "watcher flush",
            container=self._container.handle(),
            added=sum(1 for op in batch.values() if op == OP_ADD),
            forgotten=sum(1 for op in batch.values() if op == OP_FORGET),
            replaced=sum(1 for op in batch.values() if op == OP_REPLACE),
        )
        return len(batch)

    def _apply(self, path: str, op: str) -> None:
        if op in (OP_FORGET, OP_REPLACE):
            self._forget_tree(path)
        if op in (OP_ADD, OP_REPLACE):
            self._add_tree(path)

    def _requeue(self, items: list[tuple[str, str]]) -> None:
        """Put unapplied operations back in front of anything queued since."""
        with self._pending_lock:
            restored = dict(items)
            for path, op in self._pending.items():
                _merge(restored, path, op)
            self._pending = restored

    def _add_tree(self, path: str) -> None:
        contents = self._container.contents()
        contents.add(path)
        # A directory moved or copied in arrives as one event.
        if self._driver.has(path) and self._driver.directory_exists(path):
            for entry in self._driver.list_contents(path, recursive=True):
                contents.add(entry.path())

    def _forget_tree(self, path: str) -> None:
        contents = self._container.contents()
        prefix = f"{path}/"
        descendants = [p for p in contents.all() if p.startswith(prefix)]
        for child in descendants:
            contents.forget(child)
        contents.forget(path)
