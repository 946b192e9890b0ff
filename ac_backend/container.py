"""
Asset container: a named root of a file store plus its cached contents index.
"""

from __future__ import annotations

from .features.contents import AssetContainerContents, CacheStore, ContentsDriver


class AssetContainer:
    def __init__(self, handle: str, driver: ContentsDriver, store: CacheStore, watcher_enabled: bool = False):
        if not str(handle or "").strip():
            raise ValueError("Container handle must not be empty")
        self._handle = str(handle).strip()
        self._driver = driver
        self._store = store
        self._watcher_enabled = bool(watcher_enabled)
        self._contents: AssetContainerContents | None = None

    def handle(self) -> str:
        return self._handle

    def watcher_enabled(self) -> bool:
        return self._watcher_enabled

    def driver(self) -> ContentsDriver:
        return self._driver

    def store(self) -> CacheStore:
        return self._store

    def contents(self) -> AssetContainerContents:
        if self._contents is None:
            self._contents = AssetContainerContents(self, self._driver, self._store)
        return self._contents

    def fresh_contents(self) -> AssetContainerContents:
        """Replace the index with a new instance; the next read goes back to the store."""
        self._contents = AssetContainerContents(self, self._driver, self._store)
        return self._contents

    def __repr__(self) -> str:
        return f"AssetContainer(handle={self._handle!r}, watcher_enabled={self._watcher_enabled})"
