"""
Container contents index.

Owns the full listing of one asset container as an ordered ``path -> record``
mapping, loaded cache-aside from the backing store (falling back to a full
recursive driver listing), with memoized folder views that are dropped on any
mutation.

Not thread-safe: one index instance is meant to be driven from one thread.
"""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Callable, Protocol

from ...config import CONTENTS_CACHE_KEY_PREFIX
from ...shared import EntryType, Listing, get_logger, log_structured, timer
from . import filters
from .normalizer import ROOT_SENTINEL, ContentsDriver, normalize, normalize_single, parent_of

if TYPE_CHECKING:
    from ...container import AssetContainer

logger = get_logger(__name__)


class CacheStore(Protocol):
    """Key/value backing store consumed by the index."""

    def get(self, key: str) -> Any: ...

    def put(self, key: str, value: Any, ttl: int | None) -> None: ...

    def remember(self, key: str, ttl: int | None, producer: Callable[[], Any]) -> Any: ...

    def forget(self, key: str) -> None: ...


class AssetContainerContents:
    def __init__(self, container: "AssetContainer", driver: ContentsDriver, store: CacheStore):
        self._container = container
        self._driver = driver
        self._store = store
        self._files: Listing | None = None
        self._filtered_files: dict[str, Listing] | None = None
        self._filtered_directories: dict[str, Listing] | None = None

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def all(self) -> Listing:
        """
        Full listing, loaded once per instance.

        Reads the backing store first; on a miss the driver lists the whole
        container, the entries are normalized and sorted by path, and the
        result is stored with the current TTL policy.
        """
        if self._files is None:
            self._files = self._store.remember(self.key(), self.ttl(), self._list_from_driver)
        return self._files

    def cached(self) -> Listing | None:
        """Backing-store lookup only; never triggers a driver listing."""
        return self._store.get(self.key())

    def files(self) -> Listing:
        return filters.of_type(self.all(), EntryType.FILE.value)

    def directories(self) -> Listing:
        return filters.of_type(self.all(), EntryType.DIRECTORY.value)

    def filtered_files_in(self, folder: str, recursive: bool) -> Listing:
        if self._filtered_files is None:
            self._filtered_files = {}
        key = filters.view_key(folder, recursive)
        if key not in self._filtered_files:
            files = filters.filter_folder(self.files(), folder, recursive)
            self._filtered_files[key] = filters.visible_files(files)
        return self._filtered_files[key]

    def filtered_directories_in(self, folder: str, recursive: bool) -> Listing:
        if self._filtered_directories is None:
            self._filtered_directories = {}
        key = filters.view_key(folder, recursive)
        if key not in self._filtered_directories:
            directories = filters.filter_folder(self.directories(), folder, recursive)
            self._filtered_directories[key] = filters.visible_directories(directories)
        return self._filtered_directories[key]

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def add(self, path: str) -> "AssetContainerContents":
        """
        Index one path, creating records for any missing parent directories.

        `path` is a listing key in the form the driver lists it. Paths that
        no longer exist on the driver are skipped silently.
        Nothing is persisted until `save()`.
        """
        result = normalize_single(self._driver, path)
        if result.is_absent:
            logger.debug("Skipping add for missing path: %s", path)
            return self
        record = result.unwrap()

        parent = parent_of(path)
        if parent != ROOT_SENTINEL:
            self.add(parent)

        self.all()[path] = record
        self._clear_filtered()
        return self

    def forget(self, path: str) -> "AssetContainerContents":
        self.all().pop(path, None)
        self._clear_filtered()
        return self

    def save(self) -> None:
        listing = self.all()
        self._store.put(self.key(), listing, self.ttl())
        logger.debug("Saved %d entries under %s", len(listing), self.key())

    def refresh(self) -> "AssetContainerContents":
        """Drop the in-memory and stored listing; the next read re-lists the driver."""
        self._store.forget(self.key())
        self._files = None
        self._clear_filtered()
        return self

    # ------------------------------------------------------------------
    # Cache policy
    # ------------------------------------------------------------------

    def key(self) -> str:
        return f"{CONTENTS_CACHE_KEY_PREFIX}{self._container.handle()}"

    def ttl(self) -> int | None:
        # Watch mode keeps the entry without time-based expiry; the watcher
        # is responsible for add/forget/save.
        return 0 if self._container.watcher_enabled() else None

    def _clear_filtered(self) -> None:
        self._filtered_files = None
        self._filtered_directories = None

    def _list_from_driver(self) -> Listing:
        logger.debug("Cache miss for %s, listing driver contents", self.key())
        with timer(f"full listing of {self._container.handle()}", logger):
            records = [normalize(entry) for entry in self._driver.list_contents("/", True)]
        listing = filters.sort_by_path(records)
        log_structured(
            logger,
            logging.DEBUG,
            "contents listed",
            container=self._container.handle(),
            entries=len(listing),
        )
        return listing
