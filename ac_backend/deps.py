"""
Dependency wiring - builds containers.
Simple, debug-friendly DI without framework magic.
"""

from __future__ import annotations

from pathlib import Path

from .adapters.cache import MemoryCacheStore, SqliteCacheStore
from .adapters.fs import LocalFilesystemDriver
from .config import load_settings
from .container import AssetContainer
from .features.contents import CacheStore
from .shared import ErrorCode, Result, get_logger, log_success, sanitize_error_message

logger = get_logger(__name__)


def build_store(cache_path: str | Path | None = None) -> Result[CacheStore]:
    settings = load_settings()
    db_path = cache_path if cache_path is not None else settings.cache_db
    if not db_path:
        return Result.Ok(MemoryCacheStore(), kind="memory")
    try:
        store = SqliteCacheStore(db_path, timeout=settings.cache_db_timeout)
    except Exception as exc:
        logger.error("Failed to open cache store: %s", exc)
        return Result.Err(ErrorCode.STORE_ERROR, sanitize_error_message(exc, "Failed to open cache store"))
    return Result.Ok(store, kind="sqlite")


def build_container(
    handle: str,
    root: str | Path,
    *,
    store: CacheStore | None = None,
    cache_path: str | Path | None = None,
    watcher_enabled: bool | None = None,
) -> Result[AssetContainer]:
    """
    Wire a local-disk container.

    Args:
        handle: Container handle (cache key component)
        root: Directory holding the container's files
        store: Existing backing store to share; built from config when omitted
        cache_path: SQLite file for a new store (overrides AC_CACHE_DB)
        watcher_enabled: Watch mode flag (defaults to AC_WATCHER_ENABLED)
    """
    root_path = Path(root)
    if not root_path.is_dir():
        return Result.Err(ErrorCode.INVALID_INPUT, f"Container root is not a directory: {root_path}")

    if store is None:
        store_res = build_store(cache_path)
        if not store_res.ok:
            return Result.Err(store_res.code, store_res.error or "Failed to open cache store")
        store = store_res.unwrap()

    if watcher_enabled is None:
        watcher_enabled = load_settings().watcher_enabled

    try:
        container = AssetContainer(handle, LocalFilesystemDriver(root_path), store, watcher_enabled=watcher_enabled)
    except ValueError as exc:
        return Result.Err(ErrorCode.INVALID_INPUT, str(exc))

    log_success(logger, f"Container '{container.handle()}' ready (watch mode: {'on' if watcher_enabled else 'off'})")
    return Result.Ok(container)
