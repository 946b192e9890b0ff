"""
Metadata normalizer - converts driver listing entries into canonical records.

Drivers hand back one of two shapes: plain mappings (already carrying
`path`/`type`/`timestamp`/`size`) or attribute objects exposing accessor
methods. Both are wrapped behind `RawEntry` here so the index never has to
know which driver produced an entry.

All functions are stateless and have no side effects.
"""
from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Protocol, runtime_checkable

from ...shared import DIRECTORY_TYPES, CanonicalRecord, EntryType, ErrorCode, Result

# Parent value path-splitting reports for a root-level entry.
ROOT_SENTINEL = "."


@runtime_checkable
class RawEntry(Protocol):
    def type(self) -> str: ...

    def path(self) -> str: ...

    def last_modified(self) -> int | None: ...

    def file_size(self) -> int | None: ...


class ContentsDriver(Protocol):
    """Storage driver capability consumed by the contents index."""

    def list_contents(self, path: str, recursive: bool) -> Any: ...

    def has(self, path: str) -> bool: ...

    def directory_exists(self, path: str) -> bool: ...

    def last_modified(self, path: str) -> int: ...

    def file_size(self, path: str) -> int: ...


class MappingEntry:
    """Adapter for dict-like listing entries."""

    __slots__ = ("_raw",)

    def __init__(self, raw: Mapping[str, Any]):
        self._raw = raw

    def type(self) -> str:
        return str(self._raw.get("type") or "")

    def path(self) -> str:
        return str(self._raw["path"])

    def last_modified(self) -> int | None:
        value = self._raw.get("timestamp", self._raw.get("last_modified"))
        return None if value is None else int(value)

    def file_size(self) -> int | None:
        value = self._raw.get("size", self._raw.get("file_size"))
        return None if value is None else int(value)


class AccessorEntry:
    """Adapter for attribute objects (``type()``, ``path()``, ``last_modified()``, ``file_size()``)."""

    __slots__ = ("_raw",)

    def __init__(self, raw: Any):
        self._raw = raw

    def _call(self, *names: str) -> Any:
        for name in names:
            fn = getattr(self._raw, name, None)
            if callable(fn):
                return fn()
        return None

    def type(self) -> str:
        return str(self._call("type") or "")

    def path(self) -> str:
        return str(self._call("path"))

    def last_modified(self) -> int | None:
        value = self._call("last_modified", "lastModified")
        return None if value is None else int(value)

    def file_size(self) -> int | None:
        value = self._call("file_size", "fileSize")
        return None if value is None else int(value)


def adapt_entry(raw: Any) -> RawEntry:
    """
    Wrap a driver listing entry in the matching adapter.

    Raises:
        TypeError: the entry is neither a mapping nor an accessor object.
    """
    if isinstance(raw, (MappingEntry, AccessorEntry)):
        return raw
    if isinstance(raw, Mapping):
        return MappingEntry(raw)
    if callable(getattr(raw, "path", None)) and callable(getattr(raw, "type", None)):
        return AccessorEntry(raw)
    raise TypeError(f"Unsupported listing entry: {type(raw).__name__}")


def normalize_type(value: str) -> str:
    if str(value or "").strip().lower() in DIRECTORY_TYPES:
        return EntryType.DIRECTORY.value
    return EntryType.FILE.value


def split_path(path: str) -> dict[str, str]:
    """
    Split a slash-delimited path into dirname/basename/filename/extension.

    Root-level entries get ``dirname == ""``; ``extension`` is only present
    when the basename carries a dot-suffix.
    """
    trimmed = path.rstrip("/") or path
    head, sep, basename = trimmed.rpartition("/")
    if not sep:
        dirname = ROOT_SENTINEL
    else:
        dirname = head or "/"

    parts: dict[str, str] = {
        "dirname": "" if dirname == ROOT_SENTINEL else dirname,
        "basename": basename,
    }
    stem, dot, ext = basename.rpartition(".")
    if dot:
        parts["filename"] = stem
        parts["extension"] = ext
    else:
        parts["filename"] = basename
    return parts


def parent_of(path: str) -> str:
    """Parent directory of `path`, or ``ROOT_SENTINEL`` when there is none."""
    dirname = split_path(path)["dirname"]
    if dirname in ("", "/"):
        return ROOT_SENTINEL
    return dirname


def _build_record(kind: str, path: str, timestamp: int | None, size: int | None) -> CanonicalRecord:
    pathinfo = split_path(path)
    record: CanonicalRecord = {
        "type": kind,
        "path": path,
        "timestamp": timestamp,
        "dirname": pathinfo["dirname"],
        "basename": pathinfo["basename"],
        "filename": pathinfo["filename"],
    }
    if "extension" in pathinfo:
        record["extension"] = pathinfo["extension"]
    if kind == EntryType.FILE.value:
        record["size"] = size
    return record


def normalize(raw: Any) -> CanonicalRecord:
    """Normalize one driver listing entry (mapping or accessor object)."""
    entry = adapt_entry(raw)
    kind = normalize_type(entry.type())
    size = entry.file_size() if kind == EntryType.FILE.value else None
    return _build_record(kind, entry.path(), entry.last_modified(), size)


def normalize_single(driver: ContentsDriver, path: str) -> Result[CanonicalRecord]:
    """
    Look up one path on the driver and normalize it.

    A missing path is reported as ``Result.Err(NOT_FOUND)``; the asset may have
    been deleted between enumeration and indexing. Driver failures propagate.
    """
    if not driver.has(path):
        return Result.Err(ErrorCode.NOT_FOUND, f"Path not found: {path}")

    if driver.directory_exists(path):
        kind = EntryType.DIRECTORY.value
        size = None
    else:
        kind = EntryType.FILE.value
        size = driver.file_size(path)

    return Result.Ok(_build_record(kind, path, driver.last_modified(path), size))
