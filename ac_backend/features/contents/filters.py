"""
Folder/recursion filtering and the hidden-entry policy for listing views.

Internal bookkeeping entries (``.meta`` folders, OS and VCS droppings) are
never user-visible. This is a fixed policy, not configuration.
"""
from __future__ import annotations

from collections.abc import Iterable

from ...shared import CanonicalRecord, Listing

META_DIRECTORY = ".meta"
HIDDEN_FILE_SUFFIXES: tuple[str, ...] = (".DS_Store", ".gitkeep", ".gitignore")


def view_key(folder: str, recursive: bool) -> str:
    return folder + ("-recursive" if recursive else "")


def in_folder(record: CanonicalRecord, folder: str, recursive: bool) -> bool:
    directory = record.get("dirname") or "/"
    if recursive:
        return directory.startswith(folder)
    return directory == folder


def filter_folder(listing: Listing, folder: str, recursive: bool) -> Listing:
    # The root requested recursively already contains everything.
    if folder == "/" and recursive:
        return dict(listing)
    return {path: record for path, record in listing.items() if in_folder(record, folder, recursive)}


def is_hidden_file(path: str) -> bool:
    return (
        path.startswith(f"{META_DIRECTORY}/")
        or f"/{META_DIRECTORY}/" in path
        or path.endswith(HIDDEN_FILE_SUFFIXES)
    )


def is_hidden_directory(record: CanonicalRecord) -> bool:
    return record.get("basename") == META_DIRECTORY


def reject(listing: Listing, predicate) -> Listing:
    return {path: record for path, record in listing.items() if not predicate(path, record)}


def visible_files(listing: Listing) -> Listing:
    return reject(listing, lambda path, _record: is_hidden_file(path))


def visible_directories(listing: Listing) -> Listing:
    return reject(listing, lambda _path, record: is_hidden_directory(record))


def of_type(listing: Listing, kind: str) -> Listing:
    return {path: record for path, record in listing.items() if record.get("type") == kind}


def sort_by_path(records: Iterable[CanonicalRecord]) -> Listing:
    return {record["path"]: record for record in sorted(records, key=lambda r: r["path"])}
