"""
Local-disk storage driver for asset containers.

Paths are container-relative and slash-delimited (``"photos/2024/a.jpg"``);
a leading slash is accepted and ignored. Listing entries are attribute
objects in the style of storage libraries that expose ``type()``, ``path()``,
``last_modified()`` and ``file_size()`` accessors.
"""

from __future__ import annotations

import os
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path

from ...shared import EntryType, get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class FileAttributes:
    _path: str
    _last_modified: int
    _file_size: int

    def type(self) -> str:
        return EntryType.FILE.value

    def path(self) -> str:
        return self._path

    def last_modified(self) -> int:
        return self._last_modified

    def file_size(self) -> int:
        return self._file_size


@dataclass(frozen=True)
class DirectoryAttributes:
    _path: str
    _last_modified: int

    def type(self) -> str:
        return EntryType.DIRECTORY.value

    def path(self) -> str:
        return self._path

    def last_modified(self) -> int:
        return self._last_modified

    def file_size(self) -> None:
        return None


class LocalFilesystemDriver:
    def __init__(self, root: str | Path):
        self._root = Path(root).resolve()

    @property
    def root(self) -> Path:
        return self._root

    # ------------------------------------------------------------------
    # Path helpers
    # ------------------------------------------------------------------

    def absolute(self, path: str) -> Path:
        """Resolve a container-relative path; raises ValueError outside the root."""
        rel = str(path or "").replace("\\", "/").strip("/")
        target = (self._root / rel) if rel else self._root
        resolved = Path(os.path.normpath(target))
        if resolved != self._root and self._root not in resolved.parents:
            raise ValueError(f"Path escapes container root: {path}")
        return resolved

    def relative(self, absolute: str | Path) -> str | None:
        """Container-relative path for `absolute`, or None when it is outside the root."""
        try:
            rel = Path(os.path.normpath(absolute)).relative_to(self._root)
        except ValueError:
            return None
        rel_str = rel.as_posix()
        return "" if rel_str == "." else rel_str

    # ------------------------------------------------------------------
    # Driver capability
    # ------------------------------------------------------------------

    def list_contents(self, path: str = "", recursive: bool = False) -> Iterator[FileAttributes | DirectoryAttributes]:
        """
        Yield attributes for every entry under `path`.

        Symlinked directories are skipped; symlinks to files are listed.
        """
        start = self.absolute(path)
        logger.debug("Listing %s (recursive=%s)", start, recursive)
        stack: list[Path] = [start]
        while stack:
            current = stack.pop()
            with os.scandir(current) as it:
                for entry in it:
                    rel = self.relative(entry.path)
                    if rel is None:
                        continue
                    if entry.is_dir(follow_symlinks=False):
                        st = entry.stat(follow_symlinks=False)
                        yield DirectoryAttributes(rel, int(st.st_mtime))
                        if recursive:
                            stack.append(Path(entry.path))
                        continue
                    if entry.is_file(follow_symlinks=True):
                        st = entry.stat(follow_symlinks=True)
                        yield FileAttributes(rel, int(st.st_mtime), int(st.st_size))

    def has(self, path: str) -> bool:
        return self.absolute(path).exists()

    def directory_exists(self, path: str) -> bool:
        return self.absolute(path).is_dir()

    def last_modified(self, path: str) -> int:
        return int(self.absolute(path).stat().st_mtime)

    def file_size(self, path: str) -> int:
        return int(self.absolute(path).stat().st_size)
