"""
Filesystem adapters: local driver and watch mode.
"""

from .contents_watcher import ContentsWatcher
from .local_driver import DirectoryAttributes, FileAttributes, LocalFilesystemDriver

__all__ = ["ContentsWatcher", "DirectoryAttributes", "FileAttributes", "LocalFilesystemDriver"]
