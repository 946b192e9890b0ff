"""
Backing stores for container listings.
"""

from .memory_store import MemoryCacheStore
from .sqlite_store import SqliteCacheStore

__all__ = ["MemoryCacheStore", "SqliteCacheStore"]
