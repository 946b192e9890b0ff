"""
Container contents feature: normalizer, filters and the cached index.
"""

from .index import AssetContainerContents, CacheStore
from .normalizer import ContentsDriver, normalize, normalize_single, split_path

__all__ = [
    "AssetContainerContents",
    "CacheStore",
    "ContentsDriver",
    "normalize",
    "normalize_single",
    "split_path",
]
