"""
Local caches for the AR demo.

Provides:
- AssetCache: ETag-validated store of downloaded files with a JSON listing
- InMemoryCacheProvider: dict-backed CacheProvider for tests
- RecentURLCache: per-demo list of previously opened deep links
"""

from .asset_cache import AssetCache
from .base import CacheProvider, InMemoryCacheProvider
from .url_cache import RecentURLCache

__all__ = ["AssetCache", "CacheProvider", "InMemoryCacheProvider", "RecentURLCache"]
