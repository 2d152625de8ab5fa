"""Pluggable response caches.

* :class:`CacheStorage` -- the five-operation interface the executor uses.
* :class:`MemoryCache` -- dict-backed, per process.
* :class:`DiskCache` -- :mod:`diskcache`-backed, persists across restarts.
"""

from ngakit.cache.base import CacheStorage, make_cache_key, namespace_prefix
from ngakit.cache.disk import DiskCache
from ngakit.cache.memory import MemoryCache

__all__ = ["CacheStorage", "DiskCache", "MemoryCache", "make_cache_key", "namespace_prefix"]
