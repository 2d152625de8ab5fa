"""Persistent cache backed by :mod:`diskcache`.

Survives process restarts, which the in-memory backend does not. The
blocking :class:`diskcache.Cache` calls run in a worker thread so they do
not stall the event loop.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any, Optional

import diskcache

from ngakit.cache.base import CacheStorage


class DiskCache(CacheStorage):
    """Directory-backed :class:`CacheStorage`.

    Expiry uses diskcache's native ``expire``; reads of expired entries
    miss and :meth:`scan_prefix` filters them out.

    Args:
        directory: Cache root. A ``responses/`` subdirectory is created
            inside it.

    Example::

        cache = DiskCache(get_cache_dir())
        await cache.set("categories/shared/ab12", b"<root/>", ttl=3600)
    """

    def __init__(self, directory: str | Path) -> None:
        self._directory = Path(directory) / "responses"
        self._cache = diskcache.Cache(str(self._directory))

    async def get(self, key: str) -> Optional[bytes]:
        return await asyncio.to_thread(self._cache.get, key)

    async def set(self, key: str, value: bytes, ttl: Optional[float] = None) -> None:
        await asyncio.to_thread(self._cache.set, key, value, ttl)

    async def remove(self, key: str) -> None:
        await asyncio.to_thread(self._cache.delete, key)

    async def clear(self) -> None:
        await asyncio.to_thread(self._cache.clear)

    async def scan_prefix(self, prefix: str) -> list[str]:
        return await asyncio.to_thread(self._scan, prefix)

    def _scan(self, prefix: str) -> list[str]:
        # Membership checks honour expiry; iteration alone does not.
        return [
            key
            for key in self._cache.iterkeys()
            if isinstance(key, str) and key.startswith(prefix) and key in self._cache
        ]

    def stats(self) -> dict[str, Any]:
        """Return the entry count (expired entries not yet culled included) and location."""
        return {
            "backend": "disk",
            "size": len(self._cache),
            "directory": str(self._directory),
        }

    def close(self) -> None:
        """Close the underlying :class:`diskcache.Cache` and release resources."""
        self._cache.close()
