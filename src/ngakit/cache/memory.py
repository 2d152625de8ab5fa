"""In-process cache backed by a dict and a monotonic clock."""

from __future__ import annotations

import threading
import time
from typing import Callable, Optional

from ngakit.cache.base import CacheStorage


class MemoryCache(CacheStorage):
    """Dict-backed :class:`CacheStorage`.

    Entries expire lazily: an expired entry is dropped the next time
    :meth:`get` or :meth:`scan_prefix` meets it. :meth:`purge_expired`
    sweeps eagerly when a caller wants to bound memory. A lock guards the
    map so concurrent coroutines and threads can share one instance;
    concurrent writers to one key are last-write-wins.

    Args:
        clock: Monotonic time source in seconds. Tests pass a fake.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._lock = threading.Lock()
        self._entries: dict[str, tuple[bytes, Optional[float]]] = {}

    def __len__(self) -> int:
        now = self._clock()
        with self._lock:
            return sum(1 for _, expires_at in self._entries.values() if not _expired(expires_at, now))

    async def get(self, key: str) -> Optional[bytes]:
        now = self._clock()
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            value, expires_at = entry
            if _expired(expires_at, now):
                del self._entries[key]
                return None
            return value

    async def set(self, key: str, value: bytes, ttl: Optional[float] = None) -> None:
        expires_at = None if ttl is None else self._clock() + ttl
        with self._lock:
            self._entries[key] = (value, expires_at)

    async def remove(self, key: str) -> None:
        with self._lock:
            self._entries.pop(key, None)

    async def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    async def scan_prefix(self, prefix: str) -> list[str]:
        now = self._clock()
        with self._lock:
            keys = []
            for key, (_, expires_at) in list(self._entries.items()):
                if not key.startswith(prefix):
                    continue
                if _expired(expires_at, now):
                    del self._entries[key]
                else:
                    keys.append(key)
            return keys

    def purge_expired(self) -> int:
        """Drop every expired entry and return how many were removed."""
        now = self._clock()
        with self._lock:
            stale = [key for key, (_, expires_at) in self._entries.items() if _expired(expires_at, now)]
            for key in stale:
                del self._entries[key]
            return len(stale)

    def stats(self) -> dict[str, object]:
        return {"backend": "memory", "size": len(self)}


def _expired(expires_at: Optional[float], now: float) -> bool:
    return expires_at is not None and now > expires_at
