"""Storage-agnostic cache interface.

Any backend with these five coroutine operations can sit behind the
executor: in-memory, on-disk, or a remote key/value store. Expiry is the
backend's job; callers never see an expired entry.
"""

from __future__ import annotations

import hashlib
import json
from abc import ABC, abstractmethod
from typing import Optional, Sequence


class CacheStorage(ABC):
    """Async key/value store with optional per-entry TTL and prefix scans."""

    @abstractmethod
    async def get(self, key: str) -> Optional[bytes]:
        """Return the stored value, or ``None`` if absent or expired."""

    @abstractmethod
    async def set(self, key: str, value: bytes, ttl: Optional[float] = None) -> None:
        """Store *value* under *key*, replacing any previous value.

        Args:
            key: Cache key.
            value: Raw bytes to store.
            ttl: Lifetime in seconds. ``None`` keeps the entry until it is
                removed.
        """

    @abstractmethod
    async def remove(self, key: str) -> None:
        """Delete *key*. Absent keys are ignored."""

    @abstractmethod
    async def clear(self) -> None:
        """Delete every entry owned by this cache."""

    @abstractmethod
    async def scan_prefix(self, prefix: str) -> list[str]:
        """Return the live keys starting with *prefix*."""


def make_cache_key(namespace: str, scope: str, parts: Sequence[object]) -> str:
    """Build a cache key ``<namespace>/<scope>/<digest>``.

    The namespace comes first so that every entry about one entity, in any
    scope, can be found with a single :meth:`CacheStorage.scan_prefix`.

    Args:
        namespace: Entity key prefix, e.g. ``topic:12345678``.
        scope: ``shared`` or a credential-private scope id.
        parts: The request fields that determine the response.
    """
    digest = hashlib.sha256(
        json.dumps(list(parts), ensure_ascii=False, separators=(",", ":")).encode("utf-8")
    ).hexdigest()
    return f"{namespace}/{scope}/{digest}"


def namespace_prefix(namespace: str) -> str:
    """The prefix matching every key of *namespace*."""
    return f"{namespace}/"
