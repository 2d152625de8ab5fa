"""The immutable description of one forum API call."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Optional

from ngakit.cache.base import make_cache_key
from ngakit.decoder.projections import DecodeContext
from ngakit.endpoints import Endpoint
from ngakit.models import CacheConfig

Pairs = tuple[tuple[str, str], ...]


class CacheScope(str, enum.Enum):
    """Which cache partition a response may live in.

    ``PRIVATE`` responses depend on who is asking and are keyed per
    credential; ``NONE`` responses are never cached.
    """

    NONE = "none"
    SHARED = "shared"
    PRIVATE = "private"


class Volatility(str, enum.Enum):
    """How quickly a response goes stale. Selects the TTL band."""

    STATIC = "static"
    STANDARD = "standard"
    RECENT = "recent"

    def ttl(self, config: CacheConfig) -> int:
        if self is Volatility.STATIC:
            return config.ttl_static_seconds
        if self is Volatility.STANDARD:
            return config.ttl_standard_seconds
        return config.ttl_recent_seconds


@dataclass(frozen=True)
class RequestDescriptor:
    """Everything the executor needs to perform and cache one call.

    Attributes:
        endpoint: Operation identity; selects the projection.
        path: Script path relative to the base URL, e.g. ``thread.php``.
        namespace: Entity key prefix of the cache entries this call owns.
        query: Ordered query pairs. Empty values are dropped on the wire.
        form: Ordered form-body pairs.
        method: HTTP method.
        page: 1-based page cursor.
        order: Ordering key, when the operation has one.
        requires_auth: Fail before I/O without a credential.
        mutating: The call changes forum state; never cached.
        scope: Cache partition for reads.
        volatility: TTL band for reads.
        invalidates: Namespaces to drop after a successful mutation.
        context: Facts the projection needs besides the payload.
    """

    endpoint: Endpoint
    path: str
    namespace: str
    query: Pairs = ()
    form: Pairs = ()
    method: str = "POST"
    page: int = 1
    order: Optional[str] = None
    requires_auth: bool = False
    mutating: bool = False
    scope: CacheScope = CacheScope.SHARED
    volatility: Volatility = Volatility.STANDARD
    invalidates: tuple[str, ...] = ()
    context: DecodeContext = field(default_factory=DecodeContext)

    @property
    def cacheable(self) -> bool:
        return not self.mutating and self.scope is not CacheScope.NONE

    def cache_key(self, scope_id: str) -> str:
        """Deterministic key for this call within *scope_id*.

        Only the fields that shape the response take part; the credential
        never does.
        """
        return make_cache_key(
            self.namespace,
            scope_id,
            [self.endpoint.value, self.method, self.path, list(self.query), list(self.form)],
        )
