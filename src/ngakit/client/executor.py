"""Request executor -- transport, auth, cache-aside and failure mapping.

:class:`Executor` turns a :class:`~ngakit.request.RequestDescriptor` into a
decoded record. Every :meth:`Executor.send` runs the same sequence:

1. Auth gating -- gated operations without a credential fail before any
   cache or network access.
2. Cache lookup -- cacheable descriptors are looked up by key; a hit is
   decoded and returned without touching the network.
3. Execute -- one POST through the shared :class:`httpx.AsyncClient`.
4. Structure check -- charset and XML stages; forum errors raise here and
   are never cached.
5. Cache store -- the raw bytes prefixed with the resolved codec name,
   with the TTL of the descriptor's band. A hit decodes with that codec.
6. Invalidation -- once a mutation passes the structure check, every key
   under the namespaces the descriptor names is removed.
7. Projection -- the typed record is built.

There are no retries. :class:`~ngakit.exceptions.NetworkError` is marked
retryable so callers can decide for themselves.
"""

from __future__ import annotations

import dataclasses
import hashlib
import logging
from typing import Any, Optional

import httpx

from ngakit.cache.base import CacheStorage, namespace_prefix
from ngakit.decoder import charset, parse_payload, project
from ngakit.exceptions import ApiError, AuthRequiredError, DecodeError, NetworkError
from ngakit.models import ClientConfig, Device
from ngakit.request.descriptor import CacheScope, RequestDescriptor

logger = logging.getLogger(__name__)

# read.php rejects non-Android agents for some boards.
_ANDROID_ONLY_PATHS = frozenset({"read.php"})


class Executor:
    """Performs descriptors against the forum.

    Args:
        config: Immutable client configuration.
        cache: Optional cache backend. ``None`` means every lookup misses.
        transport: Optional :class:`httpx.AsyncBaseTransport`, mainly for
            tests (``httpx.MockTransport``).
    """

    def __init__(
        self,
        config: ClientConfig,
        cache: Optional[CacheStorage] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._config = config
        self._cache = cache if config.cache.enabled else None
        request = config.request
        self._http = httpx.AsyncClient(
            base_url=config.base_url,
            timeout=httpx.Timeout(request.read_timeout, connect=request.connect_timeout),
            verify=request.verify_ssl,
            follow_redirects=True,
            transport=transport,
        )
        self._private_scope = _private_scope_id(config)

    @property
    def config(self) -> ClientConfig:
        return self._config

    @property
    def cache(self) -> Optional[CacheStorage]:
        return self._cache

    @property
    def current_uid(self) -> Optional[str]:
        credential = self._config.credential
        return str(credential.uid) if credential is not None else None

    async def aclose(self) -> None:
        await self._http.aclose()

    # ------------------------------------------------------------------ #
    # Pipeline
    # ------------------------------------------------------------------ #

    async def send(self, descriptor: RequestDescriptor) -> Any:
        """Execute *descriptor* and return its decoded record.

        Raises:
            AuthRequiredError: If the descriptor needs a credential and none
                is configured.
            NetworkError: On connect, timeout or TLS failure.
            ApiError: On an embedded forum error or a bare HTTP error status.
            DecodeError: If the payload cannot be decoded.
        """
        # 1. Auth gating
        if descriptor.requires_auth and self._config.credential is None:
            raise AuthRequiredError(descriptor.endpoint.value)

        context = dataclasses.replace(descriptor.context, current_uid=self.current_uid)
        cache = self._cache

        # 2. Cache lookup
        key = self._cache_key(descriptor)
        if key is not None and cache is not None:
            entry = await cache.get(key)
            if entry is not None:
                logger.debug("cache hit for %s (%s)", descriptor.endpoint.value, key)
                codec, cached = _unpack_entry(entry)
                return project(descriptor.endpoint, parse_payload(cached, codec), context)
            logger.debug("cache miss for %s (%s)", descriptor.endpoint.value, key)

        # 3. Execute
        response = await self._execute(descriptor)
        raw = response.content
        hint = charset.charset_from_content_type(response.headers.get("content-type"))

        # 4. Structure check and error mapping
        root = self._parse_response(response, raw, hint)

        # 5. Cache store, with the charset resolved for this response
        if key is not None and cache is not None:
            ttl = descriptor.volatility.ttl(self._config.cache)
            await cache.set(key, _pack_entry(charset.detect_charset(raw, hint), raw), ttl)
            logger.debug("cached %d bytes for %s with ttl %ss", len(raw), descriptor.endpoint.value, ttl)

        # 6. Invalidation, once the forum has accepted the mutation
        if descriptor.mutating:
            await self._invalidate(descriptor.invalidates)

        # 7. Projection
        return project(descriptor.endpoint, root, context)

    # ------------------------------------------------------------------ #
    # Private helpers
    # ------------------------------------------------------------------ #

    def _cache_key(self, descriptor: RequestDescriptor) -> Optional[str]:
        if self._cache is None or not descriptor.cacheable:
            return None
        if descriptor.scope is CacheScope.PRIVATE:
            if self._private_scope is None:
                return None
            return descriptor.cache_key(self._private_scope)
        return descriptor.cache_key(CacheScope.SHARED.value)

    def _headers(self, descriptor: RequestDescriptor, url: str) -> dict[str, str]:
        request = self._config.request
        if request.user_agent:
            agent = request.user_agent
        elif descriptor.path in _ANDROID_ONLY_PATHS:
            agent = Device.ANDROID.user_agent
        else:
            agent = request.device.user_agent
        headers = {"User-Agent": agent, "X-User-Agent": agent, "Referer": url}
        return self._inject_auth(headers)

    def _inject_auth(self, headers: dict[str, str]) -> dict[str, str]:
        """Attach the credential as session cookies."""
        credential = self._config.credential
        if credential is None:
            return headers
        cookie_str = "; ".join(f"{k}={v}" for k, v in credential.cookies().items())
        existing = headers.get("Cookie")
        if existing:
            cookie_str = f"{existing}; {cookie_str}"
        return {**headers, "Cookie": cookie_str}

    def _query(self, descriptor: RequestDescriptor) -> list[tuple[str, str]]:
        query = [(k, v) for k, v in descriptor.query if v != ""]
        query.append(("lite", "xml"))
        query.append(("__inchst", "UTF8"))
        return query

    async def _execute(self, descriptor: RequestDescriptor) -> httpx.Response:
        url = str(self._http.base_url.join(descriptor.path))
        logger.debug("%s %s", descriptor.method, descriptor.path)
        try:
            return await self._http.request(
                descriptor.method,
                descriptor.path,
                params=self._query(descriptor),
                data=dict(descriptor.form) if descriptor.form else None,
                headers=self._headers(descriptor, url),
            )
        except httpx.TimeoutException as exc:
            raise NetworkError(f"Request to {descriptor.path} timed out: {exc}") from exc
        except httpx.TransportError as exc:
            raise NetworkError(f"Request to {descriptor.path} failed: {exc}") from exc

    def _parse_response(self, response: httpx.Response, raw: bytes, hint: Optional[str]) -> Any:
        """Run the charset and structure stages, mapping HTTP failures."""
        if response.is_success:
            return parse_payload(raw, hint)
        # A forum error payload on a failed status wins over the status itself.
        if raw.strip():
            try:
                parse_payload(raw, hint)
            except DecodeError as exc:
                logger.debug("HTTP %s body is not a forum payload: %s", response.status_code, exc)
        raise ApiError(response.status_code, response.reason_phrase or "HTTP error")

    async def _invalidate(self, namespaces: tuple[str, ...]) -> None:
        if self._cache is None:
            return
        for namespace in namespaces:
            keys = await self._cache.scan_prefix(namespace_prefix(namespace))
            for key in keys:
                await self._cache.remove(key)
            if keys:
                logger.debug("invalidated %d cache entries under %s", len(keys), namespace)


def _private_scope_id(config: ClientConfig) -> Optional[str]:
    credential = config.credential
    if credential is None:
        return None
    digest = hashlib.sha256(
        f"{credential.uid}:{credential.token.get_secret_value()}".encode("utf-8")
    ).hexdigest()
    return f"u{digest[:16]}"


def _pack_entry(codec: str, raw: bytes) -> bytes:
    """Prefix *raw* with the codec it was decoded with."""
    return codec.encode("ascii") + b"\n" + raw


def _unpack_entry(entry: bytes) -> tuple[str, bytes]:
    codec, _, raw = entry.partition(b"\n")
    return codec.decode("ascii"), raw
