"""The public entry point: :class:`NGAClient`."""

from __future__ import annotations

from typing import Optional

import httpx

from ngakit.api import ForumsApi, MessagesApi, NotificationsApi, PostsApi, TopicsApi, UsersApi
from ngakit.cache.base import CacheStorage
from ngakit.client.executor import Executor
from ngakit.models import ClientConfig


class NGAClient:
    """Async client for the NGA forum.

    The configuration is fixed for the client's lifetime; build a new
    client to switch accounts. Concurrent operations share one connection
    pool and one cache.

    Args:
        config: Client configuration. Anonymous defaults when omitted.
        cache: Optional cache backend, e.g.
            :class:`~ngakit.cache.MemoryCache`. No caching when ``None``.
        transport: Optional httpx transport, mainly for tests.

    Example::

        config = ClientConfig(credential=Credential(token="...", uid=42))
        async with NGAClient(config, cache=MemoryCache()) as client:
            page = await client.topics.list(ForumId.fid(-7)).page(2).send()
            counts = await client.notifications.counts()
    """

    def __init__(
        self,
        config: Optional[ClientConfig] = None,
        cache: Optional[CacheStorage] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._executor = Executor(config or ClientConfig(), cache=cache, transport=transport)
        self.forums = ForumsApi(self._executor)
        self.topics = TopicsApi(self._executor)
        self.posts = PostsApi(self._executor)
        self.users = UsersApi(self._executor)
        self.notifications = NotificationsApi(self._executor)
        self.messages = MessagesApi(self._executor)

    @property
    def config(self) -> ClientConfig:
        return self._executor.config

    @property
    def cache(self) -> Optional[CacheStorage]:
        return self._executor.cache

    @property
    def is_authenticated(self) -> bool:
        return self._executor.config.credential is not None

    async def aclose(self) -> None:
        """Close the underlying connection pool."""
        await self._executor.aclose()

    async def __aenter__(self) -> NGAClient:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.aclose()
