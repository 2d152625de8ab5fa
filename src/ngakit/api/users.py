"""User profiles and user search."""

from __future__ import annotations

from typing import TYPE_CHECKING, Union

from ngakit.api.topics import user_namespace
from ngakit.decoder.projections import DecodeContext
from ngakit.endpoints import Endpoint
from ngakit.exceptions import AuthRequiredError
from ngakit.records import User, UserSearchResult
from ngakit.request.builder import FixedRequest, check_id, check_text, pairs
from ngakit.request.descriptor import CacheScope, RequestDescriptor, Volatility

if TYPE_CHECKING:
    from ngakit.client.executor import Executor

ME_NAMESPACE = "me"
USER_SEARCH_NAMESPACE = "user-search"


class UsersApi:
    """User operations. Reach it as ``client.users``."""

    def __init__(self, executor: Executor) -> None:
        self._executor = executor

    async def _send(self, descriptor: RequestDescriptor):
        return await FixedRequest(self._executor, descriptor=descriptor).send()

    async def get(self, user_id: Union[str, int]) -> User:
        uid = check_id(user_id, "user id")
        return await self._send(
            RequestDescriptor(
                endpoint=Endpoint.USER_GET,
                path="nuke.php",
                namespace=user_namespace(uid),
                query=pairs(("__lib", "ucp"), ("__act", "get"), ("uid", uid)),
                volatility=Volatility.STATIC,
                context=DecodeContext(user_id=uid),
            )
        )

    async def get_by_name(self, username: str) -> User:
        username = check_text(username, "username").strip()
        return await self._send(
            RequestDescriptor(
                endpoint=Endpoint.USER_GET_BY_NAME,
                path="nuke.php",
                namespace=f"user-name:{username}",
                query=pairs(("__lib", "ucp"), ("__act", "get"), ("username", username)),
                volatility=Volatility.STATIC,
            )
        )

    async def me(self) -> User:
        """Profile of the configured credential's account."""
        uid = self._executor.current_uid
        if uid is None:
            raise AuthRequiredError(Endpoint.USER_ME.value)
        return await self._send(
            RequestDescriptor(
                endpoint=Endpoint.USER_ME,
                path="nuke.php",
                namespace=ME_NAMESPACE,
                query=pairs(("__lib", "ucp"), ("__act", "get"), ("uid", uid)),
                requires_auth=True,
                scope=CacheScope.PRIVATE,
                volatility=Volatility.STATIC,
                context=DecodeContext(user_id=uid),
            )
        )

    async def search(self, keyword: str) -> tuple[UserSearchResult, ...]:
        keyword = check_text(keyword, "search keyword")
        return await self._send(
            RequestDescriptor(
                endpoint=Endpoint.USER_SEARCH,
                path="nuke.php",
                namespace=USER_SEARCH_NAMESPACE,
                query=pairs(("__lib", "ucp"), ("__act", "search"), ("key", keyword)),
                volatility=Volatility.STATIC,
            )
        )
