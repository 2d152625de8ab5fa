"""Forum directory, forum search, forum favorites and subforum filters."""

from __future__ import annotations

from typing import TYPE_CHECKING, Union

from ngakit.endpoints import Endpoint
from ngakit.models import FavoriteOp, ForumId, SubforumFilterOp
from ngakit.records import Ack, Category, Forum
from ngakit.request.builder import FixedRequest, check_id, check_text, coerce_enum, pairs
from ngakit.request.descriptor import CacheScope, RequestDescriptor, Volatility

if TYPE_CHECKING:
    from ngakit.client.executor import Executor

CATEGORIES_NAMESPACE = "categories"
FORUM_SEARCH_NAMESPACE = "forum-search"
FAVORITE_FORUMS_NAMESPACE = "favorites:forums"


class ForumsApi:
    """Forum operations. Reach it as ``client.forums``.

    Example::

        async with NGAClient() as client:
            for category in await client.forums.list():
                print(category.name, len(category.forums))
    """

    def __init__(self, executor: Executor) -> None:
        self._executor = executor

    async def _send(self, descriptor: RequestDescriptor):
        return await FixedRequest(self._executor, descriptor=descriptor).send()

    async def list(self) -> tuple[Category, ...]:
        """Every forum category with its forums."""
        return await self._send(
            RequestDescriptor(
                endpoint=Endpoint.FORUM_CATEGORIES,
                path="app_api.php",
                namespace=CATEGORIES_NAMESPACE,
                query=pairs(("__lib", "home"), ("__act", "category")),
                volatility=Volatility.STATIC,
            )
        )

    async def search(self, keyword: str) -> tuple[Forum, ...]:
        keyword = check_text(keyword, "search keyword")
        return await self._send(
            RequestDescriptor(
                endpoint=Endpoint.FORUM_SEARCH,
                path="forum.php",
                namespace=FORUM_SEARCH_NAMESPACE,
                query=pairs(("key", keyword)),
                volatility=Volatility.STATIC,
            )
        )

    async def favorites(self) -> tuple[Forum, ...]:
        """Forums the current user has favorited."""
        return await self._send(
            RequestDescriptor(
                endpoint=Endpoint.FORUM_FAVORITES,
                path="nuke.php",
                namespace=FAVORITE_FORUMS_NAMESPACE,
                query=pairs(("__lib", "forum_favor2"), ("__act", "forum_favor")),
                form=pairs(("action", "get")),
                requires_auth=True,
                scope=CacheScope.PRIVATE,
                volatility=Volatility.RECENT,
            )
        )

    async def modify_favorite(
        self, forum_id: Union[ForumId, str, int], op: Union[FavoriteOp, str] = FavoriteOp.ADD
    ) -> Ack:
        fid = forum_id.value if isinstance(forum_id, ForumId) else check_id(forum_id, "forum id")
        op = coerce_enum(FavoriteOp, op, "favorite operation")
        return await self._send(
            RequestDescriptor(
                endpoint=Endpoint.FORUM_MODIFY_FAVORITE,
                path="nuke.php",
                namespace=FAVORITE_FORUMS_NAMESPACE,
                query=pairs(("__lib", "forum_favor2"), ("__act", "forum_favor")),
                form=pairs(("action", op.value), ("fid", fid)),
                requires_auth=True,
                mutating=True,
                scope=CacheScope.NONE,
                invalidates=(FAVORITE_FORUMS_NAMESPACE,),
            )
        )

    async def set_subforum_filter(
        self,
        forum_id: Union[ForumId, str, int],
        filter_id: Union[str, int],
        op: Union[SubforumFilterOp, str],
    ) -> Ack:
        """Show or hide a subforum's topics in its parent's listing.

        Args:
            forum_id: The parent forum.
            filter_id: :attr:`~ngakit.records.Subforum.filter_id` of the
                subforum, as returned by a topic listing.
            op: :attr:`SubforumFilterOp.SHOW` or :attr:`SubforumFilterOp.HIDE`.
        """
        parent = forum_id if isinstance(forum_id, ForumId) else ForumId.fid(check_id(forum_id, "forum id"))
        filter_id = check_id(filter_id, "subforum filter id")
        op = coerce_enum(SubforumFilterOp, op, "subforum filter operation")
        return await self._send(
            RequestDescriptor(
                endpoint=Endpoint.FORUM_SUBFORUM_FILTER,
                path="nuke.php",
                namespace=parent.namespace,
                # The operation is the parameter name; the filter id its value.
                query=pairs(("__lib", "user_option"), ("__act", "set"), (op.value, filter_id)),
                form=pairs(("fid", parent.value), ("type", "1"), ("info", "add_to_block_tids")),
                requires_auth=True,
                mutating=True,
                scope=CacheScope.NONE,
                invalidates=(parent.namespace,),
            )
        )
