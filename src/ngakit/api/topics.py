"""Topic listings, topic pages, searches and topic favorites."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional, Union

from ngakit.decoder.projections import DecodeContext
from ngakit.endpoints import Endpoint
from ngakit.exceptions import BuilderError
from ngakit.models import FavoriteOp, ForumId, SearchTimeRange, TopicOrder
from ngakit.records import Ack, FavoriteFolder, TopicDetailsResult, TopicListResult
from ngakit.request.builder import (
    FixedRequest,
    RequestBuilder,
    check_id,
    check_page,
    check_text,
    coerce_enum,
    pairs,
)
from ngakit.request.descriptor import CacheScope, RequestDescriptor, Volatility

if TYPE_CHECKING:
    from ngakit.client.executor import Executor

FAVORITE_TOPICS_NAMESPACE = "favorites:topics"
FAVORITE_FOLDERS_NAMESPACE = "favorites:folders"

# read.php option bit that keeps only anonymous posts.
_ANONYMOUS_ONLY_OPT = "512"


def topic_namespace(topic_id: str) -> str:
    """Cache namespace of everything read about one topic."""
    return f"topic:{topic_id}"


def user_namespace(user_id: str) -> str:
    return f"user:{user_id}"


def _flag(enabled: bool) -> str:
    return "1" if enabled else ""


@dataclass(frozen=True)
class TopicListBuilder(RequestBuilder[TopicListResult]):
    """Topics of one forum, newest activity first unless ordered otherwise."""

    forum_id: Optional[ForumId] = None
    page_number: int = 1
    order_by: TopicOrder = TopicOrder.LAST_POST
    recommended: bool = False

    def page(self, page: int) -> TopicListBuilder:
        return self._with(page_number=check_page(page))

    def order(self, order: Union[TopicOrder, str]) -> TopicListBuilder:
        return self._with(order_by=coerce_enum(TopicOrder, order, "topic order"))

    def recommended_only(self, enabled: bool = True) -> TopicListBuilder:
        return self._with(recommended=enabled)

    def build(self) -> RequestDescriptor:
        if self.forum_id is None:
            raise BuilderError("forum id is required")
        return RequestDescriptor(
            endpoint=Endpoint.TOPIC_LIST,
            path="thread.php",
            namespace=self.forum_id.namespace,
            query=pairs(
                (self.forum_id.kind.value, self.forum_id.value),
                ("page", self.page_number),
                ("order_by", self.order_by.wire_value),
                ("recommend", _flag(self.recommended)),
            ),
            page=self.page_number,
            order=self.order_by.value,
            volatility=Volatility.RECENT,
            context=DecodeContext(page=self.page_number),
        )


@dataclass(frozen=True)
class TopicDetailsBuilder(RequestBuilder[TopicDetailsResult]):
    """One page of a topic's posts.

    ``post`` jumps to the page holding a given post and ``author`` keeps
    only that user's posts.
    """

    topic_id: str = ""
    page_number: int = 1
    post_id: Optional[str] = None
    author_id: Optional[str] = None
    anonymous: bool = False
    fav_id: Optional[str] = None

    def page(self, page: int) -> TopicDetailsBuilder:
        return self._with(page_number=check_page(page))

    def post(self, post_id: Union[str, int]) -> TopicDetailsBuilder:
        return self._with(post_id=check_id(post_id, "post id"))

    def author(self, user_id: Union[str, int]) -> TopicDetailsBuilder:
        return self._with(author_id=check_id(user_id, "author id"))

    def anonymous_only(self, enabled: bool = True) -> TopicDetailsBuilder:
        return self._with(anonymous=enabled)

    def fav(self, fav_id: str) -> TopicDetailsBuilder:
        return self._with(fav_id=check_id(fav_id, "favorite id"))

    def build(self) -> RequestDescriptor:
        tid = check_id(self.topic_id, "topic id")
        return RequestDescriptor(
            endpoint=Endpoint.TOPIC_DETAILS,
            path="read.php",
            namespace=topic_namespace(tid),
            query=pairs(
                ("tid", tid),
                ("page", self.page_number),
                ("fav", self.fav_id),
                ("pid", self.post_id),
                ("authorid", self.author_id),
                ("opt", _ANONYMOUS_ONLY_OPT if self.anonymous else None),
            ),
            page=self.page_number,
            volatility=Volatility.STANDARD,
            context=DecodeContext(page=self.page_number, topic_id=tid),
        )


@dataclass(frozen=True)
class TopicSearchBuilder(RequestBuilder[TopicListResult]):
    """Keyword search inside one forum. Titles only unless ``search_content`` is set."""

    forum_id: Optional[ForumId] = None
    keyword: str = ""
    page_number: int = 1
    content: bool = False
    recommended: bool = False
    range: SearchTimeRange = SearchTimeRange.ALL

    def page(self, page: int) -> TopicSearchBuilder:
        return self._with(page_number=check_page(page))

    def search_content(self, enabled: bool = True) -> TopicSearchBuilder:
        return self._with(content=enabled)

    def recommended_only(self, enabled: bool = True) -> TopicSearchBuilder:
        return self._with(recommended=enabled)

    def time_range(self, time_range: Union[SearchTimeRange, str]) -> TopicSearchBuilder:
        return self._with(range=coerce_enum(SearchTimeRange, time_range, "time range"))

    def build(self) -> RequestDescriptor:
        if self.forum_id is None:
            raise BuilderError("forum id is required")
        keyword = check_text(self.keyword, "search keyword")
        return RequestDescriptor(
            endpoint=Endpoint.TOPIC_SEARCH,
            path="thread.php",
            namespace=self.forum_id.namespace,
            query=pairs(
                (self.forum_id.kind.value, self.forum_id.value),
                ("key", keyword),
                ("page", self.page_number),
                ("content", _flag(self.content)),
                ("recommend", _flag(self.recommended)),
                ("time", self.range.seconds),
            ),
            page=self.page_number,
            volatility=Volatility.RECENT,
            context=DecodeContext(page=self.page_number),
        )


@dataclass(frozen=True)
class FavoriteTopicsBuilder(RequestBuilder[TopicListResult]):
    """Topics in the current user's favorites, optionally one folder only."""

    folder_id: Optional[str] = None
    page_number: int = 1

    def folder(self, folder_id: Union[str, int]) -> FavoriteTopicsBuilder:
        return self._with(folder_id=check_id(folder_id, "folder id"))

    def page(self, page: int) -> FavoriteTopicsBuilder:
        return self._with(page_number=check_page(page))

    def build(self) -> RequestDescriptor:
        return RequestDescriptor(
            endpoint=Endpoint.TOPIC_FAVORITES,
            path="thread.php",
            namespace=FAVORITE_TOPICS_NAMESPACE,
            query=pairs(("favor", self.folder_id), ("page", self.page_number)),
            page=self.page_number,
            requires_auth=True,
            scope=CacheScope.PRIVATE,
            volatility=Volatility.RECENT,
            context=DecodeContext(page=self.page_number),
        )


@dataclass(frozen=True)
class UserTopicsBuilder(RequestBuilder[TopicListResult]):
    """Topics started by one user."""

    user_id: str = ""
    page_number: int = 1

    def page(self, page: int) -> UserTopicsBuilder:
        return self._with(page_number=check_page(page))

    def build(self) -> RequestDescriptor:
        uid = check_id(self.user_id, "user id")
        return RequestDescriptor(
            endpoint=Endpoint.TOPIC_BY_USER,
            path="thread.php",
            namespace=user_namespace(uid),
            query=pairs(("authorid", uid), ("page", self.page_number)),
            page=self.page_number,
            volatility=Volatility.STANDARD,
            context=DecodeContext(page=self.page_number, user_id=uid),
        )


class TopicsApi:
    """Topic operations. Reach it as ``client.topics``."""

    def __init__(self, executor: Executor) -> None:
        self._executor = executor

    def list(self, forum_id: ForumId) -> TopicListBuilder:
        return TopicListBuilder(self._executor, forum_id=forum_id)

    def details(self, topic_id: Union[str, int]) -> TopicDetailsBuilder:
        return TopicDetailsBuilder(self._executor, topic_id=str(topic_id))

    def search(self, forum_id: ForumId, keyword: str) -> TopicSearchBuilder:
        return TopicSearchBuilder(self._executor, forum_id=forum_id, keyword=keyword)

    def favorites(self) -> FavoriteTopicsBuilder:
        return FavoriteTopicsBuilder(self._executor)

    def by_user(self, user_id: Union[str, int]) -> UserTopicsBuilder:
        return UserTopicsBuilder(self._executor, user_id=str(user_id))

    async def favorite_folders(self) -> tuple[FavoriteFolder, ...]:
        descriptor = RequestDescriptor(
            endpoint=Endpoint.TOPIC_FAVORITE_FOLDERS,
            path="nuke.php",
            namespace=FAVORITE_FOLDERS_NAMESPACE,
            query=pairs(("__lib", "topic_favor_v2"), ("__act", "list_folder"), ("page", 1)),
            requires_auth=True,
            scope=CacheScope.PRIVATE,
            volatility=Volatility.RECENT,
        )
        return await FixedRequest(self._executor, descriptor=descriptor).send()

    async def modify_favorite(
        self,
        topic_id: Union[str, int],
        op: Union[FavoriteOp, str] = FavoriteOp.ADD,
        folder_id: Optional[Union[str, int]] = None,
    ) -> Ack:
        """Add a topic to, or remove it from, a favorites folder.

        Args:
            topic_id: Topic to change.
            op: :attr:`FavoriteOp.ADD` or :attr:`FavoriteOp.REMOVE`.
            folder_id: Target folder. The default folder when omitted.
        """
        tid = check_id(topic_id, "topic id")
        op = coerce_enum(FavoriteOp, op, "favorite operation")
        # Removal takes a comma separated id list under a different name.
        tid_field = "tid" if op is FavoriteOp.ADD else "tidarray"
        descriptor = RequestDescriptor(
            endpoint=Endpoint.TOPIC_MODIFY_FAVORITE,
            path="nuke.php",
            namespace=FAVORITE_TOPICS_NAMESPACE,
            query=pairs(("__lib", "topic_favor_v2"), ("__act", op.value)),
            form=pairs((tid_field, tid), ("folder", folder_id)),
            requires_auth=True,
            mutating=True,
            scope=CacheScope.NONE,
            invalidates=(FAVORITE_TOPICS_NAMESPACE, FAVORITE_FOLDERS_NAMESPACE),
            context=DecodeContext(topic_id=tid),
        )
        return await FixedRequest(self._executor, descriptor=descriptor).send()
