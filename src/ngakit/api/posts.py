"""Replies, comments, votes and per-post reads."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional, Union

from ngakit.api.topics import topic_namespace, user_namespace
from ngakit.decoder.projections import DecodeContext
from ngakit.endpoints import Endpoint
from ngakit.models import Vote
from ngakit.records import Ack, CommentsResult, LightPost, ReplyResult, UserPostsResult, VoteResult
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


@dataclass(frozen=True)
class ReplyBuilder(RequestBuilder[ReplyResult]):
    """A new post in an existing topic.

    Example::

        result = await (
            client.posts.reply(27455825)
            .content("[b]+1[/b]")
            .quote(612345678)
            .send()
        )
    """

    topic_id: str = ""
    text: str = ""
    quote_post_id: Optional[str] = None
    attachments: tuple[str, ...] = ()
    is_anonymous: bool = False

    def content(self, text: str) -> ReplyBuilder:
        return self._with(text=text)

    def quote(self, post_id: Union[str, int]) -> ReplyBuilder:
        return self._with(quote_post_id=check_id(post_id, "quoted post id"))

    def attachment(self, attachment_id: str) -> ReplyBuilder:
        return self._with(attachments=self.attachments + (check_id(attachment_id, "attachment id"),))

    def anonymous(self, enabled: bool = True) -> ReplyBuilder:
        return self._with(is_anonymous=enabled)

    def build(self) -> RequestDescriptor:
        tid = check_id(self.topic_id, "topic id")
        text = check_text(self.text, "reply content")
        namespace = topic_namespace(tid)
        return RequestDescriptor(
            endpoint=Endpoint.POST_REPLY,
            path="post.php",
            namespace=namespace,
            query=pairs(("action", "quote" if self.quote_post_id else "reply")),
            form=pairs(
                ("tid", tid),
                ("pid", self.quote_post_id),
                ("post_content", text),
                ("attachs", ",".join(self.attachments)),
                ("anony", "1" if self.is_anonymous else ""),
            ),
            requires_auth=True,
            mutating=True,
            scope=CacheScope.NONE,
            invalidates=(namespace,),
            context=DecodeContext(topic_id=tid),
        )


@dataclass(frozen=True)
class CommentBuilder(RequestBuilder[Ack]):
    """A short comment attached under a post."""

    topic_id: str = ""
    post_id: str = ""
    text: str = ""

    def content(self, text: str) -> CommentBuilder:
        return self._with(text=text)

    def build(self) -> RequestDescriptor:
        tid = check_id(self.topic_id, "topic id")
        pid = check_id(self.post_id, "post id")
        text = check_text(self.text, "comment content")
        namespace = topic_namespace(tid)
        return RequestDescriptor(
            endpoint=Endpoint.POST_COMMENT,
            path="nuke.php",
            namespace=namespace,
            query=pairs(("__lib", "post_comment"), ("__act", "add")),
            form=pairs(("tid", tid), ("pid", pid), ("content", text)),
            requires_auth=True,
            mutating=True,
            scope=CacheScope.NONE,
            invalidates=(namespace,),
            context=DecodeContext(topic_id=tid, post_id=pid),
        )


@dataclass(frozen=True)
class CommentsBuilder(RequestBuilder[CommentsResult]):
    topic_id: str = ""
    post_id: str = ""
    page_number: int = 1

    def page(self, page: int) -> CommentsBuilder:
        return self._with(page_number=check_page(page))

    def build(self) -> RequestDescriptor:
        tid = check_id(self.topic_id, "topic id")
        pid = check_id(self.post_id, "post id")
        return RequestDescriptor(
            endpoint=Endpoint.POST_COMMENTS,
            path="nuke.php",
            namespace=topic_namespace(tid),
            query=pairs(
                ("__lib", "post_comment"),
                ("__act", "get"),
                ("pid", pid),
                ("tid", tid),
                ("page", self.page_number),
            ),
            page=self.page_number,
            volatility=Volatility.STANDARD,
            context=DecodeContext(page=self.page_number, topic_id=tid, post_id=pid),
        )


@dataclass(frozen=True)
class UserPostsBuilder(RequestBuilder[UserPostsResult]):
    """Replies written by one user, across forums."""

    user_id: str = ""
    page_number: int = 1

    def page(self, page: int) -> UserPostsBuilder:
        return self._with(page_number=check_page(page))

    def build(self) -> RequestDescriptor:
        uid = check_id(self.user_id, "user id")
        return RequestDescriptor(
            endpoint=Endpoint.POST_BY_USER,
            path="thread.php",
            namespace=user_namespace(uid),
            query=pairs(("searchpost", "1"), ("authorid", uid), ("page", self.page_number)),
            page=self.page_number,
            volatility=Volatility.STANDARD,
            context=DecodeContext(page=self.page_number, user_id=uid),
        )


class PostsApi:
    """Post operations. Reach it as ``client.posts``."""

    def __init__(self, executor: Executor) -> None:
        self._executor = executor

    def reply(self, topic_id: Union[str, int]) -> ReplyBuilder:
        return ReplyBuilder(self._executor, topic_id=str(topic_id))

    def comment(self, topic_id: Union[str, int], post_id: Union[str, int]) -> CommentBuilder:
        return CommentBuilder(self._executor, topic_id=str(topic_id), post_id=str(post_id))

    def comments(self, topic_id: Union[str, int], post_id: Union[str, int]) -> CommentsBuilder:
        return CommentsBuilder(self._executor, topic_id=str(topic_id), post_id=str(post_id))

    def by_user(self, user_id: Union[str, int]) -> UserPostsBuilder:
        return UserPostsBuilder(self._executor, user_id=str(user_id))

    async def vote(
        self, topic_id: Union[str, int], post_id: Union[str, int], vote: Union[Vote, str]
    ) -> VoteResult:
        """Vote a post up or down and return the new totals.

        Voting the same direction twice withdraws the vote; the forum
        reports the resulting state either way.
        """
        tid = check_id(topic_id, "topic id")
        pid = check_id(post_id, "post id")
        vote = coerce_enum(Vote, vote, "vote")
        namespace = topic_namespace(tid)
        descriptor = RequestDescriptor(
            endpoint=Endpoint.POST_VOTE,
            path="nuke.php",
            namespace=namespace,
            query=pairs(("__lib", "topic_recommend"), ("__act", "add"), ("raw", "3")),
            form=pairs(("tid", tid), ("pid", pid), ("value", vote.value)),
            requires_auth=True,
            mutating=True,
            scope=CacheScope.NONE,
            invalidates=(namespace,),
            context=DecodeContext(topic_id=tid, post_id=pid),
        )
        return await FixedRequest(self._executor, descriptor=descriptor).send()

    async def hot_replies(
        self, topic_id: Union[str, int], post_id: Union[str, int]
    ) -> tuple[LightPost, ...]:
        tid = check_id(topic_id, "topic id")
        pid = check_id(post_id, "post id")
        descriptor = RequestDescriptor(
            endpoint=Endpoint.POST_HOT_REPLIES,
            path="nuke.php",
            namespace=topic_namespace(tid),
            query=pairs(("__lib", "post_recommend"), ("__act", "get"), ("pid", pid), ("tid", tid)),
            volatility=Volatility.STANDARD,
            context=DecodeContext(topic_id=tid, post_id=pid),
        )
        return await FixedRequest(self._executor, descriptor=descriptor).send()

    async def quote_content(self, topic_id: Union[str, int], post_id: Union[str, int]) -> str:
        """The BBCode the forum pre-fills when quoting a post."""
        tid = check_id(topic_id, "topic id")
        pid = check_id(post_id, "post id")
        descriptor = RequestDescriptor(
            endpoint=Endpoint.POST_QUOTE_CONTENT,
            path="post.php",
            namespace=topic_namespace(tid),
            query=pairs(("action", "quote"), ("tid", tid), ("pid", pid)),
            requires_auth=True,
            scope=CacheScope.PRIVATE,
            volatility=Volatility.STANDARD,
            context=DecodeContext(topic_id=tid, post_id=pid),
        )
        return await FixedRequest(self._executor, descriptor=descriptor).send()
