"""Immutable domain records produced by the response decoder.

Every record here is a frozen Pydantic model. Records are only built by
:mod:`ngakit.decoder.projections` and are never partially populated:
optional forum fields that were missing or empty are ``None``, never ``0``
or ``""``.
"""

from __future__ import annotations

import enum
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict

from ngakit.models import ForumId, NotificationType, Vote


class _Record(BaseModel):
    model_config = ConfigDict(frozen=True)


# --- Users ---


class UserNameKind(str, enum.Enum):
    REGULAR = "regular"
    ANONYMOUS = "anonymous"
    NICKNAME = "nickname"


class UserName(_Record):
    """A display name as the forum encodes it.

    Anonymous posters appear as ``#anon_...`` and some accounts carry a
    nickname in the form ``Name(Nick)``.
    """

    kind: UserNameKind
    raw: str
    name: Optional[str] = None
    nickname: Optional[str] = None

    @classmethod
    def parse(cls, raw: str) -> UserName:
        raw = raw.strip()
        if not raw or raw.startswith("#anon_"):
            return cls(kind=UserNameKind.ANONYMOUS, raw=raw)
        if raw.endswith(")") and "(" in raw:
            name, _, nick = raw[:-1].partition("(")
            if name and nick:
                return cls(kind=UserNameKind.NICKNAME, raw=raw, name=name, nickname=nick)
        return cls(kind=UserNameKind.REGULAR, raw=raw, name=raw)

    @property
    def display(self) -> str:
        if self.kind is UserNameKind.ANONYMOUS:
            return "Anonymous"
        if self.kind is UserNameKind.NICKNAME:
            return f"{self.name} ({self.nickname})"
        return self.name or ""


class User(_Record):
    """A forum account. Listing endpoints only fill ``id`` and ``name``."""

    id: str
    name: UserName
    avatar_url: Optional[str] = None
    reputation: Optional[int] = None
    post_count: Optional[int] = None
    registered_at: Optional[datetime] = None
    signature: Optional[str] = None
    honor: Optional[str] = None
    is_admin: bool = False
    is_mod: bool = False
    is_muted: bool = False


class UserSearchResult(_Record):
    id: str
    name: UserName
    avatar_url: Optional[str] = None


# --- Forums ---


class Forum(_Record):
    id: Optional[ForumId] = None
    name: str
    info: Optional[str] = None
    icon_url: Optional[str] = None
    topped_topic_id: Optional[str] = None


class Category(_Record):
    id: str
    name: str
    forums: tuple[Forum, ...] = ()


class Subforum(_Record):
    """A child forum shown above a topic list.

    ``filter_id`` is what :meth:`~ngakit.api.ForumsApi.set_subforum_filter`
    expects. ``selected`` tells whether its topics currently appear in the
    parent listing.
    """

    forum: Forum
    filter_id: Optional[str] = None
    filterable: bool = False
    selected: bool = False


# --- Content ---


class SpanKind(str, enum.Enum):
    TEXT = "text"
    LINE_BREAK = "line_break"
    DIVIDER = "divider"
    STICKER = "sticker"
    MENTION = "mention"
    TAG = "tag"


class Span(_Record):
    """One node of parsed BBCode.

    ``TAG`` spans carry the tag name, its positional ``args`` (from
    ``[tag=a,b]``), its keyword ``attrs`` (from ``[tag k=v]``) and the
    nested ``children``.
    """

    kind: SpanKind
    text: str = ""
    name: Optional[str] = None
    args: tuple[str, ...] = ()
    attrs: tuple[tuple[str, str], ...] = ()
    children: tuple[Span, ...] = ()


class PostContent(_Record):
    raw: str
    spans: tuple[Span, ...] = ()
    parse_error: Optional[str] = None

    @property
    def plain_text(self) -> str:
        return "".join(_span_text(span) for span in self.spans)


def _span_text(span: Span) -> str:
    if span.kind is SpanKind.LINE_BREAK:
        return "\n"
    if span.kind is SpanKind.DIVIDER:
        return f"\n== {span.text} ==\n" if span.text else "\n----\n"
    if span.kind is SpanKind.STICKER:
        return f"[{span.text}]"
    if span.kind is SpanKind.MENTION:
        return f"@{span.text}"
    if span.kind is SpanKind.TAG:
        return "".join(_span_text(child) for child in span.children)
    return span.text


class Subject(_Record):
    tags: tuple[str, ...] = ()
    content: str

    @property
    def full_text(self) -> str:
        return "".join(f"[{tag}]" for tag in self.tags) + self.content


# --- Topics ---


class TopicType(str, enum.Enum):
    NORMAL = "normal"
    POLL = "poll"
    DEBATE = "debate"
    ASSEMBLY = "assembly"


class Topic(_Record):
    id: str
    forum_id: Optional[str] = None
    subject: Subject
    author: User
    posted_at: Optional[datetime] = None
    last_posted_at: Optional[datetime] = None
    last_poster: Optional[UserName] = None
    replies: int = 0
    recommend: Optional[int] = None
    topic_type: TopicType = TopicType.NORMAL
    is_locked: bool = False
    is_bold: bool = False
    is_topped: bool = False
    is_assembly: bool = False


class TopicListResult(_Record):
    topics: tuple[Topic, ...]
    forum: Optional[Forum] = None
    subforums: tuple[Subforum, ...] = ()
    page: int
    total_pages: int


class FavoriteFolder(_Record):
    id: str
    name: str
    count: Optional[int] = None


# --- Posts ---


class AttachmentKind(str, enum.Enum):
    IMAGE = "image"
    AUDIO = "audio"
    VIDEO = "video"
    FILE = "file"


class Attachment(_Record):
    url: str
    name: Optional[str] = None
    kind: AttachmentKind = AttachmentKind.FILE
    size: Optional[int] = None
    width: Optional[int] = None
    height: Optional[int] = None
    thumb_url: Optional[str] = None


class Post(_Record):
    id: str
    topic_id: str
    floor: int
    author: User
    content: PostContent
    posted_at: Optional[datetime] = None
    edit_info: Optional[str] = None
    attachments: tuple[Attachment, ...] = ()
    score: int = 0
    from_client: Optional[str] = None
    signature: Optional[str] = None
    comment_count: int = 0

    @property
    def is_hidden(self) -> bool:
        """Heavily downvoted posts are folded by the forum."""
        return self.score < -50


class TopicDetailsResult(_Record):
    topic: Topic
    posts: tuple[Post, ...]
    forum_name: Optional[str] = None
    page: int
    total_pages: int


class LightPost(_Record):
    """A hot reply or comment, decoded without the surrounding topic."""

    id: str
    author: User
    content: PostContent
    posted_at: Optional[datetime] = None
    score: int = 0


class CommentsResult(_Record):
    comments: tuple[LightPost, ...]
    page: int
    total_pages: int


class UserPost(_Record):
    """An entry of a user's post history."""

    id: str
    topic_id: str
    forum_id: Optional[str] = None
    subject: Subject
    content: PostContent
    posted_at: Optional[datetime] = None


class UserPostsResult(_Record):
    posts: tuple[UserPost, ...]
    page: int
    total_pages: int


class VoteState(_Record):
    up: int
    down: int
    user_vote: Optional[Vote] = None

    @property
    def score(self) -> int:
        return self.up - self.down


class VoteResult(_Record):
    topic_id: str
    post_id: str
    state: VoteState


class ReplyResult(_Record):
    topic_id: str
    post_id: str


class Ack(_Record):
    """Outcome of a mutation that returns nothing but a status message."""

    message: Optional[str] = None


# --- Notifications ---


class Notification(_Record):
    id: str
    kind: NotificationType
    content: str
    time: Optional[datetime] = None
    topic_id: Optional[str] = None
    post_id: Optional[str] = None
    from_user_id: Optional[str] = None
    from_username: Optional[UserName] = None


class NotificationCounts(_Record):
    reply: int = 0
    quote: int = 0
    at: int = 0
    comment: int = 0
    system: int = 0
    message: int = 0

    @property
    def total(self) -> int:
        return self.reply + self.quote + self.at + self.comment + self.system + self.message


class NotificationListResult(_Record):
    kind: NotificationType
    notifications: tuple[Notification, ...]
    page: int
    total_pages: int


# --- Messages ---


class Conversation(_Record):
    id: str
    subject: str
    other_user_id: Optional[str] = None
    other_username: Optional[UserName] = None
    last_time: Optional[datetime] = None
    message_count: int = 0
    is_unread: bool = False


class ConversationListResult(_Record):
    conversations: tuple[Conversation, ...]
    page: int
    total_pages: int


class Message(_Record):
    id: str
    from_user_id: str
    from_username: Optional[UserName] = None
    content: PostContent
    time: Optional[datetime] = None
    is_mine: bool = False


class ConversationResult(_Record):
    id: str
    other_user_id: Optional[str] = None
    other_username: Optional[UserName] = None
    messages: tuple[Message, ...]
    page: int
    total_pages: int


Span.model_rebuild()
