"""Endpoint-specific projections, the third decoding stage.

Each projection maps a parsed :class:`~ngakit.decoder.tree.Node` tree onto
records from :mod:`ngakit.records`. Lists the forum returns empty are
empty tuples; a record missing a required field fails the whole decode.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Callable, Optional

from ngakit.decoder import fields
from ngakit.decoder.bbcode import parse_content, parse_subject, unescape
from ngakit.decoder.fields import (
    count,
    flag,
    optional_int,
    optional_str,
    projection_error,
    require_int,
    require_str,
    timestamp,
)
from ngakit.decoder.tree import Node
from ngakit.endpoints import Endpoint
from ngakit.exceptions import ApiError
from ngakit.models import ForumId, NotificationType, Vote
from ngakit.records import (
    Ack,
    Attachment,
    AttachmentKind,
    Category,
    CommentsResult,
    Conversation,
    ConversationListResult,
    ConversationResult,
    FavoriteFolder,
    Forum,
    LightPost,
    Message,
    Notification,
    NotificationCounts,
    NotificationListResult,
    Post,
    ReplyResult,
    Subforum,
    Topic,
    TopicDetailsResult,
    TopicListResult,
    TopicType,
    User,
    UserName,
    UserPost,
    UserPostsResult,
    UserSearchResult,
    VoteResult,
    VoteState,
)

FORUM_ICON_URL = "http://img4.ngacn.cc/ngabbs/nga_classic/f/app/{}.png"

TOPICS_PER_PAGE = 35
POSTS_PER_PAGE = 20
COMMENTS_PER_PAGE = 20

# Topic ``type`` bits.
TYPE_LOCKED = 0x10
TYPE_BOLD = 0x20
TYPE_TOPPED = 0x400
TYPE_ASSEMBLY = 0x4000

# Subforum attribute values for which the subforum's topics are listed in the parent.
_SELECTED_SUBFORUM_ATTRIBUTES = frozenset({7, 558, 542, 2606, 2590, 4654})

_TID = re.compile(r"tid=(\d+)")
_PID = re.compile(r"pid=(\d+)")

_IMAGE_EXTS = frozenset({"jpg", "jpeg", "png", "gif", "webp", "bmp"})
_VIDEO_EXTS = frozenset({"mp4", "webm", "mov", "avi", "mkv"})
_AUDIO_EXTS = frozenset({"mp3", "wav", "ogg", "m4a", "flac"})


@dataclass(frozen=True)
class DecodeContext:
    """Request-side facts a projection needs besides the payload.

    Attributes:
        page: Page cursor the request was made with.
        current_uid: Uid of the configured credential, for ``is_mine``
            flags and for telling the other participant of a conversation.
        topic_id: Topic the request was about.
        post_id: Post the request was about.
        user_id: User the request was about.
        conversation_id: Conversation the request was about.
        notification_type: Category of a notification listing.
    """

    page: int = 1
    current_uid: Optional[str] = None
    topic_id: Optional[str] = None
    post_id: Optional[str] = None
    user_id: Optional[str] = None
    conversation_id: Optional[str] = None
    notification_type: Optional[NotificationType] = None


# ---- shared pieces ---- #


def _items(node: Optional[Node], path: Optional[str] = None) -> list[Node]:
    if node is not None and path:
        node = node.find(path)
    if node is None:
        return []
    return node.children_named("item")


def _require_node(root: Node, path: str) -> Node:
    node = root.find(path)
    if node is None:
        raise projection_error(root, path, "required element is missing")
    return node


def _int_at(root: Node, path: str) -> Optional[int]:
    node = root.find(path)
    if node is None or not node.text.strip():
        return None
    try:
        return fields.parse_int(node.text)
    except (ValueError, OverflowError):
        raise projection_error(node, path, f"expected an integer, got {node.text!r}") from None


def _pages(root: Node, per_page_path: Optional[str], default_per_page: int) -> int:
    per_page = _int_at(root, per_page_path) if per_page_path else None
    return fields.total_pages(_int_at(root, "__ROWS"), per_page or default_per_page)


def _message(root: Node) -> Optional[str]:
    node = root.find("data/__MESSAGE") or root.find("__MESSAGE")
    if node is None:
        return None
    items = node.children_named("item")
    if len(items) >= 2 and items[1].text.strip():
        return unescape(items[1].text.strip())
    text = node.text_content()
    return unescape(text) if text else None


def _ack(root: Node, context: DecodeContext) -> Ack:
    return Ack(message=_message(root))


def _username(node: Node, name: str) -> Optional[UserName]:
    raw = node.value(name)
    return None if raw is None else UserName.parse(raw)


def _icon(forum_id: Optional[str]) -> Optional[str]:
    return FORUM_ICON_URL.format(forum_id) if forum_id else None


def _nonzero(value: Optional[str]) -> Optional[str]:
    return None if value is None or value == "0" else value


# ---- forums ---- #


def _forum(node: Node) -> Forum:
    stid = _nonzero(optional_str(node, "stid"))
    fid = _nonzero(optional_str(node, "fid"))
    if stid is not None:
        forum_id: Optional[ForumId] = ForumId.stid(stid)
    elif fid is not None:
        forum_id = ForumId.fid(fid)
    else:
        forum_id = None
    return Forum(
        id=forum_id,
        name=require_str(node, "name"),
        info=optional_str(node, "info"),
        icon_url=_icon(optional_str(node, "id") or fid),
        topped_topic_id=_nonzero(optional_str(node, "topped_topic")),
    )


def project_categories(root: Node, context: DecodeContext) -> tuple[Category, ...]:
    categories = []
    for item in _items(_require_node(root, "data")):
        forums = [
            _forum(forum)
            for group in item.children_named("groups")
            for group_item in group.children_named("item")
            for forums_node in group_item.children_named("forums")
            for forum in forums_node.children_named("item")
        ]
        categories.append(
            Category(id=require_str(item, "_id"), name=require_str(item, "name"), forums=tuple(forums))
        )
    return tuple(categories)


def project_forum_search(root: Node, context: DecodeContext) -> tuple[Forum, ...]:
    return tuple(_forum(item) for item in _items(root))


def project_forum_favorites(root: Node, context: DecodeContext) -> tuple[Forum, ...]:
    return tuple(_forum(item) for item in _items(root, "data/item"))


def _subforum(node: Node) -> Subforum:
    def at(index: int) -> Optional[str]:
        child = node.at(index)
        if child is None or not child.text.strip():
            return None
        return child.text.strip()

    forum_id = at(0)
    if forum_id is None:
        raise projection_error(node, "id", "subforum entry has no id at position 0")
    raw_attributes = at(4)
    try:
        attributes = fields.parse_int(raw_attributes) if raw_attributes else 0
    except (ValueError, OverflowError):
        raise projection_error(node, "attributes", f"expected an integer at position 4, got {raw_attributes!r}") from None
    return Subforum(
        forum=Forum(
            id=ForumId.fid(forum_id),
            name=at(1) or forum_id,
            info=at(2),
            icon_url=_icon(forum_id),
        ),
        filter_id=at(3),
        filterable=attributes > 40,
        selected=attributes in _SELECTED_SUBFORUM_ATTRIBUTES,
    )


# ---- topics ---- #


def _topic_type(bits: int) -> TopicType:
    if bits == 1:
        return TopicType.POLL
    if bits == 2:
        return TopicType.DEBATE
    if bits in (4, 8, 16):
        return TopicType.ASSEMBLY
    return TopicType.NORMAL


def _topic(node: Node) -> Topic:
    topic_id = _nonzero(optional_str(node, "quote_from")) or require_str(node, "tid")
    bits = optional_int(node, "type") or 0
    return Topic(
        id=topic_id,
        forum_id=_nonzero(optional_str(node, "fid")),
        subject=parse_subject(node.value("subject") or ""),
        author=User(id=require_str(node, "authorid"), name=UserName.parse(node.value("author") or "")),
        posted_at=timestamp(node, "postdate"),
        last_posted_at=timestamp(node, "lastpost"),
        last_poster=_username(node, "lastposter"),
        replies=count(node, "replies"),
        recommend=optional_int(node, "recommend"),
        topic_type=_topic_type(bits),
        is_locked=bool(bits & TYPE_LOCKED),
        is_bold=bool(bits & TYPE_BOLD),
        is_topped=bool(bits & TYPE_TOPPED),
        is_assembly=bool(bits & TYPE_ASSEMBLY),
    )


def _listing_forum(root: Node) -> Optional[Forum]:
    node = root.child("__F")
    if node is None or optional_str(node, "name") is None:
        return None
    return _forum(node)


def project_topic_list(root: Node, context: DecodeContext) -> TopicListResult:
    subforums = root.find("__F/sub_forums")
    return TopicListResult(
        topics=tuple(_topic(item) for item in _items(root, "__T")),
        forum=_listing_forum(root),
        subforums=tuple(_subforum(node) for node in subforums.children()) if subforums else (),
        page=context.page,
        total_pages=_pages(root, "__T__ROWS_PAGE", TOPICS_PER_PAGE),
    )


def project_favorite_folders(root: Node, context: DecodeContext) -> tuple[FavoriteFolder, ...]:
    return tuple(
        FavoriteFolder(
            id=require_str(item, "id"),
            name=require_str(item, "name"),
            count=optional_int(item, "length"),
        )
        for item in _items(root, "data/item")
    )


# ---- users ---- #


def _profile(node: Node, fallback_id: Optional[str] = None) -> User:
    user_id = optional_str(node, "uid") or fallback_id
    if user_id is None:
        raise projection_error(node, "uid", "required field is missing or empty")
    group = optional_str(node, "groupid")
    return User(
        id=user_id,
        name=UserName.parse(node.value("username") or ""),
        avatar_url=optional_str(node, "avatar"),
        reputation=optional_int(node, "fame"),
        post_count=optional_int(node, "postnum"),
        registered_at=timestamp(node, "regdate"),
        signature=optional_str(node, "signature"),
        honor=optional_str(node, "honor"),
        is_admin=bool(optional_int(node, "admincheck")),
        is_mod=group in ("5", "6"),
        is_muted=(optional_int(node, "mute") or 0) > 0,
    )


def project_user(root: Node, context: DecodeContext) -> User:
    return _profile(_require_node(root, "data/item"), context.user_id)


def project_user_search(root: Node, context: DecodeContext) -> tuple[UserSearchResult, ...]:
    return tuple(
        UserSearchResult(
            id=require_str(item, "uid"),
            name=UserName.parse(item.value("username") or ""),
            avatar_url=optional_str(item, "avatar"),
        )
        for item in _items(root, "data")
    )


# ---- posts ---- #


def _attachment(node: Node) -> Attachment:
    url = optional_str(node, "attachurl") or optional_str(node, "url")
    if url is None:
        raise projection_error(node, "attachurl", "attachment has no url")
    name = optional_str(node, "name")
    declared = node.value("type") or ""
    ext = optional_str(node, "ext") or (name or url.split("?")[0]).rpartition(".")[2]
    ext = ext.lower()
    if "img" in declared or "image" in declared or ext in _IMAGE_EXTS:
        kind = AttachmentKind.IMAGE
    elif ext in _VIDEO_EXTS:
        kind = AttachmentKind.VIDEO
    elif ext in _AUDIO_EXTS:
        kind = AttachmentKind.AUDIO
    else:
        kind = AttachmentKind.FILE
    width = height = None
    _, _, dims = declared.partition(":")
    w, sep, h = dims.partition("x")
    if sep and w.isdigit() and h.isdigit():
        width, height = int(w), int(h)
    return Attachment(
        url=url,
        name=name or url.rstrip("/").rpartition("/")[2],
        kind=kind,
        size=optional_int(node, "size"),
        width=width,
        height=height,
        thumb_url=optional_str(node, "thumb"),
    )


def _post(node: Node, users: dict[str, User], context: DecodeContext) -> Post:
    author_id = require_str(node, "authorid")
    topic_id = optional_str(node, "tid") or context.topic_id
    if topic_id is None:
        raise projection_error(node, "tid", "required field is missing or empty")
    author = users.get(author_id) or User(id=author_id, name=UserName.parse(node.value("author") or ""))
    attachments = node.child("attachs")
    return Post(
        id=require_str(node, "pid"),
        topic_id=topic_id,
        floor=require_int(node, "lou"),
        author=author,
        content=parse_content(node.value("content") or ""),
        posted_at=timestamp(node, "postdatetimestamp"),
        edit_info=optional_str(node, "alterinfo"),
        attachments=tuple(_attachment(item) for item in _items(attachments)),
        score=count(node, "score"),
        from_client=optional_str(node, "from_client"),
        signature=optional_str(node, "signature"),
        comment_count=count(node, "comment_count"),
    )


def project_topic_details(root: Node, context: DecodeContext) -> TopicDetailsResult:
    users = {}
    for item in _items(root, "__U"):
        user = _profile(item)
        users[user.id] = user
    forum = root.child("__F")
    forum_name = None
    if forum is not None:
        forum_name = optional_str(forum, "name") or (forum.text.strip() or None)
    return TopicDetailsResult(
        topic=_topic(_require_node(root, "__T")),
        posts=tuple(_post(item, users, context) for item in _items(root, "__R")),
        forum_name=forum_name,
        page=context.page,
        total_pages=_pages(root, "__R__ROWS_PAGE", POSTS_PER_PAGE),
    )


def _light_post(node: Node) -> LightPost:
    return LightPost(
        id=require_str(node, "pid"),
        author=User(id=require_str(node, "authorid"), name=UserName.parse(node.value("author") or "")),
        content=parse_content(node.value("content") or ""),
        posted_at=timestamp(node, "postdate"),
        score=count(node, "score"),
    )


def project_hot_replies(root: Node, context: DecodeContext) -> tuple[LightPost, ...]:
    return tuple(_light_post(item) for item in _items(root, "data"))


def project_comments(root: Node, context: DecodeContext) -> CommentsResult:
    return CommentsResult(
        comments=tuple(_light_post(item) for item in _items(root, "data")),
        page=context.page,
        total_pages=_pages(root, None, COMMENTS_PER_PAGE),
    )


def project_quote_content(root: Node, context: DecodeContext) -> str:
    return unescape(require_str(root, "content"))


def project_user_posts(root: Node, context: DecodeContext) -> UserPostsResult:
    posts = []
    for item in _items(root, "__T"):
        post = item.child("__P") or item
        posts.append(
            UserPost(
                id=require_str(post, "pid"),
                topic_id=require_str(item, "tid"),
                forum_id=_nonzero(optional_str(item, "fid")),
                subject=parse_subject(item.value("subject") or ""),
                content=parse_content(post.value("content") or ""),
                posted_at=timestamp(post, "postdate"),
            )
        )
    return UserPostsResult(
        posts=tuple(posts),
        page=context.page,
        total_pages=_pages(root, None, TOPICS_PER_PAGE),
    )


def project_vote(root: Node, context: DecodeContext) -> VoteResult:
    items = _items(root, "data")

    def at(index: int, field: str) -> Optional[int]:
        if index >= len(items) or not items[index].text.strip():
            return None
        try:
            return fields.parse_int(items[index].text)
        except (ValueError, OverflowError):
            raise projection_error(items[index], field, f"expected an integer, got {items[index].text!r}") from None

    up, down = at(0, "up"), at(1, "down")
    if up is None or down is None:
        raise projection_error(root, "up" if up is None else "down", "vote totals missing from data")
    user_vote = {1: Vote.UP, 0: Vote.DOWN}.get(at(2, "user_vote"))  # type: ignore[arg-type]
    return VoteResult(
        topic_id=context.topic_id or "",
        post_id=context.post_id or "",
        state=VoteState(up=up, down=down, user_vote=user_vote),
    )


def project_reply(root: Node, context: DecodeContext) -> ReplyResult:
    items = _items(root, "data")
    if items and items[0].text.strip():
        return ReplyResult(topic_id=context.topic_id or "", post_id=items[0].text.strip())
    raise ApiError(-1, _message(root) or "Reply was not accepted")


def project_comment(root: Node, context: DecodeContext) -> Ack:
    if root.child("data") is None:
        raise ApiError(-1, _message(root) or "Comment was not accepted")
    return _ack(root, context)


# ---- notifications ---- #


def project_notification_counts(root: Node, context: DecodeContext) -> NotificationCounts:
    item = root.find("data/item")
    if item is None:
        return NotificationCounts()
    return NotificationCounts(
        reply=count(item, "reply"),
        quote=count(item, "quote"),
        at=count(item, "at"),
        comment=count(item, "comment"),
        system=count(item, "system"),
        message=count(item, "pm"),
    )


def _notification(node: Node, kind: NotificationType) -> Notification:
    url = node.value("url") or ""
    tid = _TID.search(url)
    pid = _PID.search(url)
    return Notification(
        id=require_str(node, "id"),
        kind=kind,
        content=unescape(node.value("content") or ""),
        time=timestamp(node, "time"),
        topic_id=tid.group(1) if tid else None,
        post_id=pid.group(1) if pid else None,
        from_user_id=optional_str(node, "from_uid"),
        from_username=_username(node, "from_username"),
    )


def project_notification_list(root: Node, context: DecodeContext) -> NotificationListResult:
    kind = context.notification_type or NotificationType.REPLY
    return NotificationListResult(
        kind=kind,
        notifications=tuple(_notification(item, kind) for item in _items(root, "data")),
        page=context.page,
        total_pages=_pages(root, None, POSTS_PER_PAGE),
    )


# ---- messages ---- #


def project_conversations(root: Node, context: DecodeContext) -> ConversationListResult:
    conversations = []
    for item in _items(root, "data"):
        if context.current_uid is not None and optional_str(item, "from_uid") == context.current_uid:
            other_id, other_name = optional_str(item, "to_uid"), _username(item, "to_username")
        else:
            other_id, other_name = optional_str(item, "from_uid"), _username(item, "from_username")
        conversations.append(
            Conversation(
                id=require_str(item, "mid"),
                subject=unescape(item.value("subject") or ""),
                other_user_id=other_id,
                other_username=other_name,
                last_time=timestamp(item, "time"),
                message_count=optional_int(item, "count") or 1,
                is_unread=optional_str(item, "bit") == "1",
            )
        )
    return ConversationListResult(
        conversations=tuple(conversations),
        page=context.page,
        total_pages=_pages(root, None, POSTS_PER_PAGE),
    )


def project_conversation(root: Node, context: DecodeContext) -> ConversationResult:
    participants = root.child("__P")
    other = participants.at(0) if participants is not None else None
    messages = []
    for item in _items(root, "data"):
        from_uid = require_str(item, "from_uid")
        messages.append(
            Message(
                id=require_str(item, "id"),
                from_user_id=from_uid,
                from_username=_username(item, "from_username"),
                content=parse_content(item.value("content") or ""),
                time=timestamp(item, "time"),
                is_mine=from_uid == context.current_uid,
            )
        )
    return ConversationResult(
        id=context.conversation_id or "",
        other_user_id=optional_str(other, "uid") if other is not None else None,
        other_username=_username(other, "username") if other is not None else None,
        messages=tuple(messages),
        page=context.page,
        total_pages=_pages(root, None, POSTS_PER_PAGE),
    )


PROJECTIONS: dict[Endpoint, Callable[[Node, DecodeContext], Any]] = {
    Endpoint.FORUM_CATEGORIES: project_categories,
    Endpoint.FORUM_SEARCH: project_forum_search,
    Endpoint.FORUM_FAVORITES: project_forum_favorites,
    Endpoint.FORUM_MODIFY_FAVORITE: _ack,
    Endpoint.FORUM_SUBFORUM_FILTER: _ack,
    Endpoint.TOPIC_LIST: project_topic_list,
    Endpoint.TOPIC_DETAILS: project_topic_details,
    Endpoint.TOPIC_SEARCH: project_topic_list,
    Endpoint.TOPIC_FAVORITES: project_topic_list,
    Endpoint.TOPIC_FAVORITE_FOLDERS: project_favorite_folders,
    Endpoint.TOPIC_MODIFY_FAVORITE: _ack,
    Endpoint.TOPIC_BY_USER: project_topic_list,
    Endpoint.POST_REPLY: project_reply,
    Endpoint.POST_COMMENT: project_comment,
    Endpoint.POST_VOTE: project_vote,
    Endpoint.POST_HOT_REPLIES: project_hot_replies,
    Endpoint.POST_COMMENTS: project_comments,
    Endpoint.POST_QUOTE_CONTENT: project_quote_content,
    Endpoint.POST_BY_USER: project_user_posts,
    Endpoint.USER_GET: project_user,
    Endpoint.USER_GET_BY_NAME: project_user,
    Endpoint.USER_ME: project_user,
    Endpoint.USER_SEARCH: project_user_search,
    Endpoint.NOTIFICATION_COUNTS: project_notification_counts,
    Endpoint.NOTIFICATION_LIST: project_notification_list,
    Endpoint.NOTIFICATION_MARK_READ: _ack,
    Endpoint.NOTIFICATION_MARK_ALL_READ: _ack,
    Endpoint.MESSAGE_LIST: project_conversations,
    Endpoint.MESSAGE_CONVERSATION: project_conversation,
    Endpoint.MESSAGE_SEND: _ack,
    Endpoint.MESSAGE_REPLY: _ack,
}
