"""Identities of the forum operations ngakit knows how to call and decode."""

from __future__ import annotations

import enum


class Endpoint(str, enum.Enum):
    """One logical forum API call. The value is stable and feeds cache keys."""

    FORUM_CATEGORIES = "forums.list"
    FORUM_SEARCH = "forums.search"
    FORUM_FAVORITES = "forums.favorites"
    FORUM_MODIFY_FAVORITE = "forums.modify_favorite"
    FORUM_SUBFORUM_FILTER = "forums.set_subforum_filter"

    TOPIC_LIST = "topics.list"
    TOPIC_DETAILS = "topics.details"
    TOPIC_SEARCH = "topics.search"
    TOPIC_FAVORITES = "topics.favorites"
    TOPIC_FAVORITE_FOLDERS = "topics.favorite_folders"
    TOPIC_MODIFY_FAVORITE = "topics.modify_favorite"
    TOPIC_BY_USER = "topics.by_user"

    POST_REPLY = "posts.reply"
    POST_COMMENT = "posts.comment"
    POST_VOTE = "posts.vote"
    POST_HOT_REPLIES = "posts.hot_replies"
    POST_COMMENTS = "posts.comments"
    POST_QUOTE_CONTENT = "posts.quote_content"
    POST_BY_USER = "posts.by_user"

    USER_GET = "users.get"
    USER_GET_BY_NAME = "users.get_by_name"
    USER_ME = "users.me"
    USER_SEARCH = "users.search"

    NOTIFICATION_COUNTS = "notifications.counts"
    NOTIFICATION_LIST = "notifications.list"
    NOTIFICATION_MARK_READ = "notifications.mark_read"
    NOTIFICATION_MARK_ALL_READ = "notifications.mark_all_read"

    MESSAGE_LIST = "messages.list"
    MESSAGE_CONVERSATION = "messages.conversation"
    MESSAGE_SEND = "messages.send"
    MESSAGE_REPLY = "messages.reply"
