"""Endpoint facades exposed on :class:`~ngakit.client.NGAClient`.

Each facade groups the operations of one area of the forum. Operations
with optional refinements return a frozen builder; the rest are coroutines
that build and send in one step.

Classes:
    :class:`ForumsApi` -- categories, forum search, forum favorites.
    :class:`TopicsApi` -- listings, topic pages, searches, topic favorites.
    :class:`PostsApi` -- replies, comments, votes, hot replies.
    :class:`UsersApi` -- profiles and user search.
    :class:`NotificationsApi` -- counters, listings, read markers.
    :class:`MessagesApi` -- private conversations.
"""

from ngakit.api.forums import ForumsApi
from ngakit.api.messages import MessagesApi
from ngakit.api.notifications import NotificationsApi
from ngakit.api.posts import PostsApi
from ngakit.api.topics import TopicsApi
from ngakit.api.users import UsersApi

__all__ = [
    "ForumsApi",
    "MessagesApi",
    "NotificationsApi",
    "PostsApi",
    "TopicsApi",
    "UsersApi",
]
