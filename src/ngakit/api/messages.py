"""Private messages: conversation list, conversation pages, sending and replying."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional, Union

from ngakit.decoder.projections import DecodeContext
from ngakit.endpoints import Endpoint
from ngakit.exceptions import BuilderError
from ngakit.records import Ack, ConversationListResult, ConversationResult
from ngakit.request.builder import RequestBuilder, check_id, check_page, check_text, pairs
from ngakit.request.descriptor import CacheScope, RequestDescriptor, Volatility

if TYPE_CHECKING:
    from ngakit.client.executor import Executor

MESSAGES_NAMESPACE = "messages"


def conversation_namespace(conversation_id: str) -> str:
    return f"conversation:{conversation_id}"


@dataclass(frozen=True)
class MessageListBuilder(RequestBuilder[ConversationListResult]):
    page_number: int = 1

    def page(self, page: int) -> MessageListBuilder:
        return self._with(page_number=check_page(page))

    def build(self) -> RequestDescriptor:
        return RequestDescriptor(
            endpoint=Endpoint.MESSAGE_LIST,
            path="nuke.php",
            namespace=MESSAGES_NAMESPACE,
            query=pairs(("__lib", "pm"), ("__act", "list"), ("page", self.page_number)),
            page=self.page_number,
            requires_auth=True,
            scope=CacheScope.PRIVATE,
            volatility=Volatility.RECENT,
            context=DecodeContext(page=self.page_number),
        )


@dataclass(frozen=True)
class ConversationBuilder(RequestBuilder[ConversationResult]):
    conversation_id: str = ""
    page_number: int = 1

    def page(self, page: int) -> ConversationBuilder:
        return self._with(page_number=check_page(page))

    def build(self) -> RequestDescriptor:
        mid = check_id(self.conversation_id, "conversation id")
        return RequestDescriptor(
            endpoint=Endpoint.MESSAGE_CONVERSATION,
            path="nuke.php",
            namespace=conversation_namespace(mid),
            query=pairs(("__lib", "pm"), ("__act", "read"), ("mid", mid), ("page", self.page_number)),
            page=self.page_number,
            requires_auth=True,
            scope=CacheScope.PRIVATE,
            volatility=Volatility.RECENT,
            context=DecodeContext(page=self.page_number, conversation_id=mid),
        )


@dataclass(frozen=True)
class SendMessageBuilder(RequestBuilder[Ack]):
    """Starts a new conversation, or replies to one when ``reply_to`` is set.

    A new conversation needs a recipient; a reply is addressed by its
    conversation id instead.
    """

    reply_to: Optional[str] = None
    recipient: str = ""
    title: str = ""
    text: str = ""

    def to(self, username: str) -> SendMessageBuilder:
        return self._with(recipient=check_text(username, "recipient"))

    def subject(self, subject: str) -> SendMessageBuilder:
        return self._with(title=subject)

    def content(self, text: str) -> SendMessageBuilder:
        return self._with(text=text)

    def build(self) -> RequestDescriptor:
        text = check_text(self.text, "message content")
        if self.reply_to is None and not self.recipient.strip():
            raise BuilderError("recipient username is required")
        invalidates: tuple[str, ...] = (MESSAGES_NAMESPACE,)
        if self.reply_to is not None:
            invalidates += (conversation_namespace(self.reply_to),)
        return RequestDescriptor(
            endpoint=Endpoint.MESSAGE_SEND if self.reply_to is None else Endpoint.MESSAGE_REPLY,
            path="nuke.php",
            namespace=MESSAGES_NAMESPACE,
            query=pairs(("__lib", "pm"), ("__act", "send" if self.reply_to is None else "reply")),
            form=pairs(
                ("to", self.recipient),
                ("subject", self.title),
                ("content", text),
                *((("mid", self.reply_to),) if self.reply_to is not None else ()),
            ),
            requires_auth=True,
            mutating=True,
            scope=CacheScope.NONE,
            invalidates=invalidates,
            context=DecodeContext(conversation_id=self.reply_to),
        )


class MessagesApi:
    """Private message operations. Reach it as ``client.messages``."""

    def __init__(self, executor: Executor) -> None:
        self._executor = executor

    def list(self) -> MessageListBuilder:
        return MessageListBuilder(self._executor)

    def conversation(self, conversation_id: Union[str, int]) -> ConversationBuilder:
        return ConversationBuilder(self._executor, conversation_id=str(conversation_id))

    def send_new(self) -> SendMessageBuilder:
        return SendMessageBuilder(self._executor)

    def reply(self, conversation_id: Union[str, int]) -> SendMessageBuilder:
        return SendMessageBuilder(self._executor, reply_to=check_id(conversation_id, "conversation id"))
