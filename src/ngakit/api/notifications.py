"""Notification counters, listings and read markers.

Everything here belongs to the signed-in account, so every call needs a
credential and reads are cached per credential.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Union

from ngakit.decoder.projections import DecodeContext
from ngakit.endpoints import Endpoint
from ngakit.models import NotificationType
from ngakit.records import Ack, NotificationCounts, NotificationListResult
from ngakit.request.builder import (
    FixedRequest,
    RequestBuilder,
    check_id,
    check_page,
    coerce_enum,
    pairs,
)
from ngakit.request.descriptor import CacheScope, RequestDescriptor, Volatility

if TYPE_CHECKING:
    from ngakit.client.executor import Executor

NOTIFICATIONS_NAMESPACE = "notifications"


@dataclass(frozen=True)
class NotificationListBuilder(RequestBuilder[NotificationListResult]):
    kind: NotificationType = NotificationType.REPLY
    page_number: int = 1

    def page(self, page: int) -> NotificationListBuilder:
        return self._with(page_number=check_page(page))

    def build(self) -> RequestDescriptor:
        return RequestDescriptor(
            endpoint=Endpoint.NOTIFICATION_LIST,
            path="nuke.php",
            namespace=NOTIFICATIONS_NAMESPACE,
            query=pairs(
                ("__lib", "noti"),
                ("__act", "get_list"),
                ("type", self.kind.value),
                ("page", self.page_number),
            ),
            page=self.page_number,
            requires_auth=True,
            scope=CacheScope.PRIVATE,
            volatility=Volatility.RECENT,
            context=DecodeContext(page=self.page_number, notification_type=self.kind),
        )


class NotificationsApi:
    """Notification operations. Reach it as ``client.notifications``."""

    def __init__(self, executor: Executor) -> None:
        self._executor = executor

    def list(self, kind: Union[NotificationType, str] = NotificationType.REPLY) -> NotificationListBuilder:
        kind = coerce_enum(NotificationType, kind, "notification type")
        return NotificationListBuilder(self._executor, kind=kind)

    async def counts(self) -> NotificationCounts:
        """Unread counters per category."""
        descriptor = RequestDescriptor(
            endpoint=Endpoint.NOTIFICATION_COUNTS,
            path="nuke.php",
            namespace=NOTIFICATIONS_NAMESPACE,
            query=pairs(("__lib", "noti"), ("__act", "get_all_unread")),
            requires_auth=True,
            scope=CacheScope.PRIVATE,
            volatility=Volatility.RECENT,
        )
        return await FixedRequest(self._executor, descriptor=descriptor).send()

    async def mark_read(self, notification_id: Union[str, int]) -> Ack:
        return await self._mark(
            Endpoint.NOTIFICATION_MARK_READ,
            ("__act", "read"),
            ("id", check_id(notification_id, "notification id")),
        )

    async def mark_all_read(self, kind: Union[NotificationType, str]) -> Ack:
        kind = coerce_enum(NotificationType, kind, "notification type")
        return await self._mark(Endpoint.NOTIFICATION_MARK_ALL_READ, ("__act", "read_all"), ("type", kind.value))

    async def _mark(self, endpoint: Endpoint, *params: tuple[str, str]) -> Ack:
        descriptor = RequestDescriptor(
            endpoint=endpoint,
            path="nuke.php",
            namespace=NOTIFICATIONS_NAMESPACE,
            query=pairs(("__lib", "noti"), *params),
            requires_auth=True,
            mutating=True,
            scope=CacheScope.NONE,
            invalidates=(NOTIFICATIONS_NAMESPACE,),
        )
        return await FixedRequest(self._executor, descriptor=descriptor).send()
