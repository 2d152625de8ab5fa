"""Tests for request builders -- immutability, validation and descriptors."""

from __future__ import annotations

import asyncio
import dataclasses

import pytest

from ngakit.client import NGAClient
from ngakit.endpoints import Endpoint
from ngakit.exceptions import BuilderError
from ngakit.models import ForumId, NotificationType, SearchTimeRange, TopicOrder
from ngakit.request import CacheScope, FixedRequest, Volatility
from ngakit.request.builder import coerce_enum


@pytest.fixture()
def client(anon_config):
    c = NGAClient(anon_config)
    yield c
    asyncio.run(c.aclose())


# ------------------------------------------------------------------ #
# Immutability
# ------------------------------------------------------------------ #


class TestImmutability:
    def test_refinement_returns_new_builder(self, client) -> None:
        base = client.topics.list(ForumId.fid(-7))
        second = base.page(2)
        assert base.page_number == 1
        assert second.page_number == 2
        assert base is not second

    def test_builders_are_frozen(self, client) -> None:
        builder = client.topics.list(ForumId.fid(-7))
        with pytest.raises(dataclasses.FrozenInstanceError):
            builder.page_number = 3  # type: ignore[misc]

    def test_template_reuse(self, client) -> None:
        template = client.posts.reply(1).content("hi")
        quoted = template.quote(5)
        plain = template.anonymous()
        assert template.build().form == plain.build().form[:4] + (("anony", ""),)
        assert dict(quoted.build().form)["pid"] == "5"
        assert dict(plain.build().form)["pid"] == ""

    def test_attachments_accumulate(self, client) -> None:
        builder = client.posts.reply(1).content("x").attachment("a1").attachment("a2")
        assert dict(builder.build().form)["attachs"] == "a1,a2"


# ------------------------------------------------------------------ #
# Validation
# ------------------------------------------------------------------ #


class TestValidation:
    @pytest.mark.parametrize("page", [0, -1, True, "2", 1.5])
    def test_invalid_pages(self, client, page) -> None:
        with pytest.raises(BuilderError):
            client.topics.list(ForumId.fid(-7)).page(page)

    def test_order_accepts_member_value_or_name(self, client) -> None:
        builder = client.topics.list(ForumId.fid(-7))
        assert builder.order(TopicOrder.POST_DATE).order_by is TopicOrder.POST_DATE
        assert builder.order("postdate").order_by is TopicOrder.POST_DATE
        assert builder.order("recommend").order_by is TopicOrder.RECOMMEND

    def test_unknown_enum_value(self, client) -> None:
        with pytest.raises(BuilderError, match="expected one of"):
            client.topics.list(ForumId.fid(-7)).order("hottest")
        with pytest.raises(BuilderError):
            client.notifications.list("mentions")

    def test_coerce_enum_by_name(self) -> None:
        assert coerce_enum(SearchTimeRange, "week", "range") is SearchTimeRange.WEEK
        assert coerce_enum(NotificationType, "AT", "type") is NotificationType.AT

    def test_required_inputs_checked_on_build(self, client) -> None:
        with pytest.raises(BuilderError, match="reply content"):
            client.posts.reply(1).build()
        with pytest.raises(BuilderError, match="topic id"):
            client.topics.details("").build()
        with pytest.raises(BuilderError, match="search keyword"):
            client.topics.search(ForumId.fid(-7), "  ").build()

    def test_message_needs_recipient_unless_reply(self, client) -> None:
        with pytest.raises(BuilderError, match="recipient"):
            client.messages.send_new().content("hi").build()
        descriptor = client.messages.reply(9001).content("hi").build()
        assert descriptor.endpoint is Endpoint.MESSAGE_REPLY

    def test_fixed_request_without_descriptor(self, client) -> None:
        with pytest.raises(BuilderError):
            FixedRequest(client._executor).build()


# ------------------------------------------------------------------ #
# Descriptors
# ------------------------------------------------------------------ #


class TestDescriptors:
    def test_topic_list(self, client) -> None:
        descriptor = client.topics.list(ForumId.stid(99)).page(3).order("postdate").recommended_only().build()
        assert descriptor.path == "thread.php"
        assert descriptor.query == (("stid", "99"), ("page", "3"), ("order_by", "postdate"), ("recommend", "1"))
        assert descriptor.namespace == "forum:stid:99"
        assert descriptor.volatility is Volatility.RECENT
        assert descriptor.context.page == 3

    def test_default_order_is_omitted(self, client) -> None:
        query = dict(client.topics.list(ForumId.fid(-7)).build().query)
        assert query["order_by"] == ""

    def test_topic_details_filters(self, client) -> None:
        descriptor = client.topics.details(5).post(77).author(42).anonymous_only().build()
        query = dict(descriptor.query)
        assert query["pid"] == "77"
        assert query["authorid"] == "42"
        assert query["opt"] == "512"
        assert descriptor.namespace == "topic:5"
        assert descriptor.context.topic_id == "5"

    def test_search_time_range(self, client) -> None:
        builder = client.topics.search(ForumId.fid(-7), "nga")
        assert dict(builder.build().query)["time"] == ""
        assert dict(builder.time_range("day").build().query)["time"] == "86400"

    def test_private_reads(self, client) -> None:
        descriptor = client.topics.favorites().folder(3).build()
        assert descriptor.requires_auth
        assert descriptor.scope is CacheScope.PRIVATE
        assert dict(descriptor.query)["favor"] == "3"

    def test_mutations_are_not_cacheable(self, client) -> None:
        descriptor = client.posts.reply(8).content("hi").build()
        assert descriptor.mutating
        assert not descriptor.cacheable
        assert descriptor.invalidates == ("topic:8",)

    def test_message_reply_invalidates_conversation(self, client) -> None:
        descriptor = client.messages.reply(9001).content("hi").build()
        assert descriptor.invalidates == ("messages", "conversation:9001")
        assert dict(descriptor.form)["mid"] == "9001"


class TestCacheKeys:
    def test_same_request_same_key(self, client) -> None:
        a = client.topics.list(ForumId.fid(-7)).page(2).build()
        b = client.topics.list(ForumId.fid(-7)).page(2).build()
        assert a.cache_key("shared") == b.cache_key("shared")

    def test_inputs_change_key(self, client) -> None:
        base = client.topics.list(ForumId.fid(-7))
        assert base.build().cache_key("shared") != base.page(2).build().cache_key("shared")
        assert base.build().cache_key("shared") != base.order("postdate").build().cache_key("shared")

    def test_scope_changes_key(self, client) -> None:
        descriptor = client.topics.favorites().build()
        assert descriptor.cache_key("uabc") != descriptor.cache_key("udef")

    def test_key_starts_with_namespace(self, client) -> None:
        key = client.topics.details(5).build().cache_key("shared")
        assert key.startswith("topic:5/shared/")
