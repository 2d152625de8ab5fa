"""Tests for ngakit.cache.disk -- the diskcache-backed cache."""

from __future__ import annotations

import asyncio

import pytest

from ngakit.cache import DiskCache, make_cache_key, namespace_prefix


@pytest.fixture()
def cache(tmp_path):
    c = DiskCache(tmp_path)
    yield c
    c.close()


class TestDiskCache:
    @pytest.mark.asyncio
    async def test_set_get_remove(self, cache: DiskCache) -> None:
        await cache.set("categories/shared/x", b"<root/>", ttl=60)
        assert await cache.get("categories/shared/x") == b"<root/>"
        await cache.remove("categories/shared/x")
        assert await cache.get("categories/shared/x") is None

    @pytest.mark.asyncio
    async def test_ttl_expiry(self, cache: DiskCache) -> None:
        await cache.set("k", b"v", ttl=0.1)
        await asyncio.sleep(0.3)
        assert await cache.get("k") is None
        assert await cache.scan_prefix("k") == []

    @pytest.mark.asyncio
    async def test_scan_prefix(self, cache: DiskCache) -> None:
        await cache.set("topic:1/shared/a", b"1")
        await cache.set("topic:10/shared/b", b"2")
        assert await cache.scan_prefix("topic:1/") == ["topic:1/shared/a"]

    @pytest.mark.asyncio
    async def test_persists_across_instances(self, tmp_path) -> None:
        first = DiskCache(tmp_path)
        await first.set("k", b"kept")
        first.close()
        second = DiskCache(tmp_path)
        try:
            assert await second.get("k") == b"kept"
        finally:
            second.close()

    @pytest.mark.asyncio
    async def test_clear_and_stats(self, cache: DiskCache, tmp_path) -> None:
        await cache.set("a", b"1")
        await cache.set("b", b"2")
        stats = cache.stats()
        assert stats["backend"] == "disk"
        assert stats["size"] == 2
        assert stats["directory"] == str(tmp_path / "responses")
        await cache.clear()
        assert cache.stats()["size"] == 0


class TestKeys:
    def test_key_layout(self) -> None:
        key = make_cache_key("topic:1", "shared", ["topics.details", "tid", "1"])
        namespace, scope, digest = key.split("/")
        assert (namespace, scope) == ("topic:1", "shared")
        assert len(digest) == 64

    def test_deterministic_and_sensitive(self) -> None:
        a = make_cache_key("ns", "shared", [["page", "1"]])
        assert a == make_cache_key("ns", "shared", [["page", "1"]])
        assert a != make_cache_key("ns", "shared", [["page", "2"]])
        assert a != make_cache_key("ns", "u1", [["page", "1"]])

    def test_namespace_prefix_does_not_match_longer_ids(self) -> None:
        assert not make_cache_key("topic:12", "shared", []).startswith(namespace_prefix("topic:1"))
