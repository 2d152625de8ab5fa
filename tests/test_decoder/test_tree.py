"""Tests for ngakit.decoder.tree -- structural parsing and error payloads."""

from __future__ import annotations

import pytest

from ngakit.decoder.tree import parse
from ngakit.exceptions import ApiError, DecodeError, DecodeStage


class TestParse:
    def test_declaration_is_stripped(self) -> None:
        root = parse('<?xml version="1.0" encoding="GBK"?>\n<root><a>1</a></root>')
        assert root.name == "root"
        assert root.path == "/root"

    def test_empty_body(self) -> None:
        with pytest.raises(DecodeError) as exc_info:
            parse("   ")
        assert exc_info.value.stage is DecodeStage.STRUCTURE

    def test_entity_declarations_are_refused(self) -> None:
        with pytest.raises(DecodeError) as exc_info:
            parse('<!DOCTYPE r [<!ENTITY a "aaaa">]><r>&a;</r>')
        assert exc_info.value.stage is DecodeStage.STRUCTURE
        assert "forbidden" in exc_info.value.detail

    def test_malformed_xml_reports_position(self) -> None:
        with pytest.raises(DecodeError) as exc_info:
            parse("<root><a></root>")
        assert exc_info.value.stage is DecodeStage.STRUCTURE
        assert exc_info.value.position.startswith("line 1")


class TestErrorPayloads:
    def test_error_element_with_code(self) -> None:
        with pytest.raises(ApiError) as exc_info:
            parse('<root><error code="2" message="请登录 &amp;amp; 重试"/></root>')
        assert exc_info.value.code == 2
        assert exc_info.value.message == "请登录 & 重试"
        assert exc_info.value.is_auth_error

    def test_non_numeric_code(self) -> None:
        with pytest.raises(ApiError) as exc_info:
            parse('<root><error code="x">bad</error></root>')
        assert exc_info.value.code == -1
        assert exc_info.value.message == "bad"

    def test_legacy_error_block(self) -> None:
        with pytest.raises(ApiError) as exc_info:
            parse("<root><__error><item>没有权限</item></__error></root>")
        assert exc_info.value.code == -1
        assert exc_info.value.message == "没有权限"
        assert not exc_info.value.is_auth_error


class TestNode:
    @pytest.fixture()
    def root(self):
        return parse(
            '<root><user uid="7"><name>Alice</name><empty/></user>'
            "<list><item>a</item><item>b</item><other>c</other></list></root>"
        )

    def test_value_reads_attribute_or_child(self, root) -> None:
        user = root.child("user")
        assert user.value("uid") == "7"
        assert user.value("name") == "Alice"
        assert user.value("empty") == ""
        assert user.value("missing") is None

    def test_positional_access(self, root) -> None:
        items = root.child("list")
        assert items.at(1).text == "b"
        assert items.at(2).name == "other"
        assert items.at(3) is None

    def test_children_named_and_paths(self, root) -> None:
        items = root.child("list").children_named("item")
        assert [item.text for item in items] == ["a", "b"]
        assert items[1].path == "/root/list/item[1]"

    def test_find_follows_paths(self, root) -> None:
        assert root.find("user/name").text == "Alice"
        assert root.find("user/nope/deeper") is None

    def test_fields_merge_attributes_and_children(self, root) -> None:
        assert root.child("user").fields() == {"uid": "7", "name": "Alice", "empty": ""}
