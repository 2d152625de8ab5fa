"""Tests for ngakit.decoder.fields -- field coercions."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from ngakit.decoder import fields
from ngakit.decoder.tree import parse
from ngakit.exceptions import DecodeError, DecodeStage


@pytest.fixture()
def node():
    return parse(
        "<root><item><n>12</n><f>12.0</f><e>1.7e9</e><blank> </blank>"
        "<bad>abc</bad><yes>1</yes><no>0</no><ts>1700000000</ts><zero>0</zero></item></root>"
    ).child("item")


class TestStrings:
    def test_optional_str_blank_is_none(self, node) -> None:
        assert fields.optional_str(node, "blank") is None
        assert fields.optional_str(node, "missing") is None
        assert fields.optional_str(node, "n") == "12"

    def test_require_str_names_field(self, node) -> None:
        with pytest.raises(DecodeError) as exc_info:
            fields.require_str(node, "blank")
        err = exc_info.value
        assert err.stage is DecodeStage.PROJECTION
        assert err.field == "blank"
        assert err.position == "/root/item"


class TestNumbers:
    def test_loose_numbers(self, node) -> None:
        assert fields.optional_int(node, "n") == 12
        assert fields.optional_int(node, "f") == 12
        assert fields.optional_int(node, "e") == 1_700_000_000

    def test_non_numeric_raises(self, node) -> None:
        with pytest.raises(DecodeError) as exc_info:
            fields.optional_int(node, "bad")
        assert exc_info.value.field == "bad"

    def test_count_defaults_to_zero(self, node) -> None:
        assert fields.count(node, "missing") == 0
        assert fields.count(node, "n") == 12

    def test_require_int_missing(self, node) -> None:
        with pytest.raises(DecodeError):
            fields.require_int(node, "missing")

    def test_flag(self, node) -> None:
        assert fields.flag(node, "yes") is True
        assert fields.flag(node, "no") is False
        assert fields.flag(node, "missing") is False


class TestTimestamps:
    def test_seconds_to_utc(self, node) -> None:
        assert fields.timestamp(node, "ts") == datetime(2023, 11, 14, 22, 13, 20, tzinfo=timezone.utc)

    def test_zero_is_absent(self, node) -> None:
        assert fields.timestamp(node, "zero") is None
        assert fields.timestamp(node, "missing") is None


class TestTotalPages:
    @pytest.mark.parametrize(
        "rows, per_page, expected",
        [(None, 20, 1), (0, 20, 1), (20, 20, 1), (21, 20, 2), (70, 35, 2), (71, 35, 3)],
    )
    def test_ceiling(self, rows, per_page, expected) -> None:
        assert fields.total_pages(rows, per_page) == expected
