"""Tests for ngakit.decoder.bbcode -- post bodies and topic subjects."""

from __future__ import annotations

from ngakit.decoder.bbcode import parse_content, parse_subject, unescape
from ngakit.records import SpanKind


class TestUnescape:
    def test_double_escaping(self) -> None:
        assert unescape("&amp;lt;b&amp;gt;") == "<b>"
        assert unescape("a &amp;amp; b") == "a & b"


# ------------------------------------------------------------------ #
# Subjects
# ------------------------------------------------------------------ #


class TestParseSubject:
    def test_leading_tags(self) -> None:
        subject = parse_subject("[News][Important] Hello")
        assert subject.tags == ("News", "Important")
        assert subject.content == "Hello"
        assert subject.full_text == "[News][Important]Hello"

    def test_title_made_only_of_a_tag_keeps_it_as_content(self) -> None:
        subject = parse_subject("[Solo]")
        assert subject.tags == ()
        assert subject.content == "[Solo]"

    def test_brackets_inside_title_untouched(self) -> None:
        subject = parse_subject("Hello [world]")
        assert subject.tags == ()
        assert subject.content == "Hello [world]"

    def test_unescapes(self) -> None:
        assert parse_subject("A &amp;amp; B").content == "A & B"


# ------------------------------------------------------------------ #
# Post bodies
# ------------------------------------------------------------------ #


class TestParseContent:
    def test_plain_text(self) -> None:
        content = parse_content("hello")
        assert [span.kind for span in content.spans] == [SpanKind.TEXT]
        assert content.plain_text == "hello"
        assert content.parse_error is None

    def test_nested_tags(self) -> None:
        content = parse_content("[b]bold [i]both[/i][/b] tail")
        bold = content.spans[0]
        assert bold.kind is SpanKind.TAG
        assert bold.name == "b"
        assert bold.children[1].name == "i"
        assert content.plain_text == "bold both tail"

    def test_tag_arguments_and_attributes(self) -> None:
        url = parse_content("[url=https://nga.cn,new]link[/url]").spans[0]
        assert url.args == ("https://nga.cn", "new")
        img = parse_content("[img w=10 h=20]./a.jpg[/img]").spans[0]
        assert img.attrs == (("w", "10"), ("h", "20"))

    def test_closing_tag_is_case_insensitive(self) -> None:
        assert parse_content("[B]x[/b]").spans[0].name == "b"

    def test_unknown_tags_stay_text(self) -> None:
        content = parse_content("[notatag]x[/notatag]")
        assert content.plain_text == "[notatag]x[/notatag]"
        assert all(span.kind is SpanKind.TEXT for span in content.spans)

    def test_stickers_and_mentions(self) -> None:
        spans = parse_content("[s:ac:doge] hi [@Alice]").spans
        assert spans[0].kind is SpanKind.STICKER
        assert spans[0].text == "ac:doge"
        assert spans[-1].kind is SpanKind.MENTION
        assert spans[-1].text == "Alice"

    def test_line_breaks(self) -> None:
        content = parse_content("a&lt;br/&gt;b")
        assert [span.kind for span in content.spans] == [SpanKind.TEXT, SpanKind.LINE_BREAK, SpanKind.TEXT]
        assert content.plain_text == "a\nb"

    def test_divider_with_title(self) -> None:
        spans = parse_content("====== Part 1 ======\nbody").spans
        assert spans[0].kind is SpanKind.DIVIDER
        assert spans[0].text == "Part 1"

    def test_bare_divider(self) -> None:
        spans = parse_content("above\n======\nbelow").spans
        assert SpanKind.DIVIDER in [span.kind for span in spans]

    def test_unclosed_tag_degrades_to_text(self) -> None:
        content = parse_content("[quote]never closed&lt;br/&gt;line")
        assert content.parse_error == "unclosed [quote] tag"
        assert len(content.spans) == 1
        assert content.spans[0].kind is SpanKind.TEXT
        assert content.spans[0].text == "[quote]never closed\nline"
        assert content.raw == "[quote]never closed<br/>line"
