"""BBCode parsing for post bodies and topic subjects.

Post bodies arrive HTML-escaped twice and use NGA's BBCode dialect:
``[s:ac:doge]`` stickers, ``[@name]`` mentions, ``======`` dividers with
optional titles, ``[tag=a,b]`` positional arguments and ``[tag k=v]``
keyword attributes. Only known tag names open a tag; anything else in
brackets is kept as text.
"""

from __future__ import annotations

import html
from typing import Optional

from ngakit.records import PostContent, Span, SpanKind, Subject

KNOWN_TAGS = frozenset(
    {
        "b", "i", "u", "del", "sup", "sub", "h", "l", "r", "align", "color",
        "size", "font", "url", "img", "quote", "collapse", "code", "list",
        "table", "tr", "td", "pid", "tid", "uid", "album", "flash", "dice",
        "randomblock", "crypt", "markdown",
    }
)

_LINE_BREAKS = ("\n", "<br/>", "<br>", "<br />", "[stripbr]")


class _Unbalanced(Exception):
    pass


def unescape(text: str) -> str:
    """Undo the forum's double HTML escaping."""
    return html.unescape(html.unescape(text))


def parse_content(text: str) -> PostContent:
    """Parse a post body into spans.

    A tag left open degrades the whole body to a single text span and
    records the reason in :attr:`PostContent.parse_error`.
    """
    raw = unescape(text)
    try:
        spans = _Parser(raw).parse()
    except _Unbalanced as exc:
        plain = raw
        for marker in _LINE_BREAKS[1:]:
            plain = plain.replace(marker, "\n")
        return PostContent(raw=raw, spans=(Span(kind=SpanKind.TEXT, text=plain),), parse_error=str(exc))
    return PostContent(raw=raw, spans=tuple(spans))


def parse_subject(text: str) -> Subject:
    """Split leading ``[tag]`` groups off a topic title.

    Example::

        parse_subject("[News][Important] Hello")  # tags=("News", "Important")
        parse_subject("[Solo]")                   # tags=(), content="[Solo]"
    """
    remaining = unescape(text).strip()
    tags: list[str] = []
    while remaining.startswith("["):
        end = remaining.find("]")
        if end < 0:
            break
        tag = remaining[1:end].strip()
        if tag:
            tags.append(tag)
        remaining = remaining[end + 1:].lstrip()
    if not remaining and tags:
        remaining = f"[{tags.pop()}]"
    return Subject(tags=tuple(tags), content=remaining)


class _Parser:
    def __init__(self, text: str) -> None:
        self.text = text
        self.pos = 0

    def parse(self) -> list[Span]:
        return self._spans(None)

    def _spans(self, closing: Optional[str]) -> list[Span]:
        spans: list[Span] = []
        plain_start = self.pos

        def flush(end: int) -> None:
            if plain_start < end:
                spans.append(Span(kind=SpanKind.TEXT, text=self.text[plain_start:end]))

        while self.pos < len(self.text):
            if closing is not None and self._at_close(closing):
                flush(self.pos)
                self.pos += len(closing) + 3
                return spans
            start = self.pos
            span = self._line_break() or self._divider()
            if span is None and self.text.startswith("[", start):
                span = self._sticker() or self._mention() or self._tag()
            if span is None:
                self.pos += 1
                continue
            flush(start)
            spans.append(span)
            plain_start = self.pos

        if closing is not None:
            raise _Unbalanced(f"unclosed [{closing}] tag")
        flush(self.pos)
        return spans

    def _at_close(self, name: str) -> bool:
        end = self.pos + len(name) + 3
        return self.text[self.pos:end].lower() == f"[/{name}]"

    def _line_break(self) -> Optional[Span]:
        for marker in _LINE_BREAKS:
            if self.text.startswith(marker, self.pos):
                self.pos += len(marker)
                return Span(kind=SpanKind.LINE_BREAK)
        return None

    def _divider(self) -> Optional[Span]:
        run = _run_length(self.text, self.pos, "=")
        if run < 6:
            return None
        after = self.pos + run
        line_end = len(self.text)
        for marker in _LINE_BREAKS:
            found = self.text.find(marker, after)
            if 0 <= found < line_end:
                line_end = found
        close = self.text.find("===", after, line_end)
        if close > after:
            title = self.text[after:close].strip()
            self.pos = close + _run_length(self.text, close, "=")
            return Span(kind=SpanKind.DIVIDER, text=title)
        self.pos = after
        return Span(kind=SpanKind.DIVIDER)

    def _sticker(self) -> Optional[Span]:
        if not self.text.startswith("[s:", self.pos):
            return None
        end = self.text.find("]", self.pos + 3)
        if end < 0:
            return None
        name = self.text[self.pos + 3:end]
        self.pos = end + 1
        return Span(kind=SpanKind.STICKER, text=name)

    def _mention(self) -> Optional[Span]:
        if not self.text.startswith("[@", self.pos):
            return None
        end = self.text.find("]", self.pos + 2)
        if end < 0:
            return None
        name = self.text[self.pos + 2:end].strip()
        self.pos = end + 1
        return Span(kind=SpanKind.MENTION, text=name)

    def _tag(self) -> Optional[Span]:
        if self.text.startswith("[/", self.pos):
            return None
        end = self.text.find("]", self.pos + 1)
        if end < 0:
            return None
        name, args, attrs = _split_tag(self.text[self.pos + 1:end])
        if name not in KNOWN_TAGS:
            return None
        self.pos = end + 1
        children = self._spans(name)
        return Span(
            kind=SpanKind.TAG,
            name=name,
            args=tuple(args),
            attrs=tuple(attrs),
            children=tuple(children),
        )


def _run_length(text: str, start: int, char: str) -> int:
    end = start
    while end < len(text) and text[end] == char:
        end += 1
    return end - start


def _split_tag(body: str) -> tuple[str, list[str], list[tuple[str, str]]]:
    body = body.strip()
    space = body.find(" ")
    equals = body.find("=")
    if space > 0 and (equals < 0 or space < equals):
        name = body[:space].lower()
        attrs = []
        for token in body[space + 1:].split():
            key, _, value = token.partition("=")
            attrs.append((key, value))
        return name, [], attrs
    if equals > 0:
        name = body[:equals].lower()
        return name, [arg.strip() for arg in body[equals + 1:].split(",")], []
    return body.lower(), [], []
