"""Structural parsing, the second decoding stage.

NGA's ``lite=xml`` output encodes records as elements whose fields show up
either as attributes or as child elements, and lists as runs of
``<item>`` siblings addressed by position. :class:`Node` hides that split:
:meth:`Node.value` reads a field from either place and :meth:`Node.at`
gives positional access.
"""

from __future__ import annotations

import html
import re
from typing import Iterator, Optional
from xml.etree import ElementTree

from defusedxml import DefusedXmlException
from defusedxml import ElementTree as SafeElementTree

from ngakit.exceptions import ApiError, DecodeError, DecodeStage

_DECLARATION = re.compile(r"^\s*<\?xml[^>]*\?>")


class Node:
    """Read-only view over one element of the parsed payload."""

    __slots__ = ("_element", "path")

    def __init__(self, element: ElementTree.Element, path: str) -> None:
        self._element = element
        self.path = path

    def __repr__(self) -> str:
        return f"Node({self.path})"

    @property
    def name(self) -> str:
        return self._element.tag

    @property
    def text(self) -> str:
        return self._element.text or ""

    @property
    def attrs(self) -> dict[str, str]:
        return dict(self._element.attrib)

    def children(self) -> list[Node]:
        counts: dict[str, int] = {}
        result = []
        for element in self._element:
            index = counts.get(element.tag, 0)
            counts[element.tag] = index + 1
            result.append(Node(element, f"{self.path}/{element.tag}[{index}]"))
        return result

    def __iter__(self) -> Iterator[Node]:
        return iter(self.children())

    def children_named(self, name: str) -> list[Node]:
        return [child for child in self.children() if child.name == name]

    def child(self, name: str) -> Optional[Node]:
        element = self._element.find(name)
        if element is None:
            return None
        return Node(element, f"{self.path}/{name}")

    def at(self, index: int) -> Optional[Node]:
        """Return the child at *index* regardless of its tag."""
        if 0 <= index < len(self._element):
            return self.children()[index]
        return None

    def find(self, path: str) -> Optional[Node]:
        """Follow a ``/``-separated path of child names from this node."""
        node: Optional[Node] = self
        for part in path.strip("/").split("/"):
            if node is None:
                return None
            node = node.child(part)
        return node

    def value(self, name: str) -> Optional[str]:
        """Field *name* from an attribute or a child element's text."""
        if name in self._element.attrib:
            return self._element.attrib[name]
        element = self._element.find(name)
        if element is None:
            return None
        return element.text or ""

    def text_content(self) -> str:
        """All text below this node, whitespace-trimmed and space-joined."""
        return " ".join(part.strip() for part in self._element.itertext() if part.strip())

    def fields(self) -> dict[str, str]:
        """Attributes merged with the text of every child element."""
        merged = dict(self._element.attrib)
        for element in self._element:
            merged[element.tag] = element.text or ""
        return merged


def parse(text: str) -> Node:
    """Parse decoded payload text into a :class:`Node` tree.

    Raises:
        ApiError: If the payload is a forum error response.
        DecodeError: With stage ``structure`` if the text is empty or not
            well-formed XML.
    """
    body = _DECLARATION.sub("", text, count=1).strip()
    if not body:
        raise DecodeError(DecodeStage.STRUCTURE, "empty response body")
    try:
        root = SafeElementTree.fromstring(body)
    except ElementTree.ParseError as exc:
        line, column = exc.position
        raise DecodeError(
            DecodeStage.STRUCTURE,
            f"malformed XML: {exc}",
            position=f"line {line}, column {column}",
        ) from exc
    except DefusedXmlException as exc:
        raise DecodeError(DecodeStage.STRUCTURE, f"forbidden XML construct: {exc}") from exc
    raise_for_api_error(root)
    return Node(root, f"/{root.tag}")


def raise_for_api_error(root: ElementTree.Element) -> None:
    """Raise :class:`ApiError` if *root* carries an embedded error payload."""
    for element in root.iter():
        if element.tag == "error" and "code" in element.attrib:
            message = element.attrib.get("message") or (element.text or "").strip()
            raise ApiError(_error_code(element.attrib["code"]), html.unescape(message or "Unknown error"))
    error = root.find(".//__error") if root.tag != "__error" else root
    if error is not None:
        message = " ".join(part.strip() for part in error.itertext() if part.strip())
        raise ApiError(-1, html.unescape(message) if message else "Error response received")


def _error_code(raw: str) -> int:
    try:
        return int(raw.strip())
    except ValueError:
        return -1
