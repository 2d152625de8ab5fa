"""Field coercions used by the projection stage.

Every helper reads one field of a :class:`~ngakit.decoder.tree.Node` and
either returns a typed value or raises :class:`DecodeError` naming the
field and the node path it came from. Missing and empty optional fields
both come back as ``None``.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from ngakit.decoder.tree import Node
from ngakit.exceptions import DecodeError, DecodeStage

_TRUE_FLAGS = frozenset({"1", "true", "yes"})


def projection_error(node: Node, field: str, detail: str) -> DecodeError:
    return DecodeError(DecodeStage.PROJECTION, detail, field=field, position=node.path)


def optional_str(node: Node, name: str) -> Optional[str]:
    value = node.value(name)
    if value is None or not value.strip():
        return None
    return value


def require_str(node: Node, name: str) -> str:
    value = optional_str(node, name)
    if value is None:
        raise projection_error(node, name, "required field is missing or empty")
    return value


def parse_int(raw: str) -> int:
    """Parse NGA's loose numbers: ``"12"``, ``"12.0"`` and ``"1.5e9"`` all count.

    Raises:
        ValueError: If *raw* is not numeric.
    """
    text = raw.strip()
    if any(marker in text for marker in (".", "e", "E")):
        return int(float(text))
    return int(text)


def optional_int(node: Node, name: str) -> Optional[int]:
    value = optional_str(node, name)
    if value is None:
        return None
    try:
        return parse_int(value)
    except (ValueError, OverflowError):
        raise projection_error(node, name, f"expected an integer, got {value!r}") from None


def require_int(node: Node, name: str) -> int:
    value = optional_int(node, name)
    if value is None:
        raise projection_error(node, name, "required field is missing or empty")
    return value


def count(node: Node, name: str) -> int:
    """A counter field; the forum omits counters that are zero."""
    value = optional_int(node, name)
    return 0 if value is None else value


def flag(node: Node, name: str) -> bool:
    value = optional_str(node, name)
    if value is None:
        return False
    return value.strip().lower() in _TRUE_FLAGS


def timestamp(node: Node, name: str) -> Optional[datetime]:
    """A Unix timestamp in seconds, as an aware UTC datetime."""
    seconds = optional_int(node, name)
    if not seconds:
        return None
    try:
        return datetime.fromtimestamp(seconds, tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        raise projection_error(node, name, f"timestamp out of range: {seconds}") from None


def total_pages(rows: Optional[int], per_page: int) -> int:
    if not rows or rows <= 0 or per_page <= 0:
        return 1
    return (rows + per_page - 1) // per_page
