"""Response decoding: charset normalization, structural parsing, projection.

The pipeline is pure. Identical bytes, endpoint and context always give
the same record or the same error::

    from ngakit.decoder import decode
    from ngakit.endpoints import Endpoint

    categories = decode(Endpoint.FORUM_CATEGORIES, raw_bytes)

The executor runs the first two stages with :func:`parse_payload` before
caching a response and the last one with :func:`project`.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import ValidationError

from ngakit.decoder import charset, tree
from ngakit.decoder.projections import PROJECTIONS, DecodeContext
from ngakit.decoder.tree import Node
from ngakit.endpoints import Endpoint
from ngakit.exceptions import DecodeError, DecodeStage

__all__ = ["DecodeContext", "Node", "decode", "parse_payload", "project"]


def parse_payload(raw: bytes, charset_hint: Optional[str] = None) -> Node:
    """Run the charset and structure stages.

    Raises:
        DecodeError: With stage ``charset`` or ``structure``.
        ApiError: If the payload is a forum error response.
    """
    return tree.parse(charset.normalize(raw, charset_hint))


def project(endpoint: Endpoint, root: Node, context: Optional[DecodeContext] = None) -> Any:
    """Map a parsed payload onto the record type of *endpoint*.

    Raises:
        DecodeError: With stage ``projection`` naming the offending field.
        ApiError: For mutations whose payload reports a rejection.
    """
    projection = PROJECTIONS[endpoint]
    try:
        return projection(root, context or DecodeContext())
    except ValidationError as exc:
        first = exc.errors()[0]
        field = ".".join(str(part) for part in first.get("loc", ())) or None
        raise DecodeError(DecodeStage.PROJECTION, first.get("msg", str(exc)), field=field, position=root.path) from exc


def decode(
    endpoint: Endpoint,
    raw: bytes,
    *,
    charset_hint: Optional[str] = None,
    context: Optional[DecodeContext] = None,
) -> Any:
    """Decode *raw* into the record type of *endpoint* in one call."""
    return project(endpoint, parse_payload(raw, charset_hint), context)
