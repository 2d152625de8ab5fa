"""Charset normalization, the first decoding stage.

NGA answers in GBK even when asked for UTF-8 input, and only sometimes
says so. The charset is taken from the XML declaration when the payload
carries one, then from the transport's ``Content-Type`` hint, then falls
back to GB18030 (a strict superset of GBK and GB2312). Decoding is strict:
a malformed byte sequence is reported, never replaced.
"""

from __future__ import annotations

import codecs
import re
from typing import Optional

from ngakit.exceptions import DecodeError, DecodeStage

DEFAULT_CHARSET = "gb18030"

_XML_DECLARATION = re.compile(rb"""^\s*<\?xml[^>]*?encoding\s*=\s*["']([A-Za-z0-9._-]+)["']""")
_CONTENT_TYPE_CHARSET = re.compile(r"""charset\s*=\s*["']?([A-Za-z0-9._-]+)""", re.IGNORECASE)

# Labels servers use for what is, in practice, GB18030 content.
_WIDENED = {"gbk": DEFAULT_CHARSET, "gb2312": DEFAULT_CHARSET, "cp936": DEFAULT_CHARSET}


def charset_from_content_type(content_type: Optional[str]) -> Optional[str]:
    """Extract the ``charset`` parameter of a ``Content-Type`` header."""
    if not content_type:
        return None
    match = _CONTENT_TYPE_CHARSET.search(content_type)
    return match.group(1) if match else None


def detect_charset(raw: bytes, hint: Optional[str] = None) -> str:
    """Return the codec name to decode *raw* with.

    Args:
        raw: Response body.
        hint: Charset announced by the transport, if any.

    Raises:
        DecodeError: If the declared charset is unknown to Python.
    """
    if raw.startswith(codecs.BOM_UTF8):
        return "utf-8-sig"
    declared: Optional[str] = None
    match = _XML_DECLARATION.match(raw[:256])
    if match:
        declared = match.group(1).decode("ascii")
    elif hint:
        declared = hint
    if declared is None:
        return DEFAULT_CHARSET
    label = declared.strip().lower()
    label = _WIDENED.get(label, label)
    try:
        return codecs.lookup(label).name
    except LookupError as exc:
        raise DecodeError(DecodeStage.CHARSET, f"unknown charset '{declared}'") from exc


def normalize(raw: bytes, hint: Optional[str] = None) -> str:
    """Decode *raw* into text.

    Raises:
        DecodeError: With stage ``charset`` when the charset is unknown or
            the bytes are not valid in it.
    """
    charset = detect_charset(raw, hint)
    try:
        return raw.decode(charset)
    except UnicodeDecodeError as exc:
        raise DecodeError(
            DecodeStage.CHARSET,
            f"invalid {charset} byte sequence: {exc.reason}",
            position=f"byte {exc.start}",
        ) from exc
