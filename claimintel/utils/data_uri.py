# claimintel/utils/data_uri.py
"""Helpers for inline `data:<mime>;base64,<payload>` attachments."""

import base64
import binascii
import mimetypes
import re
from typing import NamedTuple, Optional

from claimintel.core.logging import get_logger

logger = get_logger(__name__)

_DATA_URI_RE = re.compile(r"^data:(?P<mime>[\w.+-]+/[\w.+-]+)?(?P<params>(;[^;,]+)*?);base64,(?P<data>.*)$", re.DOTALL)


class DataUri(NamedTuple):
    mime_type: str
    data: str  # base64 payload


def parse_data_uri(uri: str) -> Optional[DataUri]:
    """Split a base64 data URI; None for anything else (e.g. a plain URL)."""
    match = _DATA_URI_RE.match(uri or "")
    if not match:
        return None
    return DataUri(
        mime_type=match.group("mime") or "application/octet-stream",
        data=match.group("data")
    )


def decode_data_uri(uri: str) -> bytes:
    """Decode the payload of a base64 data URI."""
    parsed = parse_data_uri(uri)
    if parsed is None:
        raise ValueError("Not a base64 data URI")
    try:
        return base64.b64decode(parsed.data, validate=False)
    except (binascii.Error, ValueError) as e:
        raise ValueError(f"Invalid base64 payload: {e}")


def payload_size(uri: str) -> int:
    """Approximate decoded size of a data URI payload, without decoding it."""
    parsed = parse_data_uri(uri)
    if parsed is None:
        return 0
    data = parsed.data.rstrip("=")
    return (len(data) * 3) // 4


def to_data_uri(content: bytes, content_type: Optional[str] = None, filename: Optional[str] = None) -> str:
    """Encode raw bytes as a base64 data URI."""
    mime = content_type
    if not mime or mime == "application/octet-stream":
        guessed, _ = mimetypes.guess_type(filename or "")
        mime = guessed or mime or "application/octet-stream"
    encoded = base64.b64encode(content).decode("ascii")
    logger.debug(f"Encoded {len(content)} bytes as data URI", mime_type=mime)
    return f"data:{mime};base64,{encoded}"
