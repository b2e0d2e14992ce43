# claimintel/ai/media.py
"""Build multimodal message parts from inline attachments."""

import base64
from typing import Any, Dict, List, Optional

from claimintel.utils.data_uri import parse_data_uri


def text_part(text: str) -> Dict[str, Any]:
    return {"type": "text", "text": text}


def media_part(uri: str) -> Dict[str, Any]:
    """
    Message part for one attachment.

    Images travel as `image_url` parts (understood by every provider);
    other MIME types (PDF, video, archives) as inline `media` blobs, which
    only the Gemini models accept.
    """
    parsed = parse_data_uri(uri)
    if parsed is None or parsed.mime_type.startswith("image/"):
        return {"type": "image_url", "image_url": {"url": uri}}
    return {
        "type": "media",
        "mime_type": parsed.mime_type,
        "data": base64.b64decode(parsed.data),
    }


def labelled_media(label: str, uri: Optional[str]) -> List[Dict[str, Any]]:
    """A text label followed by the media part, or `<label> None`."""
    if not uri:
        return [text_part(f"{label} None")]
    return [text_part(label), media_part(uri)]
