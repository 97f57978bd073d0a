from __future__ import annotations

import base64
import binascii
import re

from .errors import LLMValidationError

_DATA_URL_PREFIX = re.compile(r"^data:image/[\w.+-]+;base64,")


def strip_data_url(value: str) -> str:
    """Drop a ``data:image/<type>;base64,`` prefix if present."""
    return _DATA_URL_PREFIX.sub("", value)


def to_data_url(value: str, mime_type: str = "image/jpeg") -> str:
    if value.startswith("data:"):
        return value
    return f"data:{mime_type};base64,{value}"


def decode_image(value: str) -> bytes:
    try:
        return base64.b64decode(strip_data_url(value), validate=True)
    except (binascii.Error, ValueError) as e:
        raise LLMValidationError(f"Image payload is not valid base64: {e}") from e
