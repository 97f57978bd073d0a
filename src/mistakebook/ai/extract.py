from __future__ import annotations

from typing import Optional


def extract_tag(text: str, tag: str) -> Optional[str]:
    """Return the stripped text between ``<tag>`` and ``</tag>``.

    Uses the first opening tag and the *last* closing tag, so a closing tag
    quoted inside the content (or prose around the block) does not cut the
    value short. Returns None when either delimiter is missing or they are
    out of order.
    """

    start_tag = f"<{tag}>"
    end_tag = f"</{tag}>"
    start = text.find(start_tag)
    end = text.rfind(end_tag)

    if start == -1 or end == -1 or start >= end:
        return None

    return text[start + len(start_tag) : end].strip()
