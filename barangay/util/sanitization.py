"""Sanitisation helpers.

Free-form text submitted by residents and staff (announcement bodies,
processing notes, attendee names) is stripped of HTML tags before it is
stored, so values rendered by the dashboard front end cannot carry
markup.
"""
import re

TAG_RE = re.compile(r"<[^>]+>")


def strip_tags(text: str) -> str:
    """Remove HTML tags from ``text`` and trim surrounding whitespace.

    ``None`` and empty strings both become ``""``.
    """
    if not text:
        return ""
    return TAG_RE.sub("", text).strip()


def clean_optional(text):
    """Like ``strip_tags`` but keeps ``None`` for absent values."""
    if text is None:
        return None
    return strip_tags(text) or None
