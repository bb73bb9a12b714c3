"""Markdown stripping for model output.

The prompt asks for plain text, but models still emit emphasis, headings,
links and inline code now and then. ``sanitize_summary`` removes them.
"""

import re

_EMPHASIS_RE = re.compile(r"\*+")
_UNDERLINE_RE = re.compile(r"(?<!\w)__(?=\S)(.+?)(?<=\S)__(?!\w)")
_CODE_RE = re.compile(r"`+")
_LINK_RE = re.compile(r"\[([^\]]+)\]\([^)]*\)")
_HEADING_RE = re.compile(r"^[ \t]*(?:#{1,6}(?:[ \t]+|$))+", re.MULTILINE)


def _clean_once(text: str) -> str:
    text = _EMPHASIS_RE.sub("", text)
    text = _UNDERLINE_RE.sub(r"\1", text)
    text = _CODE_RE.sub("", text)
    text = _LINK_RE.sub(r"\1", text)
    text = _HEADING_RE.sub("", text)
    return text.strip()


def sanitize_summary(raw: str) -> str:
    """Return ``raw`` as plain text.

    Removes asterisk runs, ``__text__`` wrappers, line-leading heading markers, link markup (keeping
    the visible text) and inline code delimiters, then trims whitespace.
    Underscores inside words (``user__id``) are content and are kept.
    Passes repeat until nothing changes, so the result is a fixed point:
    ``sanitize_summary(sanitize_summary(x)) == sanitize_summary(x)``.
    """
    text = raw.strip()
    while True:
        cleaned = _clean_once(text)
        if cleaned == text:
            return cleaned
        text = cleaned
